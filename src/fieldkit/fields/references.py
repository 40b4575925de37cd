"""Expand reference and id-list fields into nodes."""

from __future__ import annotations

import logging

from fieldkit.content.models import (
    ID_LIST_SEPARATOR,
    ContentField,
    ContentNode,
    MultiReferenceField,
    ReferenceField,
)
from fieldkit.fields.accessor import FieldAccessor
from fieldkit.fields.links import NodeLookup

logger = logging.getLogger(__name__)


def _reference_ids(found: ContentField) -> list[str]:
    """Ids carried by a field, in stored order, duplicates kept."""
    if isinstance(found, MultiReferenceField):
        return list(found.ids)
    if isinstance(found, ReferenceField):
        return [found.target_id] if found.target_id else []
    return [part for part in found.raw.split(ID_LIST_SEPARATOR) if part]


class MultilistResolver:
    """Best-effort resolution of referenced nodes.

    ``store`` is the default store used when a call names none.
    """

    def __init__(self, store: NodeLookup, accessor: FieldAccessor | None = None) -> None:
        self.store = store
        self.accessor = accessor or FieldAccessor()

    def get_referenced_ids(self, node: ContentNode, key: str) -> list[str]:
        """Raw ids from the field, verbatim."""
        found = self.accessor.get_field(node, key)
        return _reference_ids(found) if found is not None else []

    def get_referenced_nodes(
        self,
        node: ContentNode,
        key: str,
        store: NodeLookup | None = None,
        locale: str | None = None,
    ) -> list[ContentNode]:
        """Resolve every referenced id; ids that do not resolve are dropped."""
        store = store or self.store
        locale = locale or node.locale
        resolved: list[ContentNode] = []
        for node_id in self.get_referenced_ids(node, key):
            target = store.get(node_id, locale)
            if target is None:
                logger.debug("Dropping dangling reference %s from %s on %s", node_id, key, node.id)
                continue
            resolved.append(target)
        return resolved

    def get_reference_target(self, node: ContentNode, key: str) -> ContentNode | None:
        """Target of a reference field, or None if absent or missing."""
        found = self.accessor.get_reference_field(node, key)
        if found is None or not found.target_id:
            return None
        return self.store.get(found.target_id, node.locale)

    def get_reference_target_field(self, node: ContentNode, key: str, target_key: str) -> str:
        """Value of ``target_key`` on the reference target, "" if either hop fails."""
        target = self.get_reference_target(node, key)
        if target is None or not self.accessor.has_non_empty_field(target, target_key):
            return ""
        return self.accessor.get_value(target, target_key)
