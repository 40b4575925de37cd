"""One object exposing every field read, wired to a store and a sink."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from fieldkit.content.models import (
    BooleanField,
    ContentNode,
    ImageField,
    LinkField,
    ReferenceField,
    TemporalField,
    simple_id,
)
from fieldkit.diagnostics import DiagnosticSink
from fieldkit.fields.accessor import FieldAccessor
from fieldkit.fields.coercion import Absent, Malformed, NumberFormat, Present, TypeCoercion
from fieldkit.fields.links import LinkProvider, LinkResolver, NodeLookup
from fieldkit.fields.media import MediaUrlProvider
from fieldkit.fields.references import MultilistResolver


class FieldResolver:
    """Facade over FieldAccessor, TypeCoercion, LinkResolver and MultilistResolver.

    All four components share one accessor, hence one diagnostic sink.
    Instances hold no mutable state and can be shared across threads.
    """

    def __init__(
        self,
        store: NodeLookup,
        *,
        sink: DiagnosticSink | None = None,
        links: LinkProvider | None = None,
        media: MediaUrlProvider | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.accessor = FieldAccessor(sink)
        self.coercion = TypeCoercion(self.accessor, clock)
        self.link_resolver = LinkResolver(store, links, media, self.accessor)
        self.multilist = MultilistResolver(store, self.accessor)

    # ── FieldAccessor ────────────────────────────────────────────

    def has_field(self, node: ContentNode, key: str) -> bool:
        return self.accessor.has_field(node, key)

    def has_non_empty_field(self, node: ContentNode, key: str) -> bool:
        return self.accessor.has_non_empty_field(node, key)

    def get_value(self, node: ContentNode, key: str, default: str = "") -> str:
        return self.accessor.get_value(node, key, default)

    def get_value_or_default_if_empty(self, node: ContentNode, key: str, default: str) -> str:
        return self.accessor.get_value_or_default_if_empty(node, key, default)

    def get_link_field(self, node: ContentNode, key: str) -> LinkField | None:
        return self.accessor.get_link_field(node, key)

    def get_image_field(self, node: ContentNode, key: str) -> ImageField | None:
        return self.accessor.get_image_field(node, key)

    def get_checkbox_field(self, node: ContentNode, key: str) -> BooleanField | None:
        return self.accessor.get_checkbox_field(node, key)

    def get_temporal_field(self, node: ContentNode, key: str) -> TemporalField | None:
        return self.accessor.get_temporal_field(node, key)

    def get_reference_field(self, node: ContentNode, key: str) -> ReferenceField | None:
        return self.accessor.get_reference_field(node, key)

    @staticmethod
    def simple_id(node: ContentNode) -> str:
        return simple_id(node)

    # ── TypeCoercion ─────────────────────────────────────────────

    def read_integer(self, node: ContentNode, key: str) -> Present[int] | Absent | Malformed:
        return self.coercion.read_integer(node, key)

    def get_integer(self, node: ContentNode, key: str) -> int:
        return self.coercion.get_integer(node, key)

    def read_double(
        self, node: ContentNode, key: str, number_format: NumberFormat | None = None
    ) -> Present[float] | Absent | Malformed:
        return self.coercion.read_double(node, key, number_format)

    def get_double(
        self, node: ContentNode, key: str, number_format: NumberFormat | None = None
    ) -> float:
        return self.coercion.get_double(node, key, number_format)

    def get_checked_boolean(self, node: ContentNode, key: str) -> bool:
        return self.coercion.get_checked_boolean(node, key)

    def read_temporal(self, node: ContentNode, key: str) -> Present[datetime] | Absent | Malformed:
        return self.coercion.read_temporal(node, key)

    def get_temporal(self, node: ContentNode, key: str) -> datetime | None:
        return self.coercion.get_temporal(node, key)

    def is_temporal_set(self, node: ContentNode, key: str) -> bool:
        return self.coercion.is_temporal_set(node, key)

    def get_temporal_value_or_min(self, node: ContentNode, key: str) -> datetime:
        return self.coercion.get_temporal_value_or_min(node, key)

    def is_active(
        self, node: ContentNode, from_key: str, to_key: str, now: datetime | None = None
    ) -> bool:
        return self.coercion.is_active(node, from_key, to_key, now)

    # ── LinkResolver ─────────────────────────────────────────────

    def get_url(self, node: ContentNode, key: str) -> str:
        return self.link_resolver.get_url(node, key)

    def get_link_url(self, node: ContentNode, key: str, replace_spaces: bool = False) -> str:
        return self.link_resolver.get_link_url(node, key, replace_spaces)

    def get_image_url(
        self,
        node: ContentNode,
        key: str,
        replace_spaces: bool = False,
        width: int | None = None,
        height: int | None = None,
    ) -> str:
        return self.link_resolver.get_image_url(node, key, replace_spaces, width, height)

    def get_media_file_url(self, node: ContentNode, key: str, replace_spaces: bool = False) -> str:
        return self.link_resolver.get_media_file_url(node, key, replace_spaces)

    # ── MultilistResolver ────────────────────────────────────────

    def get_referenced_ids(self, node: ContentNode, key: str) -> list[str]:
        return self.multilist.get_referenced_ids(node, key)

    def get_referenced_nodes(
        self,
        node: ContentNode,
        key: str,
        store: NodeLookup | None = None,
        locale: str | None = None,
    ) -> list[ContentNode]:
        return self.multilist.get_referenced_nodes(node, key, store, locale)

    def get_reference_target(self, node: ContentNode, key: str) -> ContentNode | None:
        return self.multilist.get_reference_target(node, key)

    def get_reference_target_field(self, node: ContentNode, key: str, target_key: str) -> str:
        return self.multilist.get_reference_target_field(node, key, target_key)
