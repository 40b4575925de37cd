"""JSON-backed content store.

Holds every node version of one database (one node per id and locale),
answers lookups by id or path, and acts as a publish engine when it is
the target of a replication.  When opened with a path the whole store
is loaded on init and saved after every write.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, ValidationError

from fieldkit.content.models import ContentNode, normalize_id
from fieldkit.errors import StoreError

if TYPE_CHECKING:
    from fieldkit.publishing.models import PublishInstruction, PublishOutcome

logger = logging.getLogger(__name__)

STORE_SUFFIX = ".json"
DEFAULT_LOCALE = "en"

# Alias to avoid shadowing by ContentStore.locales property
_list = list


class _StoreData(BaseModel):
    """Internal wrapper for JSON serialization."""

    locales: list[str] = Field(default_factory=list)
    nodes: list[ContentNode] = Field(default_factory=list)


class ContentStore:
    """In-memory node database, optionally persisted to a JSON file."""

    def __init__(
        self,
        name: str,
        path: Path | None = None,
        locales: Sequence[str] | None = None,
    ) -> None:
        self.name = name
        self._path = path
        self._nodes: dict[tuple[str, str], ContentNode] = {}
        self._locales: list[str] = []
        data = self._load(path) if path is not None else _StoreData()
        for locale in [*data.locales, *(locales or [])]:
            self._add_locale(locale)
        for node in data.nodes:
            self._put(node)

    @classmethod
    def open(cls, directory: Path, name: str) -> ContentStore:
        """Open ``<directory>/<name>.json``; a missing file is an empty store."""
        return cls(name, path=directory / f"{name}{STORE_SUFFIX}")

    def __repr__(self) -> str:
        return f"ContentStore({self.name!r}, nodes={len(self._nodes)})"

    # ── Private helpers ──────────────────────────────────────────

    def _load(self, path: Path) -> _StoreData:
        if not path.exists():
            return _StoreData()
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            return _StoreData.model_validate(raw)
        except OSError as exc:
            raise StoreError(self.name, f"cannot read {path}: {exc}") from exc
        except (json.JSONDecodeError, ValidationError) as exc:
            raise StoreError(self.name, f"corrupt store file {path}: {exc}") from exc

    def _save(self) -> None:
        if self._path is None:
            return
        data = _StoreData(locales=_list(self._locales), nodes=_list(self._nodes.values()))
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(data.model_dump_json(indent=2), encoding="utf-8")

    def _add_locale(self, locale: str) -> None:
        if locale not in self._locales:
            self._locales.append(locale)

    def _put(self, node: ContentNode) -> None:
        self._add_locale(node.locale)
        self._nodes[node.key] = node

    def _resolve_locale(self, locale: str | None) -> str:
        if locale:
            return locale
        return self._locales[0] if self._locales else DEFAULT_LOCALE

    # ── Read operations ──────────────────────────────────────────

    @property
    def locales(self) -> _list[str]:
        """Locales known to this store, in declaration order."""
        return _list(self._locales)

    def get(self, node_id: str, locale: str | None = None) -> ContentNode | None:
        """Return a node by id in ``locale`` (default: first store locale)."""
        return self._nodes.get((normalize_id(node_id), self._resolve_locale(locale)))

    def get_by_path(self, path: str, locale: str | None = None) -> ContentNode | None:
        """Return a node by full path, compared case-insensitively."""
        wanted = path.rstrip("/").lower()
        locale = self._resolve_locale(locale)
        for node in self._nodes.values():
            if node.locale == locale and node.path.rstrip("/").lower() == wanted:
                return node
        return None

    def lookup(self, id_or_path: str, locale: str | None = None) -> ContentNode | None:
        """Resolve either a path (leading ``/``) or an id."""
        if id_or_path.startswith("/"):
            return self.get_by_path(id_or_path, locale)
        return self.get(id_or_path, locale)

    def children(self, node_id: str, locale: str | None = None) -> _list[ContentNode]:
        """Direct children of a node, ordered by path."""
        parent = normalize_id(node_id)
        locale = self._resolve_locale(locale)
        found = [
            node
            for node in self._nodes.values()
            if node.locale == locale
            and node.parent_id is not None
            and normalize_id(node.parent_id) == parent
        ]
        return sorted(found, key=lambda n: n.path.lower())

    def descendants(self, node_id: str, locale: str | None = None) -> Iterator[ContentNode]:
        """All nodes below ``node_id``, depth first."""
        for child in self.children(node_id, locale):
            yield child
            yield from self.descendants(child.id, locale)

    def revision(self, node_id: str, locale: str | None = None) -> str | None:
        """Revision stamp of a node version, or None if absent."""
        node = self.get(node_id, locale)
        return node.revision if node is not None else None

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        if not isinstance(node_id, str):
            return False
        wanted = normalize_id(node_id)
        return any(key[0] == wanted for key in self._nodes)

    # ── Write operations ─────────────────────────────────────────

    def upsert(self, node: ContentNode) -> None:
        """Insert or replace a node version by (id, locale)."""
        self._put(node)
        self._save()

    def add_locale(self, locale: str) -> None:
        """Declare a locale even if no node uses it yet."""
        self._add_locale(locale)
        self._save()

    # ── Publish engine ───────────────────────────────────────────

    def publish(self, instructions: Sequence[PublishInstruction]) -> PublishOutcome:
        """Copy the instructed nodes from their source store into this store.

        A node version whose revision already matches ours is skipped when
        the instruction asks to compare revisions.  An empty revision never
        matches, so unstamped nodes are always copied.  The store is saved
        once, after the whole batch.
        """
        from fieldkit.publishing.models import PublishOutcome, PublishRecord

        outcome = PublishOutcome(target=self.name, instructions=len(instructions))
        for instruction in instructions:
            if instruction.target is not self:
                raise StoreError(
                    self.name,
                    f"received an instruction addressed to {instruction.target.name!r}",
                )
            for node in self._collect(instruction):
                record = PublishRecord(
                    node_id=node.id,
                    path=node.path,
                    locale=node.locale,
                    revision=node.revision,
                )
                current = self.revision(node.id, node.locale)
                up_to_date = bool(node.revision) and current == node.revision
                if instruction.compare_revisions and up_to_date:
                    outcome.skipped.append(record)
                    continue
                self._put(node.model_copy(deep=True))
                outcome.published.append(record)
        self._save()
        logger.info(
            "Published %d node version(s) into %s, skipped %d up to date",
            len(outcome.published),
            self.name,
            len(outcome.skipped),
        )
        return outcome

    @staticmethod
    def _collect(instruction: PublishInstruction) -> Iterator[ContentNode]:
        source = instruction.source
        root = source.get(instruction.root.id, instruction.locale)
        if root is None:
            logger.debug(
                "Node %s has no %s version in %s",
                instruction.root.id,
                instruction.locale,
                source.name,
            )
            return
        yield root
        if instruction.deep:
            yield from source.descendants(root.id, instruction.locale)
