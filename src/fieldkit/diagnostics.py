"""Diagnostic records emitted while resolving content fields.

Resolution never raises on a missing or malformed field.  Instead it
writes a ``Diagnostic`` to an injected sink and returns a typed default.
The sink decides whether the record reaches a log, a list, or nowhere.
"""

from __future__ import annotations

import logging
import threading
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from fieldkit.content.models import ContentNode

logger = logging.getLogger("fieldkit.fields")


class DiagnosticLevel(StrEnum):
    """Severity of a diagnostic record."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def logging_level(self) -> int:
        return logging.getLevelNamesMapping()[self.name]


class Diagnostic(BaseModel):
    """A single observation about a node's field."""

    model_config = ConfigDict(frozen=True)

    level: DiagnosticLevel = DiagnosticLevel.WARNING
    message: str
    node_id: str = ""
    key: str = ""
    path: str = ""
    template_id: str = ""
    template_name: str = ""

    @classmethod
    def for_field(
        cls,
        node: ContentNode,
        key: str,
        message: str,
        level: DiagnosticLevel = DiagnosticLevel.WARNING,
    ) -> Diagnostic:
        """Build a record carrying the node's identity and template context."""
        return cls(
            level=level,
            message=message,
            node_id=node.id,
            key=key,
            path=node.path,
            template_id=node.template_id,
            template_name=node.template_name,
        )


class DiagnosticSink(Protocol):
    """Anything that accepts diagnostic records."""

    def emit(self, diagnostic: Diagnostic) -> None: ...


class LoggingSink:
    """Forward diagnostics to a stdlib logger at the record's level."""

    def __init__(self, target: logging.Logger | None = None) -> None:
        self._logger = target or logger

    def emit(self, diagnostic: Diagnostic) -> None:
        self._logger.log(
            diagnostic.level.logging_level,
            "%s",
            diagnostic.message,
            extra={"node_id": diagnostic.node_id, "field_key": diagnostic.key},
        )


class CollectingSink:
    """Append-only in-memory sink, safe for concurrent emission."""

    def __init__(self) -> None:
        self._records: list[Diagnostic] = []
        self._lock = threading.Lock()

    def emit(self, diagnostic: Diagnostic) -> None:
        with self._lock:
            self._records.append(diagnostic)

    @property
    def records(self) -> list[Diagnostic]:
        with self._lock:
            return list(self._records)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


class NullSink:
    """Discard every diagnostic."""

    def emit(self, diagnostic: Diagnostic) -> None:
        return None
