"""Field lookup with absence diagnostics and typed defaults."""

from __future__ import annotations

from typing import TypeVar

from fieldkit.content.models import (
    BooleanField,
    ContentField,
    ContentNode,
    ImageField,
    LinkField,
    ReferenceField,
    TemporalField,
)
from fieldkit.diagnostics import Diagnostic, DiagnosticLevel, DiagnosticSink, LoggingSink

F = TypeVar("F", BooleanField, ImageField, LinkField, ReferenceField, TemporalField)


class FieldAccessor:
    """Reads fields off a node; absence degrades to a default plus a diagnostic.

    Every method is total: a missing key never raises.
    """

    def __init__(self, sink: DiagnosticSink | None = None) -> None:
        self.sink: DiagnosticSink = sink or LoggingSink()

    def report(
        self,
        node: ContentNode,
        key: str,
        message: str,
        level: DiagnosticLevel = DiagnosticLevel.WARNING,
    ) -> None:
        """Emit a diagnostic about ``key`` on ``node``."""
        self.sink.emit(Diagnostic.for_field(node, key, message, level))

    # ── Presence checks ──────────────────────────────────────────

    def has_field(self, node: ContentNode, key: str) -> bool:
        """True iff ``node`` carries a field named ``key``."""
        if key in node.fields:
            return True
        self.report(
            node,
            key,
            f"There is no field {key!r} in node {node.id} ({node.path}) "
            f"based on template {node.template_id} ({node.template_name})",
        )
        return False

    def has_non_empty_field(self, node: ContentNode, key: str) -> bool:
        """True iff the field exists and its raw value is not empty."""
        return self.has_field(node, key) and len(node.fields[key].raw) > 0

    # ── Raw values ───────────────────────────────────────────────

    def get_value(self, node: ContentNode, key: str, default: str = "") -> str:
        """Raw value of the field, or ``default`` when the field is absent."""
        return node.fields[key].raw if self.has_field(node, key) else default

    def get_value_or_default_if_empty(
        self, node: ContentNode, key: str, default: str
    ) -> str:
        """Raw value of the field, or ``default`` when absent or empty."""
        return node.fields[key].raw if self.has_non_empty_field(node, key) else default

    # ── Typed field access ───────────────────────────────────────

    def get_field(self, node: ContentNode, key: str) -> ContentField | None:
        return node.fields[key] if self.has_field(node, key) else None

    def get_typed_field(self, node: ContentNode, key: str, shape: type[F]) -> F | None:
        """The field if present and of the requested shape, else None."""
        found = self.get_field(node, key)
        if found is None:
            return None
        if not isinstance(found, shape):
            self.report(
                node,
                key,
                f"Field {key!r} on node {node.id} is a {found.shape} field, "
                f"not {shape.model_fields['shape'].default}",
                DiagnosticLevel.DEBUG,
            )
            return None
        return found

    def get_link_field(self, node: ContentNode, key: str) -> LinkField | None:
        return self.get_typed_field(node, key, LinkField)

    def get_image_field(self, node: ContentNode, key: str) -> ImageField | None:
        return self.get_typed_field(node, key, ImageField)

    def get_checkbox_field(self, node: ContentNode, key: str) -> BooleanField | None:
        return self.get_typed_field(node, key, BooleanField)

    def get_temporal_field(self, node: ContentNode, key: str) -> TemporalField | None:
        return self.get_typed_field(node, key, TemporalField)

    def get_reference_field(self, node: ContentNode, key: str) -> ReferenceField | None:
        return self.get_typed_field(node, key, ReferenceField)
