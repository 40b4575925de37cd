"""Tests for diagnostic records and sinks."""

import logging
from concurrent.futures import ThreadPoolExecutor

from fieldkit.content.models import ContentNode
from fieldkit.diagnostics import (
    CollectingSink,
    Diagnostic,
    DiagnosticLevel,
    LoggingSink,
    NullSink,
)
from fieldkit.fields.accessor import FieldAccessor


def _make_node() -> ContentNode:
    return ContentNode(
        id="{1}",
        path="/sitecore/content/Home",
        template_id="{T}",
        template_name="Page",
    )


class TestDiagnostic:
    def test_for_field_carries_context(self):
        diagnostic = Diagnostic.for_field(_make_node(), "Title", "missing")

        assert diagnostic.level == DiagnosticLevel.WARNING
        assert diagnostic.node_id == "{1}"
        assert diagnostic.path == "/sitecore/content/Home"
        assert diagnostic.template_id == "{T}"
        assert diagnostic.template_name == "Page"
        assert diagnostic.key == "Title"

    def test_level_maps_to_logging(self):
        assert DiagnosticLevel.DEBUG.logging_level == logging.DEBUG
        assert DiagnosticLevel.WARNING.logging_level == logging.WARNING
        assert DiagnosticLevel.ERROR.logging_level == logging.ERROR


class TestSinks:
    def test_collecting_sink_clear(self):
        sink = CollectingSink()
        sink.emit(Diagnostic(message="one"))
        sink.emit(Diagnostic(message="two"))

        assert [d.message for d in sink.records] == ["one", "two"]
        sink.clear()
        assert len(sink) == 0

    def test_collecting_sink_concurrent_emission(self):
        sink = CollectingSink()
        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda i: sink.emit(Diagnostic(message=str(i))), range(500)))

        assert sorted(int(d.message) for d in sink.records) == list(range(500))

    def test_logging_sink_uses_record_level(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="fieldkit.fields"):
            LoggingSink().emit(Diagnostic(message="quiet", level=DiagnosticLevel.DEBUG))

        assert [(r.levelno, r.message) for r in caplog.records] == [(logging.DEBUG, "quiet")]

    def test_null_sink_discards(self, caplog):
        accessor = FieldAccessor(NullSink())
        with caplog.at_level(logging.DEBUG):
            assert accessor.get_value(_make_node(), "Missing", "fallback") == "fallback"

        assert caplog.records == []
