"""Tests for MultilistResolver — id lists and reference targets."""

import pytest
from sample_content import MEDIA_ID, MEDIA_PATH, MISSING_ID, REFERENCED_ID, REFERENCED_PATH
from fieldkit.content.models import ContentNode
from fieldkit.content.store import ContentStore
from fieldkit.diagnostics import CollectingSink
from fieldkit.fields.accessor import FieldAccessor
from fieldkit.fields.references import MultilistResolver


@pytest.fixture
def multilist(master: ContentStore, sink: CollectingSink) -> MultilistResolver:
    return MultilistResolver(master, FieldAccessor(sink))


class TestGetReferencedIds:
    def test_ids_in_stored_order_with_duplicates(self, multilist: MultilistResolver, item):
        assert multilist.get_referenced_ids(item, "Multilist Field") == [
            REFERENCED_ID,
            MISSING_ID,
            MEDIA_ID,
            REFERENCED_ID,
        ]

    def test_single_reference(self, multilist: MultilistResolver, item):
        assert multilist.get_referenced_ids(item, "Reference Field") == [REFERENCED_ID]

    def test_plain_text_is_split(self, multilist: MultilistResolver):
        node = ContentNode(id="{1}", path="/n", fields={"Ids": "{a}|{b}||{a}"})
        assert multilist.get_referenced_ids(node, "Ids") == ["{a}", "{b}", "{a}"]

    def test_empty_and_missing(self, multilist: MultilistResolver, item, sink: CollectingSink):
        assert multilist.get_referenced_ids(item, "Empty Field") == []
        assert multilist.get_referenced_ids(item, "Not Existing Field") == []
        assert len(sink) == 1


class TestGetReferencedNodes:
    def test_dangling_ids_are_dropped(
        self, multilist: MultilistResolver, item, sink: CollectingSink
    ):
        nodes = multilist.get_referenced_nodes(item, "Multilist Field")

        assert [n.path for n in nodes] == [REFERENCED_PATH, MEDIA_PATH, REFERENCED_PATH]
        assert len(sink) == 0

    def test_explicit_store(self, multilist: MultilistResolver, master: ContentStore, item):
        other = ContentStore("web", locales=["en"])
        other.upsert(master.get(MEDIA_ID))

        nodes = multilist.get_referenced_nodes(item, "Multilist Field", store=other)
        assert [n.id for n in nodes] == [MEDIA_ID]

    def test_explicit_locale(self, multilist: MultilistResolver, master: ContentStore, item):
        master.upsert(master.get(REFERENCED_ID).model_copy(update={"locale": "de"}))

        nodes = multilist.get_referenced_nodes(item, "Multilist Field", locale="de")
        assert [(n.id, n.locale) for n in nodes] == [(REFERENCED_ID, "de"), (REFERENCED_ID, "de")]

    def test_missing_field(self, multilist: MultilistResolver, item):
        assert multilist.get_referenced_nodes(item, "Not Existing Field") == []


class TestReferenceTarget:
    def test_resolves_target(self, multilist: MultilistResolver, item):
        target = multilist.get_reference_target(item, "Reference Field")
        assert target is not None
        assert target.path == REFERENCED_PATH

    def test_dangling_target(self, multilist: MultilistResolver, item):
        assert multilist.get_reference_target(item, "Reference Field Dangling") is None

    def test_missing_field(self, multilist: MultilistResolver, item):
        assert multilist.get_reference_target(item, "Not Existing Field") is None

    def test_non_reference_field(self, multilist: MultilistResolver, item):
        assert multilist.get_reference_target(item, "Text Field") is None

    def test_target_field_value(self, multilist: MultilistResolver, item):
        assert multilist.get_reference_target_field(item, "Reference Field", "Text Field") == (
            "Value 1"
        )

    def test_target_field_missing_or_empty(self, multilist: MultilistResolver, item):
        assert multilist.get_reference_target_field(item, "Reference Field", "Nope") == ""
        assert multilist.get_reference_target_field(item, "Reference Field", "Empty Field") == ""

    def test_target_field_through_dangling_reference(self, multilist: MultilistResolver, item):
        assert (
            multilist.get_reference_target_field(item, "Reference Field Dangling", "Text Field")
            == ""
        )
