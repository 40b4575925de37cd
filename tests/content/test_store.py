"""Tests for ContentStore — JSON-backed node database and publish engine."""

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest
from fieldkit.content.models import ContentNode
from fieldkit.content.store import ContentStore
from fieldkit.errors import StoreError
from fieldkit.publishing.models import PublishInstruction, PublishMode

ROOT_ID = "{A0000000-0000-0000-0000-000000000000}"
CHILD_B_ID = "{B0000000-0000-0000-0000-000000000000}"
CHILD_A_ID = "{C0000000-0000-0000-0000-000000000000}"
GRANDCHILD_ID = "{D0000000-0000-0000-0000-000000000000}"


def _make_node(
    node_id: str = ROOT_ID,
    path: str = "/sitecore/content/Home",
    locale: str = "en",
    revision: str = "r1",
    **kwargs: object,
) -> ContentNode:
    """Helper to build a ContentNode with sensible defaults."""
    return ContentNode(
        id=node_id,
        path=path,
        locale=locale,
        revision=revision,
        **kwargs,  # type: ignore[arg-type]
    )


def _make_tree(store: ContentStore, locale: str = "en", revision: str = "r1") -> None:
    """Home, with children A and B, and A/Deep below A."""
    store.upsert(_make_node(locale=locale, revision=revision))
    store.upsert(
        _make_node(
            CHILD_B_ID, "/sitecore/content/Home/B", locale, revision, parent_id=ROOT_ID
        )
    )
    store.upsert(
        _make_node(
            CHILD_A_ID, "/sitecore/content/Home/A", locale, revision, parent_id=ROOT_ID
        )
    )
    store.upsert(
        _make_node(
            GRANDCHILD_ID,
            "/sitecore/content/Home/A/Deep",
            locale,
            revision,
            parent_id=CHILD_A_ID,
        )
    )


def _instruction(
    source: ContentStore,
    target: ContentStore,
    root: ContentNode,
    locale: str = "en",
    deep: bool = False,
    compare_revisions: bool = True,
) -> PublishInstruction:
    return PublishInstruction(
        source=source,
        target=target,
        mode=PublishMode.SUBTREE if deep else PublishMode.SINGLE_ITEM,
        locale=locale,
        timestamp=datetime.now(tz=UTC),
        root=root,
        deep=deep,
        compare_revisions=compare_revisions,
    )


class TestUpsertAndGet:
    def test_get_by_id_ignores_braces_and_case(self):
        store = ContentStore("master")
        store.upsert(_make_node())

        assert store.get(ROOT_ID) is not None
        assert store.get(ROOT_ID.lower().strip("{}")) is not None
        assert store.get("{ffffffff-0000-0000-0000-000000000000}") is None

    def test_versions_per_locale(self):
        store = ContentStore("master")
        store.upsert(_make_node(fields={"Title": "Hello"}))
        store.upsert(_make_node(locale="de", fields={"Title": "Hallo"}))

        assert store.get(ROOT_ID, "de").fields["Title"].raw == "Hallo"
        assert store.get(ROOT_ID).fields["Title"].raw == "Hello"
        assert store.locales == ["en", "de"]
        assert len(store) == 2

    def test_overwrites_existing(self):
        store = ContentStore("master")
        store.upsert(_make_node(revision="r1"))
        store.upsert(_make_node(revision="r2"))

        assert store.revision(ROOT_ID) == "r2"
        assert len(store) == 1

    def test_default_locale_is_first_declared(self):
        store = ContentStore("master", locales=["da", "en"])
        store.upsert(_make_node(locale="da"))

        assert store.get(ROOT_ID) is not None
        assert store.get(ROOT_ID, "en") is None

    def test_contains(self):
        store = ContentStore("master")
        store.upsert(_make_node())

        assert ROOT_ID in store
        assert CHILD_A_ID not in store
        assert 42 not in store

    def test_revision_of_missing_node(self):
        assert ContentStore("master").revision(ROOT_ID) is None


class TestPathLookup:
    def test_get_by_path_is_case_insensitive(self):
        store = ContentStore("master")
        _make_tree(store)

        node = store.get_by_path("/Sitecore/Content/home/a/")
        assert node is not None
        assert node.id == CHILD_A_ID

    def test_lookup_by_path_or_id(self):
        store = ContentStore("master")
        _make_tree(store)

        assert store.lookup("/sitecore/content/Home/B").id == CHILD_B_ID
        assert store.lookup(CHILD_B_ID).path == "/sitecore/content/Home/B"
        assert store.lookup("/nowhere") is None


class TestHierarchy:
    def test_children_sorted_by_path(self):
        store = ContentStore("master")
        _make_tree(store)

        assert [c.id for c in store.children(ROOT_ID)] == [CHILD_A_ID, CHILD_B_ID]

    def test_descendants_depth_first(self):
        store = ContentStore("master")
        _make_tree(store)

        assert [d.id for d in store.descendants(ROOT_ID)] == [
            CHILD_A_ID,
            GRANDCHILD_ID,
            CHILD_B_ID,
        ]

    def test_children_are_per_locale(self):
        store = ContentStore("master")
        _make_tree(store)
        store.upsert(_make_node(locale="de"))

        assert store.children(ROOT_ID, "de") == []


class TestPersistence:
    def test_persists_to_disk(self, tmp_path: Path):
        store = ContentStore.open(tmp_path, "master")
        store.upsert(_make_node(fields={"Title": "Hello"}))

        data = json.loads((tmp_path / "master.json").read_text(encoding="utf-8"))
        assert data["locales"] == ["en"]
        assert data["nodes"][0]["id"] == ROOT_ID
        assert data["nodes"][0]["fields"]["Title"] == {"shape": "plain", "value": "Hello"}

    def test_reload(self, tmp_path: Path):
        ContentStore.open(tmp_path, "master").upsert(_make_node())

        reopened = ContentStore.open(tmp_path, "master")
        assert reopened.get(ROOT_ID) is not None

    def test_add_locale_persists(self, tmp_path: Path):
        ContentStore.open(tmp_path, "master").add_locale("pl")

        assert ContentStore.open(tmp_path, "master").locales == ["pl"]

    def test_missing_file_is_empty(self, tmp_path: Path):
        store = ContentStore.open(tmp_path, "web")
        assert len(store) == 0
        assert not (tmp_path / "web.json").exists()

    def test_corrupt_file_raises(self, tmp_path: Path):
        (tmp_path / "master.json").write_text("{not json", encoding="utf-8")

        with pytest.raises(StoreError) as exc_info:
            ContentStore.open(tmp_path, "master")
        assert exc_info.value.store == "master"

    def test_invalid_node_raises(self, tmp_path: Path):
        (tmp_path / "master.json").write_text(
            json.dumps({"nodes": [{"path": "/no/id"}]}), encoding="utf-8"
        )

        with pytest.raises(StoreError, match="corrupt store file"):
            ContentStore.open(tmp_path, "master")


class TestPublishEngine:
    def test_single_item_copies_root_only(self):
        master = ContentStore("master")
        _make_tree(master)
        web = ContentStore("web")

        outcome = web.publish([_instruction(master, web, master.get(ROOT_ID))])

        assert outcome.target == "web"
        assert outcome.instructions == 1
        assert [r.node_id for r in outcome.published] == [ROOT_ID]
        assert len(web) == 1

    def test_deep_copies_subtree(self):
        master = ContentStore("master")
        _make_tree(master)
        web = ContentStore("web")

        outcome = web.publish([_instruction(master, web, master.get(ROOT_ID), deep=True)])

        assert len(outcome.published) == 4
        assert web.get(GRANDCHILD_ID) is not None

    def test_equal_revision_is_skipped(self):
        master = ContentStore("master")
        _make_tree(master)
        web = ContentStore("web")
        web.publish([_instruction(master, web, master.get(ROOT_ID))])

        outcome = web.publish([_instruction(master, web, master.get(ROOT_ID))])

        assert outcome.published == []
        assert [r.node_id for r in outcome.skipped] == [ROOT_ID]

    def test_changed_revision_is_republished(self):
        master = ContentStore("master")
        _make_tree(master)
        web = ContentStore("web")
        web.publish([_instruction(master, web, master.get(ROOT_ID))])
        master.upsert(_make_node(revision="r2", fields={"Title": "New"}))

        outcome = web.publish([_instruction(master, web, master.get(ROOT_ID))])

        assert [r.revision for r in outcome.published] == ["r2"]
        assert web.get(ROOT_ID).fields["Title"].raw == "New"

    def test_unstamped_node_is_always_copied(self):
        master = ContentStore("master")
        master.upsert(_make_node(revision="", fields={"Title": "old"}))
        web = ContentStore("web")
        web.publish([_instruction(master, web, master.get(ROOT_ID))])
        master.upsert(_make_node(revision="", fields={"Title": "new"}))

        outcome = web.publish([_instruction(master, web, master.get(ROOT_ID))])

        assert [r.node_id for r in outcome.published] == [ROOT_ID]
        assert outcome.skipped == []
        assert web.get(ROOT_ID).fields["Title"].raw == "new"

    def test_without_revision_compare_always_copies(self):
        master = ContentStore("master")
        _make_tree(master)
        web = ContentStore("web")
        root = master.get(ROOT_ID)
        web.publish([_instruction(master, web, root)])

        outcome = web.publish([_instruction(master, web, root, compare_revisions=False)])

        assert len(outcome.published) == 1
        assert outcome.skipped == []

    def test_missing_locale_version_is_ignored(self):
        master = ContentStore("master", locales=["en", "de"])
        _make_tree(master)
        web = ContentStore("web")

        outcome = web.publish([_instruction(master, web, master.get(ROOT_ID), locale="de")])

        assert outcome.published == []
        assert outcome.skipped == []

    def test_published_copy_is_independent(self):
        master = ContentStore("master")
        master.upsert(_make_node(fields={"Title": "Hello"}))
        web = ContentStore("web")
        web.publish([_instruction(master, web, master.get(ROOT_ID))])

        assert web.get(ROOT_ID) is not master.get(ROOT_ID)
        assert web.get(ROOT_ID) == master.get(ROOT_ID)

    def test_instruction_for_other_target_raises(self):
        master = ContentStore("master")
        _make_tree(master)
        web = ContentStore("web")
        preview = ContentStore("preview")

        with pytest.raises(StoreError, match="addressed to 'preview'"):
            web.publish([_instruction(master, preview, master.get(ROOT_ID))])

    def test_saves_once_per_batch(self, tmp_path: Path):
        master = ContentStore("master")
        _make_tree(master)
        web = ContentStore.open(tmp_path, "web")

        web.publish([_instruction(master, web, master.get(ROOT_ID), deep=True)])

        data = json.loads((tmp_path / "web.json").read_text(encoding="utf-8"))
        assert len(data["nodes"]) == 4
