"""Shared fixtures: an authoring store holding one richly-populated node."""

import pytest
from fieldkit.content.models import ContentNode
from fieldkit.content.store import ContentStore
from fieldkit.diagnostics import CollectingSink
from fieldkit.fields.links import PathLinkProvider
from fieldkit.fields.resolver import FieldResolver
from sample_content import ITEM_ID, SERVER_URL, build_master


@pytest.fixture
def master() -> ContentStore:
    return build_master()


@pytest.fixture
def item(master: ContentStore) -> ContentNode:
    node = master.get(ITEM_ID)
    assert node is not None
    return node


@pytest.fixture
def sink() -> CollectingSink:
    return CollectingSink()


@pytest.fixture
def resolver(master: ContentStore, sink: CollectingSink) -> FieldResolver:
    return FieldResolver(master, sink=sink, links=PathLinkProvider(server_url=SERVER_URL))
