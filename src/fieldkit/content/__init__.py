"""Content domain — node and field models plus the JSON-backed store.

Nodes and their fields are read-only inputs to field resolution and the
unit of work for publishing.
"""

from fieldkit.content.models import (
    BooleanField,
    ContentField,
    ContentNode,
    FieldShape,
    ImageField,
    LinkField,
    LinkType,
    MultiReferenceField,
    PlainField,
    ReferenceField,
    TemporalField,
    normalize_id,
    simple_id,
)
from fieldkit.content.store import ContentStore

__all__ = [
    "BooleanField",
    "ContentField",
    "ContentNode",
    "ContentStore",
    "FieldShape",
    "ImageField",
    "LinkField",
    "LinkType",
    "MultiReferenceField",
    "PlainField",
    "ReferenceField",
    "TemporalField",
    "normalize_id",
    "simple_id",
]
