"""Field resolution — typed reads, URL resolution and reference expansion."""

from fieldkit.fields.accessor import FieldAccessor
from fieldkit.fields.coercion import (
    DEFAULT_NUMBER_FORMAT,
    DOUBLE_SENTINEL,
    EPOCH_MIN,
    INTEGER_SENTINEL,
    Absent,
    Malformed,
    NumberFormat,
    Present,
    TypeCoercion,
    parse_temporal,
)
from fieldkit.fields.links import (
    CANONICAL_URL_OPTIONS,
    LanguageEmbedding,
    LinkProvider,
    LinkResolver,
    NodeLookup,
    PathLinkProvider,
    UrlOptions,
)
from fieldkit.fields.media import MediaLibraryUrlProvider, MediaUrlOptions, MediaUrlProvider
from fieldkit.fields.references import MultilistResolver
from fieldkit.fields.resolver import FieldResolver

__all__ = [
    "CANONICAL_URL_OPTIONS",
    "DEFAULT_NUMBER_FORMAT",
    "DOUBLE_SENTINEL",
    "EPOCH_MIN",
    "INTEGER_SENTINEL",
    "Absent",
    "FieldAccessor",
    "FieldResolver",
    "LanguageEmbedding",
    "LinkProvider",
    "LinkResolver",
    "Malformed",
    "MediaLibraryUrlProvider",
    "MediaUrlOptions",
    "MediaUrlProvider",
    "MultilistResolver",
    "NodeLookup",
    "NumberFormat",
    "PathLinkProvider",
    "Present",
    "TypeCoercion",
    "UrlOptions",
    "parse_temporal",
]
