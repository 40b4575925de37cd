"""Resolve link-like fields to a single URL.

Four entry points exist because callers care about different subsets of
field shapes and different escaping/sizing rules:

* ``get_url`` — canonical, server-prefixed URL for link fields.
* ``get_link_url`` — site-relative URL for link and reference fields.
* ``get_image_url`` — media URL for image fields, optionally resized.
* ``get_media_file_url`` — media URL for reference and link fields.

Every entry point returns a string, empty when nothing resolves.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Protocol

from pydantic import BaseModel, ConfigDict

from fieldkit.content.models import (
    ContentNode,
    ImageField,
    LinkField,
    ReferenceField,
)
from fieldkit.fields.accessor import FieldAccessor
from fieldkit.fields.media import MediaLibraryUrlProvider, MediaUrlOptions, MediaUrlProvider

DEFAULT_SERVER_URL = "http://localhost"
DEFAULT_LOCALE = "en"


class LanguageEmbedding(StrEnum):
    """Whether a node URL carries the locale as its first path segment."""

    NEVER = "never"
    ALWAYS = "always"
    AS_NEEDED = "as-needed"


class UrlOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    always_include_server_url: bool = False
    language_embedding: LanguageEmbedding = LanguageEmbedding.AS_NEEDED


CANONICAL_URL_OPTIONS = UrlOptions(
    always_include_server_url=True,
    language_embedding=LanguageEmbedding.NEVER,
)


class LinkProvider(Protocol):
    def item_url(self, node: ContentNode, options: UrlOptions | None = None) -> str: ...


class NodeLookup(Protocol):
    def get(self, node_id: str, locale: str | None = None) -> ContentNode | None: ...


class PathLinkProvider:
    """Node URL = [server] + [/locale] + node path."""

    def __init__(
        self,
        server_url: str = DEFAULT_SERVER_URL,
        default_locale: str = DEFAULT_LOCALE,
        language_embedding: LanguageEmbedding = LanguageEmbedding.AS_NEEDED,
    ) -> None:
        self.server_url = server_url.rstrip("/")
        self.default_locale = default_locale
        self.default_options = UrlOptions(language_embedding=language_embedding)

    def item_url(self, node: ContentNode, options: UrlOptions | None = None) -> str:
        options = options or self.default_options
        path = "/" + node.path.strip("/")
        embed = options.language_embedding == LanguageEmbedding.ALWAYS or (
            options.language_embedding == LanguageEmbedding.AS_NEEDED
            and node.locale != self.default_locale
        )
        if embed:
            path = f"/{node.locale}{path}"
        if options.always_include_server_url:
            return f"{self.server_url}{path}"
        return path


def escape_spaces(url: str) -> str:
    return url.replace(" ", "%20")


class LinkResolver:
    """Computes URLs for link, image and reference fields.

    Targets are looked up in ``store`` in the locale of the node being read.
    """

    def __init__(
        self,
        store: NodeLookup,
        links: LinkProvider | None = None,
        media: MediaUrlProvider | None = None,
        accessor: FieldAccessor | None = None,
    ) -> None:
        self.store = store
        self.links = links or PathLinkProvider()
        self.media = media or MediaLibraryUrlProvider()
        self.accessor = accessor or FieldAccessor()

    def _target(self, node: ContentNode, target_id: str) -> ContentNode | None:
        if not target_id:
            return None
        return self.store.get(target_id, node.locale)

    def get_url(self, node: ContentNode, key: str) -> str:
        """Canonical URL of a link field.

        Precedence: internal target, media target (always with a leading
        ``/``), any other resolvable target, then the literal URL.
        """
        if not self.accessor.has_non_empty_field(node, key):
            return ""
        link = node.fields[key]
        if not isinstance(link, LinkField):
            return ""
        target = self._target(node, link.target_id)
        if link.is_internal and target is not None:
            return self.links.item_url(target, CANONICAL_URL_OPTIONS)
        if link.is_media and target is not None:
            url = self.media.media_url(target, MediaUrlOptions(absolute_path=True))
            return url if url.startswith("/") else f"/{url}"
        if target is not None:
            return self.links.item_url(target, CANONICAL_URL_OPTIONS)
        if link.url:
            return link.url
        return ""

    def get_link_url(self, node: ContentNode, key: str, replace_spaces: bool = False) -> str:
        """Site-relative URL of a link or reference field."""
        url = ""
        found = self.accessor.get_field(node, key)
        if isinstance(found, LinkField):
            target = self._target(node, found.target_id) if found.is_internal else None
            url = self.links.item_url(target) if target is not None else found.url
        elif isinstance(found, ReferenceField):
            target = self._target(node, found.target_id)
            if target is not None:
                url = self.links.item_url(target)
        return escape_spaces(url) if replace_spaces else url

    def get_image_url(
        self,
        node: ContentNode,
        key: str,
        replace_spaces: bool = False,
        width: int | None = None,
        height: int | None = None,
    ) -> str:
        """Media URL of an image field; sized only when both dimensions are given."""
        found = self.accessor.get_field(node, key)
        if isinstance(found, ImageField):
            media_id = found.media_id
        elif isinstance(found, LinkField) and found.is_media:
            media_id = found.target_id
        else:
            return ""
        media = self._target(node, media_id)
        if media is None:
            return ""
        if width is not None and height is not None:
            url = self.media.media_url(media, MediaUrlOptions(width=width, height=height))
        else:
            url = self.media.media_url(media)
        return escape_spaces(url) if replace_spaces else url

    def get_media_file_url(self, node: ContentNode, key: str, replace_spaces: bool = False) -> str:
        """Media URL of a reference or internal link; literal URL otherwise."""
        found = self.accessor.get_field(node, key)
        if found is None:
            return ""
        url = ""
        if isinstance(found, ReferenceField):
            target = self._target(node, found.target_id)
            if target is not None:
                url = self.media.media_url(target)
        elif isinstance(found, LinkField):
            if found.is_internal:
                target = self._target(node, found.target_id)
                if target is not None:
                    url = self.media.media_url(target)
            else:
                url = found.url
        return escape_spaces(url) if replace_spaces else url
