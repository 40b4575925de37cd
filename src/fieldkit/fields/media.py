"""Media URL generation for binary/media nodes."""

from __future__ import annotations

from typing import Protocol
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict

from fieldkit.content.models import ContentNode, simple_id

DEFAULT_MEDIA_PREFIX = "-/media"
DEFAULT_MEDIA_EXTENSION = "ashx"
DEFAULT_MEDIA_ROOT = "/sitecore/media library"


class MediaUrlOptions(BaseModel):
    """Rendition and shape of a media URL."""

    model_config = ConfigDict(frozen=True)

    width: int | None = None
    height: int | None = None
    absolute_path: bool = False


class MediaUrlProvider(Protocol):
    def media_url(self, media: ContentNode, options: MediaUrlOptions | None = None) -> str: ...


class MediaLibraryUrlProvider:
    """Serve media nodes as ``<prefix>/<path below media root>.<extension>``.

    Nodes outside the media root are addressed by their simple id.  Path
    segments are kept verbatim, spaces included.
    """

    def __init__(
        self,
        prefix: str = DEFAULT_MEDIA_PREFIX,
        extension: str = DEFAULT_MEDIA_EXTENSION,
        media_root: str = DEFAULT_MEDIA_ROOT,
    ) -> None:
        self.prefix = prefix.strip("/")
        self.extension = extension.lstrip(".")
        self.media_root = media_root.rstrip("/")

    def _relative_path(self, media: ContentNode) -> str:
        root = self.media_root.lower()
        if root and media.path.lower().startswith(root + "/"):
            return media.path[len(self.media_root):].strip("/")
        return simple_id(media)

    def media_url(self, media: ContentNode, options: MediaUrlOptions | None = None) -> str:
        options = options or MediaUrlOptions()
        url = f"{self.prefix}/{self._relative_path(media)}"
        if self.extension:
            url = f"{url}.{self.extension}"
        query: dict[str, int] = {}
        if options.width is not None:
            query["w"] = options.width
        if options.height is not None:
            query["h"] = options.height
        if query:
            url = f"{url}?{urlencode(query)}"
        return f"/{url}" if options.absolute_path else url
