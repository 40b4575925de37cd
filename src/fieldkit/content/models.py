"""Content domain models — pure Pydantic v2 data types.

A ContentNode is a hierarchical, identified unit of content whose
template decides which fields it carries.  Each field has a fixed
shape (plain text, checkbox, date, link, image, reference, id list)
modelled as a discriminated union on ``shape``.

The authoring tool stores structured fields as text (link markup,
pipe-separated ids, compact ISO dates); every shape accepts that raw
form on input and exposes it again through ``raw``.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, model_validator

CHECKED_VALUE = "1"
ID_LIST_SEPARATOR = "|"

_SIMPLE_ID_RE = re.compile(r"[-{}]+")


def normalize_id(node_id: str) -> str:
    """Canonical form used to compare ids: no braces, lower case."""
    return node_id.strip().strip("{}").lower()


def simple_id(node: ContentNode) -> str:
    """Return the node id without ``{``, ``}`` and ``-``."""
    return _SIMPLE_ID_RE.sub("", node.id)


def _markup_attributes(raw: str, tag: str) -> dict[str, str]:
    """Parse ``<tag a="..." />`` into its attributes, or {} if not markup."""
    text = raw.strip()
    if not text.startswith(f"<{tag}"):
        return {}
    try:
        element = ET.fromstring(text)
    except ET.ParseError:
        return {}
    if element.tag != tag:
        return {}
    return dict(element.attrib)


class FieldShape(StrEnum):
    """Structural kind of a field's stored value."""

    PLAIN = "plain"
    BOOLEAN = "boolean"
    TEMPORAL = "temporal"
    LINK = "link"
    IMAGE = "image"
    REFERENCE = "reference"
    MULTIREFERENCE = "multireference"


class LinkType(StrEnum):
    """Link flavours understood by the link field."""

    INTERNAL = "internal"
    EXTERNAL = "external"
    MEDIA = "media"
    ANCHOR = "anchor"
    MAILTO = "mailto"
    JAVASCRIPT = "javascript"


class PlainField(BaseModel):
    """Free text."""

    shape: Literal["plain"] = "plain"
    value: str = ""

    @property
    def raw(self) -> str:
        return self.value


class BooleanField(BaseModel):
    """Checkbox; ``"1"`` means checked."""

    shape: Literal["boolean"] = "boolean"
    value: str = ""

    @model_validator(mode="before")
    @classmethod
    def _accept_bool(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("value"), bool):
            data = dict(data)
            data["value"] = CHECKED_VALUE if data["value"] else ""
        return data

    @property
    def raw(self) -> str:
        return self.value

    @property
    def checked(self) -> bool:
        return self.value == CHECKED_VALUE


class TemporalField(BaseModel):
    """Date/time stored as compact ISO (``20240101T120000Z``) or ISO 8601.

    An empty value means "unset".
    """

    shape: Literal["temporal"] = "temporal"
    value: str = ""

    @property
    def raw(self) -> str:
        return self.value


class LinkField(BaseModel):
    """General link: internal node, external URL, or media item."""

    shape: Literal["link"] = "link"
    link_type: LinkType = LinkType.EXTERNAL
    target_id: str = ""
    url: str = ""
    text: str = ""
    value: str = ""

    @model_validator(mode="before")
    @classmethod
    def _parse_markup(cls, data: Any) -> Any:
        if not isinstance(data, dict) or not isinstance(data.get("value"), str):
            return data
        attrs = _markup_attributes(data["value"], "link")
        if not attrs:
            return data
        data = dict(data)
        if "linktype" in attrs:
            data.setdefault("link_type", attrs["linktype"])
        data.setdefault("target_id", attrs.get("id", ""))
        data.setdefault("url", attrs.get("url", ""))
        data.setdefault("text", attrs.get("text", ""))
        return data

    @property
    def raw(self) -> str:
        if self.value:
            return self.value
        if not (self.target_id or self.url):
            return ""
        element = ET.Element("link", {"linktype": self.link_type.value, "url": self.url})
        if self.target_id:
            element.set("id", self.target_id)
        if self.text:
            element.set("text", self.text)
        return ET.tostring(element, encoding="unicode", short_empty_elements=True)

    @property
    def is_internal(self) -> bool:
        return self.link_type == LinkType.INTERNAL

    @property
    def is_media(self) -> bool:
        return self.link_type == LinkType.MEDIA


class ImageField(BaseModel):
    """Reference to a media item holding an image."""

    shape: Literal["image"] = "image"
    media_id: str = ""
    alt: str = ""
    value: str = ""

    @model_validator(mode="before")
    @classmethod
    def _parse_markup(cls, data: Any) -> Any:
        if not isinstance(data, dict) or not isinstance(data.get("value"), str):
            return data
        attrs = _markup_attributes(data["value"], "image")
        if not attrs:
            return data
        data = dict(data)
        data.setdefault("media_id", attrs.get("mediaid", ""))
        data.setdefault("alt", attrs.get("alt", ""))
        return data

    @property
    def raw(self) -> str:
        if self.value:
            return self.value
        if not self.media_id:
            return ""
        return f'<image mediaid="{self.media_id}" />'


class ReferenceField(BaseModel):
    """Single target node, stored as its id."""

    shape: Literal["reference"] = "reference"
    target_id: str = ""
    value: str = ""

    @model_validator(mode="before")
    @classmethod
    def _target_from_value(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("value") and not data.get("target_id"):
            data = dict(data)
            data["target_id"] = str(data["value"]).strip()
        return data

    @property
    def raw(self) -> str:
        return self.value or self.target_id


class MultiReferenceField(BaseModel):
    """Ordered list of target node ids (``{a}|{b}`` when stored as text)."""

    shape: Literal["multireference"] = "multireference"
    ids: list[str] = Field(default_factory=list)
    value: str = ""

    @model_validator(mode="before")
    @classmethod
    def _ids_from_value(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("value") and not data.get("ids"):
            data = dict(data)
            data["ids"] = [
                part for part in str(data["value"]).split(ID_LIST_SEPARATOR) if part
            ]
        return data

    @property
    def raw(self) -> str:
        return self.value or ID_LIST_SEPARATOR.join(self.ids)


ContentField = Annotated[
    PlainField
    | BooleanField
    | TemporalField
    | LinkField
    | ImageField
    | ReferenceField
    | MultiReferenceField,
    Field(discriminator="shape"),
]


class ContentNode(BaseModel):
    """A content node as read from a store, in one locale."""

    id: str
    path: str
    name: str = ""
    template_id: str = ""
    template_name: str = ""
    locale: str = "en"
    revision: str = ""
    parent_id: str | None = None
    fields: dict[str, ContentField] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _normalize_fields(cls, data: Any) -> Any:
        """Accept bare strings as plain fields and derive ``name`` from path."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        raw_fields = data.get("fields")
        if isinstance(raw_fields, dict):
            fields: dict[str, Any] = {}
            for key, value in raw_fields.items():
                if isinstance(value, str):
                    fields[key] = {"shape": "plain", "value": value}
                elif isinstance(value, dict) and "shape" not in value:
                    fields[key] = {"shape": "plain", **value}
                else:
                    fields[key] = value
            data["fields"] = fields
        if not data.get("name") and isinstance(data.get("path"), str):
            data["name"] = data["path"].rstrip("/").rsplit("/", 1)[-1]
        return data

    @property
    def key(self) -> tuple[str, str]:
        """Identity of this node version inside a store: (id, locale)."""
        return normalize_id(self.id), self.locale
