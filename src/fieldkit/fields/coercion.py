"""Typed reads of raw field text: integers, doubles, checkboxes, dates.

Parsing never consults the process locale.  Numbers are read with an
explicit ``NumberFormat`` whose default uses ``.`` as decimal separator,
so the same stored text yields the same value on every machine.

Two layers are offered:

* ``read_*`` methods return ``Present(value)``, ``Absent()`` or
  ``Malformed(raw)`` so callers can tell a missing field from a bad one.
* ``get_*`` methods collapse both failures into a fixed sentinel
  (``-1``, ``-1.0``, epoch minimum) and emit a diagnostic.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

from fieldkit.content.models import BooleanField, ContentNode
from fieldkit.fields.accessor import FieldAccessor

T = TypeVar("T")

INTEGER_SENTINEL = -1
DOUBLE_SENTINEL = -1.0
EPOCH_MIN = datetime.min.replace(tzinfo=UTC)

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1
_INTEGER_RE = re.compile(r"^\s*[+-]?\d+\s*$", re.ASCII)
_DECIMAL_RE = re.compile(r"^(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$", re.ASCII)
_COMPACT_DATE_RE = re.compile(
    r"^(\d{4})(\d{2})(\d{2})"
    r"(?:T(\d{2})(\d{2})(\d{2})(?::(\d{1,6}))?)?"
    r"(Z)?$"
)


# ── Results ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class Present(Generic[T]):
    """The field exists and parsed cleanly."""

    value: T

    def value_or(self, default: T) -> T:
        return self.value


@dataclass(frozen=True)
class Absent:
    """The node carries no such field."""

    def value_or(self, default: T) -> T:
        return default


@dataclass(frozen=True)
class Malformed:
    """The field exists but its text could not be parsed."""

    raw: str

    def value_or(self, default: T) -> T:
        return default


# ── Number format ────────────────────────────────────────────────


class NumberFormat(BaseModel):
    """Separators used to read a decimal number.

    The currency separators are accepted as an alternative spelling, the
    way a permissive "any" number style does; with the invariant values
    this lets ``"100,000.001"`` read as ``100000.001``.
    """

    model_config = ConfigDict(frozen=True)

    decimal_separator: str = "."
    group_separator: str = ""
    currency_decimal_separator: str = "."
    currency_group_separator: str = ","
    negative_sign: str = "-"
    positive_sign: str = "+"

    def parse(self, text: str) -> float:
        """Parse ``text`` or raise ValueError."""
        body = text.strip()
        negative = False
        if len(body) >= 2 and body.startswith("(") and body.endswith(")"):
            negative = True
            body = body[1:-1].strip()
        for sign, is_negative in ((self.negative_sign, True), (self.positive_sign, False)):
            if sign and body.startswith(sign):
                body = body[len(sign):].lstrip()
                negative = negative or is_negative
                break
            if sign and body.endswith(sign):
                body = body[: -len(sign)].rstrip()
                negative = negative or is_negative
                break
        separators = (
            (self.decimal_separator, self.group_separator),
            (self.currency_decimal_separator, self.currency_group_separator),
        )
        for decimal, group in separators:
            candidate = _normalize_digits(body, decimal, group)
            if candidate is not None and _DECIMAL_RE.match(candidate):
                value = float(candidate)
                return -value if negative else value
        raise ValueError(f"not a number: {text!r}")


DEFAULT_NUMBER_FORMAT = NumberFormat()


def _normalize_digits(body: str, decimal: str, group: str) -> str | None:
    """Rewrite ``body`` with ``.`` as decimal point and no grouping."""
    if not decimal or decimal == group:
        return None
    integer, sep, fraction = body.partition(decimal)
    if group:
        integer = integer.replace(group, "")
    if decimal != "." and ("." in integer or "." in fraction):
        return None
    return f"{integer}.{fraction}" if sep else integer


def parse_temporal(raw: str) -> datetime:
    """Parse a stored date; empty text is the epoch-minimum "unset" value.

    Accepts the compact form ``yyyyMMddTHHmmss[Z]`` and ISO 8601.  Naive
    values are taken as UTC.  Raises ValueError on anything else.
    """
    text = raw.strip()
    if not text:
        return EPOCH_MIN
    match = _COMPACT_DATE_RE.match(text)
    if match:
        year, month, day, hour, minute, second, fraction, _ = match.groups()
        parsed = datetime(
            int(year),
            int(month),
            int(day),
            int(hour or 0),
            int(minute or 0),
            int(second or 0),
            int((fraction or "0").ljust(6, "0")),
        )
    else:
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    try:
        return parsed.astimezone(UTC)
    except OverflowError as exc:
        raise ValueError(f"date out of range in UTC: {raw!r}") from exc


# ── Coercion ─────────────────────────────────────────────────────


class TypeCoercion:
    """Converts raw field text into ints, floats, booleans and datetimes."""

    def __init__(
        self,
        accessor: FieldAccessor | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.accessor = accessor or FieldAccessor()
        self.clock = clock or (lambda: datetime.now(tz=UTC))

    def _malformed(self, node: ContentNode, key: str, kind: str) -> None:
        self.accessor.report(
            node,
            key,
            f"Could not parse field {key!r} as {kind} on node {node.id} ({node.path}) "
            f"based on template {node.template_id} ({node.template_name})",
        )

    # ── Integers ─────────────────────────────────────────────────

    def read_integer(self, node: ContentNode, key: str) -> Present[int] | Absent | Malformed:
        if not self.accessor.has_field(node, key):
            return Absent()
        raw = node.fields[key].raw
        if not _INTEGER_RE.match(raw):
            return Malformed(raw)
        value = int(raw)
        if not _INT32_MIN <= value <= _INT32_MAX:
            return Malformed(raw)
        return Present(value)

    def get_integer(self, node: ContentNode, key: str) -> int:
        """Base-10 integer value, or ``-1`` if absent or unparseable."""
        result = self.read_integer(node, key)
        if isinstance(result, Malformed):
            self._malformed(node, key, "Integer")
        return result.value_or(INTEGER_SENTINEL)

    # ── Doubles ──────────────────────────────────────────────────

    def read_double(
        self,
        node: ContentNode,
        key: str,
        number_format: NumberFormat | None = None,
    ) -> Present[float] | Absent | Malformed:
        if not self.accessor.has_field(node, key):
            return Absent()
        number_format = number_format or DEFAULT_NUMBER_FORMAT
        raw = node.fields[key].raw
        try:
            return Present(number_format.parse(raw))
        except ValueError:
            return Malformed(raw)

    def get_double(
        self,
        node: ContentNode,
        key: str,
        number_format: NumberFormat | None = None,
    ) -> float:
        """Decimal value read with ``number_format``, or ``-1.0`` on failure."""
        result = self.read_double(node, key, number_format)
        if isinstance(result, Malformed):
            self._malformed(node, key, "Double")
        return result.value_or(DOUBLE_SENTINEL)

    # ── Booleans ─────────────────────────────────────────────────

    def get_checked_boolean(self, node: ContentNode, key: str) -> bool:
        """True iff the field exists, is a checkbox, and is checked."""
        found = self.accessor.get_field(node, key)
        return isinstance(found, BooleanField) and found.checked

    # ── Dates ────────────────────────────────────────────────────

    def read_temporal(self, node: ContentNode, key: str) -> Present[datetime] | Absent | Malformed:
        if not self.accessor.has_field(node, key):
            return Absent()
        raw = node.fields[key].raw
        try:
            return Present(parse_temporal(raw))
        except ValueError:
            return Malformed(raw)

    def get_temporal(self, node: ContentNode, key: str) -> datetime | None:
        """None if absent; otherwise the stored date, epoch minimum when unset."""
        result = self.read_temporal(node, key)
        if isinstance(result, Absent):
            return None
        if isinstance(result, Malformed):
            self._malformed(node, key, "DateTime")
            return EPOCH_MIN
        return result.value

    def is_temporal_set(self, node: ContentNode, key: str) -> bool:
        value = self.get_temporal(node, key)
        return value is not None and value != EPOCH_MIN

    def get_temporal_value_or_min(self, node: ContentNode, key: str) -> datetime:
        """The stored date, or epoch minimum when absent or unset. Never None."""
        value = self.get_temporal(node, key)
        return EPOCH_MIN if value is None else value

    def is_active(
        self,
        node: ContentNode,
        from_key: str,
        to_key: str,
        now: datetime | None = None,
    ) -> bool:
        """True when ``now`` lies inside the node's [from, to] window.

        A missing or unset bound is unbounded on that side.
        """
        now = now or self.clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=UTC)
        start = self.get_temporal(node, from_key)
        end = self.get_temporal(node, to_key)
        starts_ok = start is None or start == EPOCH_MIN or start <= now
        ends_ok = end is None or end == EPOCH_MIN or end >= now
        return starts_ok and ends_ok
