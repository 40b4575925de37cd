"""Exception types raised by the storage and configuration layers.

Field resolution itself never raises; see ``fieldkit.diagnostics``.
"""

from __future__ import annotations


class FieldkitError(Exception):
    """Base class for fieldkit errors."""


class StoreError(FieldkitError):
    """A content store could not be opened, parsed, or addressed."""

    def __init__(self, store: str, message: str) -> None:
        self.store = store
        super().__init__(f"Store {store!r}: {message}")
