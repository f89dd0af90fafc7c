"""Exception taxonomy for the bolthttp core.

``IndexOutOfBounds`` marks a caller addressing something that does not exist.
``CorruptState`` marks a persisted document that cannot be decoded.
Executor failures are data on ``Response.failed`` and never raised.
"""

from __future__ import annotations


class BoltError(Exception):
    """Base class for all bolthttp errors."""


class IndexOutOfBounds(BoltError, IndexError):
    """A request, collection, header, or param index does not exist."""

    def __init__(self, what: str, index: int, length: int) -> None:
        super().__init__(f"{what} index {index} out of range (length {length})")
        self.what = what
        self.index = index
        self.length = length


class CorruptState(BoltError, ValueError):
    """Persisted state bytes do not decode into the expected shape."""


__all__ = ["BoltError", "CorruptState", "IndexOutOfBounds"]
