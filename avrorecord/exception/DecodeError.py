"""Base class for every failure raised while decoding Avro-binary data."""

from __future__ import annotations

from typing import Optional


class DecodeError(ValueError):
    """Raised when bytes or a schema cannot be turned into a record.

    ``offset`` is the reader position (relative to the start of the buffer
    being decoded) at which the problem was detected, and ``field`` is the
    name of the schema field being read at the time, when known.
    """

    def __init__(self, message: str, *, offset: Optional[int] = None, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.offset = offset
        self.field = field

    def __str__(self) -> str:
        parts = [self.message]
        if self.field is not None:
            parts.append(f"field={self.field!r}")
        if self.offset is not None:
            parts.append(f"offset={self.offset}")
        return " ".join(parts)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return (self.message, self.offset, self.field) == (other.message, other.offset, other.field)

    def __hash__(self) -> int:
        return hash((type(self), self.message, self.offset, self.field))


__all__ = ["DecodeError"]
