"""Raised when a schema is malformed."""

from __future__ import annotations

from .DecodeError import DecodeError


class SchemaError(DecodeError):
    """The schema itself is invalid (empty, duplicate field names, unsupported types).

    Always detected before any byte is consumed.
    """


__all__ = ["SchemaError"]
