"""Raised when bytes are present but are not a valid instance of their type."""

from __future__ import annotations

from .DecodeError import DecodeError


class InvalidEncoding(DecodeError):
    """Malformed data: bad UTF-8, boolean byte other than 0/1, bad union index,
    overlong varint, bad sync marker and so on."""


__all__ = ["InvalidEncoding"]
