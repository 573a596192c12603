"""Raised when fewer bytes are available than the declared shape requires."""

from __future__ import annotations

from .DecodeError import DecodeError


class TruncatedInput(DecodeError):
    """Not enough bytes remain to finish the value being read.

    Stream decoders catch this to wait for more data from a live source;
    everywhere else it propagates to the caller.
    """


__all__ = ["TruncatedInput"]
