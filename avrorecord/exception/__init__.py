"""Exceptions raised by the decoder.

``DecodeError`` is the common base. ``SchemaError``, ``TruncatedInput`` and
``InvalidEncoding`` are the three kinds a caller needs to tell apart.
"""

from .DecodeError import DecodeError  # noqa: F401
from .InvalidEncoding import InvalidEncoding  # noqa: F401
from .SchemaError import SchemaError  # noqa: F401
from .TruncatedInput import TruncatedInput  # noqa: F401

__all__ = [
    "DecodeError",
    "InvalidEncoding",
    "SchemaError",
    "TruncatedInput",
]
