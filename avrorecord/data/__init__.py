"""Decoded record values and helpers that map them onto application types."""

from .Record import Record  # noqa: F401
from .RecordMapper import map_records, reflect  # noqa: F401

__all__ = [
    "Record",
    "map_records",
    "reflect",
]
