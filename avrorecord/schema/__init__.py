"""Schema model: type tags, field descriptors, the immutable schema and its JSON parser."""

from .Field import Field  # noqa: F401
from .FieldType import FieldType  # noqa: F401
from .Schema import Schema  # noqa: F401
from .SchemaParser import load_schema, parse_schema  # noqa: F401

__all__ = [
    "Field",
    "FieldType",
    "Schema",
    "load_schema",
    "parse_schema",
]
