"""The closed set of field type tags a schema may use."""

from __future__ import annotations

from enum import Enum


class FieldType(Enum):
    """Type tag of a schema field.

    The value is the Avro type name the tag corresponds to.
    """

    STRING = "string"
    INT32 = "int"
    BOOLEAN = "boolean"
    NULLABLE_STRING = "nullable-string"

    @property
    def nullable(self) -> bool:
        return self is FieldType.NULLABLE_STRING

    def avroType(self) -> object:
        """Return the Avro JSON type declaration for this tag."""
        if self is FieldType.NULLABLE_STRING:
            return ["null", "string"]
        return self.value


__all__ = ["FieldType"]
