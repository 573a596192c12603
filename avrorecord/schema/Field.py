"""A single named, typed field descriptor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .FieldType import FieldType
from ..exception.SchemaError import SchemaError


@dataclass(frozen=True)
class Field:
    """Describes one field of a record schema.

    ``default`` is only meaningful for nullable fields: it is the value the
    field takes when the encoded value is absent, and may itself be ``None``.
    """

    name: str
    type: FieldType
    default: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise SchemaError(f"field name must be a non-empty string, got {self.name!r}")
        if not isinstance(self.type, FieldType):
            raise SchemaError(f"field {self.name!r} has unknown type tag {self.type!r}", field=self.name)
        if self.default is not None:
            if not self.type.nullable:
                raise SchemaError(f"only nullable fields may declare a default, {self.name!r} is {self.type.value}", field=self.name)
            if not isinstance(self.default, str):
                raise SchemaError(f"default of {self.name!r} must be a string or None", field=self.name)

    def toJson(self) -> dict:
        out: dict = {"name": self.name, "type": self.type.avroType()}
        if self.type.nullable:
            out["default"] = self.default
        return out


__all__ = ["Field"]
