"""An immutable, validated record schema."""

from __future__ import annotations

import json
from typing import Dict, Iterable, Iterator, Tuple

from .Field import Field
from ..exception.SchemaError import SchemaError


class Schema:
    """Ordered sequence of field descriptors.

    Field order is significant: Avro binary data carries no field names or
    tags, so values are read back in exactly the order declared here. A
    schema is validated once at construction and never changes afterwards,
    so a single instance can be shared by any number of decoders.

    :raises SchemaError: if the field list is empty or a name repeats
    """

    __slots__ = ("_name", "_fields", "_index")

    def __init__(self, fields: Iterable[Field], name: str = "Record") -> None:
        fields = tuple(fields)
        if not fields:
            raise SchemaError("schema must declare at least one field")
        index: Dict[str, Field] = {}
        for f in fields:
            if not isinstance(f, Field):
                raise SchemaError(f"schema entries must be Field instances, got {type(f).__name__}")
            if f.name in index:
                raise SchemaError(f"duplicate field name {f.name!r}", field=f.name)
            index[f.name] = f
        object.__setattr__(self, "_name", name)
        object.__setattr__(self, "_fields", fields)
        object.__setattr__(self, "_index", index)

    def __setattr__(self, key, value):
        raise AttributeError("Schema is immutable")

    def __reduce__(self):
        return (Schema, (self._fields, self._name))

    @property
    def name(self) -> str:
        return self._name

    @property
    def fields(self) -> Tuple[Field, ...]:
        return self._fields

    @property
    def fieldNames(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self._fields)

    def field(self, name: str) -> Field:
        try:
            return self._index[name]
        except KeyError:
            raise KeyError(f"schema {self._name!r} has no field {name!r}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __iter__(self) -> Iterator[Field]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Schema):
            return NotImplemented
        return self._fields == other._fields

    def __hash__(self) -> int:
        return hash(self._fields)

    def __repr__(self) -> str:
        body = ", ".join(f"{f.name}:{f.type.value}" for f in self._fields)
        return f"Schema({self._name}: {body})"

    def toJson(self) -> str:
        """Return the Avro JSON form of this schema, as embedded in container files."""
        namespace, _, short = self._name.rpartition(".")
        doc: dict = {"type": "record", "name": short}
        if namespace:
            doc["namespace"] = namespace
        doc["fields"] = [f.toJson() for f in self._fields]
        return json.dumps(doc, separators=(",", ":"))


__all__ = ["Schema"]
