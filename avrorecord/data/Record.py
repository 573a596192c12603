"""Immutable decoded record value."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Dict, Iterator

from ..schema.Schema import Schema


class Record(Mapping):
    """One value per schema field, in schema order.

    A record always holds exactly the fields of its schema, no more and no
    fewer; construction fails otherwise. Values are reachable by key
    (``record["age"]``) or as attributes (``record.age``) when the field
    name does not collide with a mapping method.
    """

    __slots__ = ("_schema", "_values")

    def __init__(self, schema: Schema, values: Mapping[str, Any]) -> None:
        names = schema.fieldNames
        missing = [n for n in names if n not in values]
        extra = [k for k in values if k not in schema]
        if missing or extra:
            raise ValueError(f"record fields do not match schema {schema.name}: missing={missing} extra={extra}")
        ordered: Dict[str, Any] = {n: values[n] for n in names}
        object.__setattr__(self, "_schema", schema)
        object.__setattr__(self, "_values", MappingProxyType(ordered))

    def __setattr__(self, key, value):
        raise AttributeError("Record is immutable")

    def __reduce__(self):
        return (Record, (self._schema, dict(self._values)))

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._values[name]
        except KeyError:
            raise AttributeError(name) from None

    @property
    def schema(self) -> Schema:
        return self._schema

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Record):
            return self._schema.fieldNames == other._schema.fieldNames and dict(self._values) == dict(other._values)
        if isinstance(other, Mapping):
            return dict(self._values) == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(self._values.items()))

    def __repr__(self) -> str:
        body = ", ".join(f"{k}={v!r}" for k, v in self._values.items())
        return f"{self._schema.name}({body})"

    def asDict(self) -> Dict[str, Any]:
        return dict(self._values)


__all__ = ["Record"]
