"""Turn decoded records into application objects.

Two ways are offered. :func:`reflect` builds the target type from a record
by matching constructor keywords to field names, which is what a reflection
based reader does for a plain data class. :func:`map_records` applies any
caller supplied ``Record -> T`` function over a decode stream, the shape a
stream-processing map step takes.
"""

from __future__ import annotations

import dataclasses
import inspect
from typing import Callable, Iterable, Iterator, Type, TypeVar, Union

from .Record import Record
from ..exception.DecodeError import DecodeError
from ..exception.SchemaError import SchemaError
from ..schema.Schema import Schema

T = TypeVar("T")


def _requiredNames(cls: type) -> tuple[list[str], list[str]]:
    """Return (required, optional) constructor keyword names of ``cls``."""
    if dataclasses.is_dataclass(cls):
        required, optional = [], []
        for f in dataclasses.fields(cls):
            if not f.init:
                continue
            has_default = f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING
            (optional if has_default else required).append(f.name)
        return required, optional

    required, optional = [], []
    for p in list(inspect.signature(cls).parameters.values()):
        if p.kind in (p.VAR_POSITIONAL, p.VAR_KEYWORD, p.POSITIONAL_ONLY):
            continue
        (optional if p.default is not p.empty else required).append(p.name)
    return required, optional


def reflect(schema: Schema, cls: Type[T]) -> Callable[[Record], T]:
    """Return a function converting records of ``schema`` into ``cls`` instances.

    The target is checked once, up front: every required constructor
    argument must be a schema field. Schema fields the target does not
    accept are dropped.

    :raises SchemaError: if ``cls`` needs a value the schema cannot supply
    """
    required, optional = _requiredNames(cls)
    missing = [n for n in required if n not in schema]
    if missing:
        raise SchemaError(f"{cls.__name__} requires fields not in schema {schema.name}: {missing}")
    names = [n for n in (*required, *optional) if n in schema]

    def convert(record: Record) -> T:
        return cls(**{n: record[n] for n in names})

    convert.__name__ = f"reflect_{cls.__name__}"
    return convert


def map_records(
    stream: Iterable[Union[Record, DecodeError]],
    fn: Callable[[Record], T],
) -> Iterator[Union[T, DecodeError]]:
    """Apply ``fn`` to every record of ``stream``; decode errors pass through unchanged."""
    for item in stream:
        if isinstance(item, DecodeError):
            yield item
        else:
            yield fn(item)


__all__ = ["map_records", "reflect"]
