"""Encode records into Avro binary, the inverse of ``RecordDecoder``."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ...schema.Field import Field
from ...schema.FieldType import FieldType
from ...schema.Schema import Schema
from ...util.AvroBinaryUtil import encodeBoolean, encodeInt, encodeLong, encodeString
from ...util.ByteBuf import ByteBuf
from ..decoder.RecordDecoder import NULL_BRANCH, STRING_BRANCH

_MISSING = object()


class RecordEncoder:
    """Writes record values field by field in schema order."""

    @staticmethod
    def writeField(buf: ByteBuf, field: Field, value: Any) -> None:
        tag = field.type
        if tag is FieldType.STRING:
            if not isinstance(value, str):
                raise ValueError(f"field {field.name!r} expects str, got {type(value).__name__}")
            encodeString(buf, value)
        elif tag is FieldType.INT32:
            # bool is an int subclass but never a valid int32 value here
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"field {field.name!r} expects int, got {type(value).__name__}")
            encodeInt(buf, value)
        elif tag is FieldType.BOOLEAN:
            if not isinstance(value, bool):
                raise ValueError(f"field {field.name!r} expects bool, got {type(value).__name__}")
            encodeBoolean(buf, value)
        elif tag is FieldType.NULLABLE_STRING:
            if value is None:
                encodeLong(buf, NULL_BRANCH)
            elif isinstance(value, str):
                encodeLong(buf, STRING_BRANCH)
                encodeString(buf, value)
            else:
                raise ValueError(f"field {field.name!r} expects str or None, got {type(value).__name__}")
        else:
            raise ValueError(f"unhandled type tag {tag!r}")

    @staticmethod
    def writeRecord(buf: ByteBuf, schema: Schema, values: Mapping) -> None:
        """Append the encoding of ``values`` to ``buf``.

        A nullable field missing from ``values`` is written as absent. Any
        other missing field, or a key the schema does not declare, is an error.

        :raises ValueError: if ``values`` does not fit ``schema``
        """
        extra = [k for k in values if k not in schema]
        if extra:
            raise ValueError(f"fields not in schema {schema.name}: {extra}")
        for field in schema.fields:
            value = values.get(field.name, _MISSING)
            if value is _MISSING:
                if not field.type.nullable:
                    raise ValueError(f"missing value for field {field.name!r}")
                value = None
            RecordEncoder.writeField(buf, field, value)

    @staticmethod
    def encode(schema: Schema, values: Mapping) -> bytes:
        buf = ByteBuf()
        RecordEncoder.writeRecord(buf, schema, values)
        return buf.toBytes()


def encode(schema: Schema, values: Mapping) -> bytes:
    return RecordEncoder.encode(schema, values)


__all__ = ["RecordEncoder", "encode"]
