"""Decode one Avro-binary encoded value into a :class:`Record`.

Avro binary data is not self-describing: there are no field names, tags or
lengths around a record, only the field values back to back in schema
order. The decoder therefore walks the schema and reads one value per
field, dispatching on the field's type tag.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Union

from ...config import DEFAULT_CONFIG, DecoderConfig
from ...data.Record import Record
from ...exception.DecodeError import DecodeError
from ...exception.InvalidEncoding import InvalidEncoding
from ...exception.SchemaError import SchemaError
from ...schema.Field import Field
from ...schema.FieldType import FieldType
from ...schema.Schema import Schema
from ...util.AvroBinaryUtil import decodeBoolean, decodeInt, decodeLong, decodeString
from ...util.ByteBuf import ByteBuf

# Branch indexes of the ["null", "string"] union
NULL_BRANCH = 0
STRING_BRANCH = 1


class RecordDecoder:
    """Schema-driven decoder for single records."""

    @staticmethod
    def readField(buf: ByteBuf, field: Field, config: DecoderConfig = DEFAULT_CONFIG) -> Any:
        """Read the value of ``field`` at the current reader position."""
        name = field.name
        tag = field.type
        if tag is FieldType.STRING:
            return decodeString(buf, name, config.max_string_length)
        elif tag is FieldType.INT32:
            return decodeInt(buf, name)
        elif tag is FieldType.BOOLEAN:
            return decodeBoolean(buf, name)
        elif tag is FieldType.NULLABLE_STRING:
            start = buf.readerIndex()
            branch = decodeLong(buf, name)
            if branch == NULL_BRANCH:
                return field.default
            if branch == STRING_BRANCH:
                return decodeString(buf, name, config.max_string_length)
            raise InvalidEncoding(f"union branch must be 0 or 1, got {branch}", offset=start, field=name)
        raise SchemaError(f"unhandled type tag {tag!r}", field=name)

    @staticmethod
    def readRecord(buf: ByteBuf, schema: Schema, config: DecoderConfig = DEFAULT_CONFIG) -> Record:
        """Read one record from ``buf``, leaving the reader after its last byte.

        On failure the reader index is restored to where the record started,
        so a stream decoder can retry once more bytes have arrived.

        :raises TruncatedInput: if the buffer ends inside the record
        :raises InvalidEncoding: if a value is malformed
        """
        if not isinstance(schema, Schema):
            raise SchemaError(f"expected a Schema, got {type(schema).__name__}")
        start = buf.readerIndex()
        values: Dict[str, Any] = {}
        try:
            for field in schema.fields:
                values[field.name] = RecordDecoder.readField(buf, field, config)
        except DecodeError:
            buf.setReaderIndex(start)
            raise
        return Record(schema, values)

    @staticmethod
    def decode(
        schema: Schema,
        data: Union[bytes, bytearray, memoryview, ByteBuf],
        config: Optional[DecoderConfig] = None,
    ) -> Record:
        """Decode exactly one record from ``data``.

        Pure function of its inputs: a :class:`ByteBuf` argument is read
        from a copy of its readable bytes and its reader index is left
        alone. Bytes left over after the last field mean ``data`` is not a
        single record of ``schema``.

        :raises SchemaError: if ``schema`` is not a valid schema
        :raises TruncatedInput: if ``data`` ends before the record does
        :raises InvalidEncoding: if a value is malformed or bytes trail the record
        """
        config = config or DEFAULT_CONFIG
        buf = ByteBuf(data.toBytes() if isinstance(data, ByteBuf) else data)
        record = RecordDecoder.readRecord(buf, schema, config)
        if buf.isReadable():
            raise InvalidEncoding(f"{buf.readableBytes()} trailing byte(s) after record", offset=buf.readerIndex())
        return record


def decode(schema: Schema, data: Union[bytes, bytearray, memoryview], config: Optional[DecoderConfig] = None) -> Record:
    return RecordDecoder.decode(schema, data, config)


__all__ = ["RecordDecoder", "decode"]
