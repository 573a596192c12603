"""Parse Avro record schema JSON (``.avsc``) into a :class:`Schema`.

Only the subset of Avro the decoder understands is accepted: a ``record``
whose fields are ``string``, ``int``, ``boolean`` or the union
``["null", "string"]``. The JSON document is validated with pydantic models
first, then each field type is translated to a :class:`FieldType` tag.
"""

from __future__ import annotations

import logging
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ValidationError

from .Field import Field
from .FieldType import FieldType
from .Schema import Schema
from ..exception.SchemaError import SchemaError

logger = logging.getLogger(__name__)


class AvroField(BaseModel):
    name: str
    type: Union[str, List[Any], dict]
    default: Any = None
    doc: Optional[str] = None


class AvroRecordSchema(BaseModel):
    type: Literal["record"]
    name: str
    namespace: Optional[str] = None
    doc: Optional[str] = None
    fields: List[AvroField]


_PRIMITIVES = {
    "string": FieldType.STRING,
    "int": FieldType.INT32,
    "boolean": FieldType.BOOLEAN,
}

# Primitives whose logicalType annotation is ignored
_LOGICAL_BASES = ("string", "int")


def _fieldType(field: AvroField) -> FieldType:
    declared = field.type
    # {"type": "string"} is an allowed long form of a primitive
    if isinstance(declared, dict):
        extra = set(declared) - {"type", "doc"}
        if declared.get("type") in _LOGICAL_BASES:
            # a logical type annotates the primitive without changing its encoding
            extra.discard("logicalType")
        if extra:
            raise SchemaError(f"unsupported type {declared!r}", field=field.name)
        if "logicalType" in declared:
            logger.debug("Reading %s field %s as plain %s", declared["logicalType"], field.name, declared["type"])
        declared = declared.get("type")
    if isinstance(declared, str) and declared in _PRIMITIVES:
        return _PRIMITIVES[declared]
    if isinstance(declared, list) and declared == ["null", "string"]:
        return FieldType.NULLABLE_STRING
    raise SchemaError(f"unsupported type {declared!r}", field=field.name)


def _toField(field: AvroField) -> Field:
    field_type = _fieldType(field)
    default = None
    if "default" in field.model_fields_set:
        if not field_type.nullable:
            # Avro allows defaults on any field; they only matter for schema
            # resolution, which this decoder does not do.
            logger.debug("Ignoring default of non-nullable field %s", field.name)
        else:
            default = field.default
    return Field(field.name, field_type, default)


def parse_schema(source: Union[str, bytes, dict]) -> Schema:
    """Build a :class:`Schema` from Avro schema JSON text or an already loaded dict.

    :raises SchemaError: on malformed JSON, a non-record schema, unsupported
        field types or any structural problem the schema model rejects
    """
    try:
        if isinstance(source, dict):
            model = AvroRecordSchema.model_validate(source)
        else:
            model = AvroRecordSchema.model_validate_json(source)
    except ValidationError as e:
        raise SchemaError(f"invalid record schema: {e.error_count()} error(s): {e.errors()[0]['msg']}") from e

    name = f"{model.namespace}.{model.name}" if model.namespace and "." not in model.name else model.name
    schema = Schema([_toField(f) for f in model.fields], name=name)
    logger.debug("Parsed schema %s with %d field(s)", name, len(schema))
    return schema


def load_schema(path) -> Schema:
    """Read and parse a ``.avsc`` file."""
    with open(path, "rb") as fp:
        return parse_schema(fp.read())


__all__ = ["AvroField", "AvroRecordSchema", "load_schema", "parse_schema"]
