"""Schema-driven decoding of Avro binary data into immutable records.

Typical use::

    schema = parse_schema(open("user.avsc").read())
    for item in open_container(iter_file("users.avro")):
        if isinstance(item, DecodeError):
            ...
        else:
            print(item["name"], item["age"])
"""

from .codec import (  # noqa: F401
    ContainerDecoder,
    ContainerEncoder,
    RecordDecoder,
    RecordEncoder,
    StreamDecoder,
    decode,
    decode_stream,
    encode,
    open_container,
)
from .config import DecoderConfig, configure_logging, load_config  # noqa: F401
from .data import Record, map_records, reflect  # noqa: F401
from .exception import DecodeError, InvalidEncoding, SchemaError, TruncatedInput  # noqa: F401
from .schema import Field, FieldType, Schema, load_schema, parse_schema  # noqa: F401
from .sources import HttpSource, iter_file, iter_stream  # noqa: F401

__version__ = "0.1.0"

__all__ = [
    "ContainerDecoder",
    "ContainerEncoder",
    "DecodeError",
    "DecoderConfig",
    "Field",
    "FieldType",
    "HttpSource",
    "InvalidEncoding",
    "Record",
    "RecordDecoder",
    "RecordEncoder",
    "Schema",
    "SchemaError",
    "StreamDecoder",
    "TruncatedInput",
    "configure_logging",
    "decode",
    "decode_stream",
    "encode",
    "iter_file",
    "iter_stream",
    "load_config",
    "load_schema",
    "map_records",
    "open_container",
    "parse_schema",
    "reflect",
]
