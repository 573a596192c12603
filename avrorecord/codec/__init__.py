"""Avro binary codec: record, stream and container decoders and encoders."""

from .decoder import ContainerDecoder, RecordDecoder, StreamDecoder, decode, decode_stream, open_container  # noqa: F401
from .encoder import ContainerEncoder, RecordEncoder, encode  # noqa: F401

__all__ = [
    "ContainerDecoder",
    "ContainerEncoder",
    "RecordDecoder",
    "RecordEncoder",
    "StreamDecoder",
    "decode",
    "decode_stream",
    "encode",
    "open_container",
]
