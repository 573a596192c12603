"""Constants and block codecs of the Avro object container format."""

from __future__ import annotations

import zlib

from ..exception.InvalidEncoding import InvalidEncoding

MAGIC = b"Obj\x01"
SYNC_SIZE = 16
SCHEMA_KEY = "avro.schema"
CODEC_KEY = "avro.codec"
SUPPORTED_CODECS = ("null", "deflate")

# deflate blocks are raw streams: no zlib header, no checksum
_DEFLATE_WBITS = -15


def compress(codec: str, data: bytes) -> bytes:
    if codec == "null":
        return data
    if codec == "deflate":
        compressor = zlib.compressobj(zlib.Z_DEFAULT_COMPRESSION, zlib.DEFLATED, _DEFLATE_WBITS)
        return compressor.compress(data) + compressor.flush()
    raise ValueError(f"unsupported codec {codec!r}")


def decompress(codec: str, data: bytes, offset: int = 0) -> bytes:
    if codec == "null":
        return data
    if codec == "deflate":
        try:
            return zlib.decompress(data, _DEFLATE_WBITS)
        except zlib.error as e:
            raise InvalidEncoding(f"corrupt deflate block: {e}", offset=offset) from e
    raise InvalidEncoding(f"unsupported codec {codec!r}", offset=offset)


__all__ = [
    "CODEC_KEY",
    "MAGIC",
    "SCHEMA_KEY",
    "SUPPORTED_CODECS",
    "SYNC_SIZE",
    "compress",
    "decompress",
]
