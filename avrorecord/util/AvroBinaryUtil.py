"""Primitive readers and writers for the Avro binary encoding.

Integers are variable-length zig-zag varints: the value is zig-zag mapped
to an unsigned number (0, -1, 1, -2 ... become 0, 1, 2, 3 ...) and written
seven bits at a time, least significant group first, with the high bit of
each byte set while more bytes follow. ``int`` values take at most 5 bytes,
``long`` values at most 10. Strings are a ``long`` byte length followed by
that many UTF-8 bytes. Booleans are a single byte, 0 or 1.
"""

from __future__ import annotations

from typing import Optional

from .ByteBuf import ByteBuf
from ..exception.InvalidEncoding import InvalidEncoding

INT_MAX_BYTES = 5
LONG_MAX_BYTES = 10

INT_MIN = -(1 << 31)
INT_MAX = (1 << 31) - 1
LONG_MIN = -(1 << 63)
LONG_MAX = (1 << 63) - 1


def zigzagEncode(value: int) -> int:
    return (value << 1) ^ (value >> 63)


def zigzagDecode(value: int) -> int:
    return (value >> 1) ^ -(value & 1)


def _decodeVarInt(buf: ByteBuf, max_bytes: int, bits: int, field: Optional[str]) -> int:
    start = buf.readerIndex()
    result = 0
    shift = 0
    for _ in range(max_bytes):
        b = buf.readUnsignedByte(field)
        result |= (b & 0x7F) << shift
        if not b & 0x80:
            if result >> bits:
                raise InvalidEncoding(f"varint does not fit in {bits} bits", offset=start, field=field)
            return zigzagDecode(result)
        shift += 7
    raise InvalidEncoding(f"varint longer than {max_bytes} bytes", offset=start, field=field)


def decodeInt(buf: ByteBuf, field: Optional[str] = None) -> int:
    """Read a zig-zag varint that must fit a signed 32-bit integer.

    :raises TruncatedInput: if the buffer ends inside the varint
    :raises InvalidEncoding: if the varint is overlong or out of range
    """
    return _decodeVarInt(buf, INT_MAX_BYTES, 32, field)


def decodeLong(buf: ByteBuf, field: Optional[str] = None) -> int:
    """Read a zig-zag varint that must fit a signed 64-bit integer."""
    return _decodeVarInt(buf, LONG_MAX_BYTES, 64, field)


def encodeLong(buf: ByteBuf, value: int) -> None:
    if value < LONG_MIN or value > LONG_MAX:
        raise ValueError(f"{value} is out of range for an Avro long")
    n = zigzagEncode(value) & 0xFFFFFFFFFFFFFFFF
    while n & ~0x7F:
        buf.writeByte((n & 0x7F) | 0x80)
        n >>= 7
    buf.writeByte(n)


def encodeInt(buf: ByteBuf, value: int) -> None:
    if value < INT_MIN or value > INT_MAX:
        raise ValueError(f"{value} is out of range for an Avro int")
    encodeLong(buf, value)


def decodeBytes(buf: ByteBuf, field: Optional[str] = None, max_length: Optional[int] = None) -> bytes:
    """Read a length-prefixed byte run.

    A negative length, or one above ``max_length``, is rejected before any
    payload byte is consumed so a corrupted prefix cannot make a live stream
    wait for gigabytes of data.
    """
    start = buf.readerIndex()
    length = decodeLong(buf, field)
    if length < 0:
        raise InvalidEncoding(f"negative length {length}", offset=start, field=field)
    if max_length is not None and length > max_length:
        raise InvalidEncoding(f"length {length} exceeds limit {max_length}", offset=start, field=field)
    return buf.readBytes(length, field)


def decodeString(buf: ByteBuf, field: Optional[str] = None, max_length: Optional[int] = None) -> str:
    start = buf.readerIndex()
    raw = decodeBytes(buf, field, max_length)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidEncoding(f"invalid UTF-8: {e.reason}", offset=start, field=field) from e


def encodeBytes(buf: ByteBuf, data: bytes) -> None:
    encodeLong(buf, len(data))
    buf.writeBytes(data)


def encodeString(buf: ByteBuf, value: str) -> None:
    encodeBytes(buf, value.encode("utf-8"))


def decodeBoolean(buf: ByteBuf, field: Optional[str] = None) -> bool:
    start = buf.readerIndex()
    b = buf.readUnsignedByte(field)
    if b == 0:
        return False
    if b == 1:
        return True
    raise InvalidEncoding(f"boolean byte must be 0 or 1, got {b}", offset=start, field=field)


def encodeBoolean(buf: ByteBuf, value: bool) -> None:
    buf.writeByte(1 if value else 0)


__all__ = [
    "INT_MAX",
    "INT_MIN",
    "decodeBoolean",
    "decodeBytes",
    "decodeInt",
    "decodeLong",
    "decodeString",
    "encodeBoolean",
    "encodeBytes",
    "encodeInt",
    "encodeLong",
    "encodeString",
    "zigzagDecode",
    "zigzagEncode",
]
