from typing import Any, Callable, Dict, Iterator

import pytest

from avrorecord.codec.ContainerFormat import SYNC_SIZE
from avrorecord.schema import Field, FieldType, Schema
from avrorecord.util.AvroBinaryUtil import encodeLong
from avrorecord.util.ByteBuf import ByteBuf

# tests/conftest.py

SYNC = bytes(range(0xA0, 0xA0 + SYNC_SIZE))


@pytest.fixture
def user_schema() -> Schema:
    """name:string, age:int, active:boolean, email:["null","string"]."""
    return Schema(
        [
            Field("name", FieldType.STRING),
            Field("age", FieldType.INT32),
            Field("active", FieldType.BOOLEAN),
            Field("email", FieldType.NULLABLE_STRING),
        ],
        name="com.example.User",
    )


@pytest.fixture
def make_user() -> Callable[..., Dict[str, Any]]:
    def _make(name: str = "Ann", age: int = 30, active: bool = True, email: str = None) -> Dict[str, Any]:
        return {"name": name, "age": age, "active": active, "email": email}
    return _make


@pytest.fixture
def sync_marker() -> bytes:
    return SYNC


@pytest.fixture
def frame() -> Callable[..., bytes]:
    """
    Wrap an already encoded payload into a block by hand, so tests can build
    blocks whose payload, count or marker is deliberately wrong.
    Usage: frame(payload, count=1, size=None, marker=SYNC)
    """
    def _frame(payload: bytes, count: int = 1, size: int = None, marker: bytes = SYNC) -> bytes:
        out = ByteBuf()
        encodeLong(out, count)
        encodeLong(out, len(payload) if size is None else size)
        out.writeBytes(payload)
        out.writeBytes(marker)
        return out.toBytes()
    return _frame


@pytest.fixture
def one_byte_chunks() -> Callable[[bytes], Iterator[bytes]]:
    """Split a payload into single-byte chunks, the worst case for a live feed."""
    def _split(data: bytes) -> Iterator[bytes]:
        for b in data:
            yield bytes([b])
    return _split
