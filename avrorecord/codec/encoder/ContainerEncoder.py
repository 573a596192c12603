"""Writes Avro object container data: a header followed by framed blocks.

Header::

    b"Obj\\x01"  metadata map (string -> bytes)  16-byte sync marker

Block::

    record count (long)  byte size (long)  records  16-byte sync marker

The sync marker closing every block is what lets a reader find the next
record boundary after corrupted data.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Dict, Iterable, List, Optional

from ...schema.Schema import Schema
from ...util.AvroBinaryUtil import encodeBytes, encodeLong, encodeString
from ...util.ByteBuf import ByteBuf
from ..ContainerFormat import CODEC_KEY, MAGIC, SCHEMA_KEY, SUPPORTED_CODECS, SYNC_SIZE, compress
from .RecordEncoder import RecordEncoder


class ContainerEncoder:
    """Encodes records of one schema into container blocks."""

    def __init__(
        self,
        schema: Schema,
        *,
        codec: str = "null",
        sync_marker: Optional[bytes] = None,
        records_per_block: int = 100,
        metadata: Optional[Dict[str, bytes]] = None,
    ) -> None:
        if codec not in SUPPORTED_CODECS:
            raise ValueError(f"unsupported codec {codec!r}, expected one of {SUPPORTED_CODECS}")
        if sync_marker is None:
            sync_marker = os.urandom(SYNC_SIZE)
        if len(sync_marker) != SYNC_SIZE:
            raise ValueError(f"sync marker must be {SYNC_SIZE} bytes")
        if records_per_block < 1:
            raise ValueError("records_per_block must be at least 1")
        self.schema = schema
        self.codec = codec
        self.sync_marker = bytes(sync_marker)
        self.records_per_block = records_per_block
        self.metadata = dict(metadata or {})

    def header(self) -> bytes:
        meta = dict(self.metadata)
        meta[SCHEMA_KEY] = self.schema.toJson().encode("utf-8")
        meta[CODEC_KEY] = self.codec.encode("ascii")
        out = ByteBuf()
        out.writeBytes(MAGIC)
        encodeLong(out, len(meta))
        for key, value in meta.items():
            encodeString(out, key)
            encodeBytes(out, value)
        encodeLong(out, 0)
        out.writeBytes(self.sync_marker)
        return out.toBytes()

    def encodeBlock(self, records: Iterable[Mapping]) -> bytes:
        """Return one framed block holding ``records``."""
        body = ByteBuf()
        count = 0
        for record in records:
            RecordEncoder.writeRecord(body, self.schema, record)
            count += 1
        payload = compress(self.codec, body.toBytes())
        out = ByteBuf()
        encodeLong(out, count)
        encodeLong(out, len(payload))
        out.writeBytes(payload)
        out.writeBytes(self.sync_marker)
        return out.toBytes()

    def encodeBlocks(self, records: Iterable[Mapping]) -> bytes:
        """Frame ``records`` into blocks of at most ``records_per_block``, without a header."""
        out = bytearray()
        pending: List[Mapping] = []
        for record in records:
            pending.append(record)
            if len(pending) == self.records_per_block:
                out += self.encodeBlock(pending)
                pending = []
        if pending:
            out += self.encodeBlock(pending)
        return bytes(out)

    def encode(self, records: Iterable[Mapping]) -> bytes:
        """Return a complete container: header then blocks."""
        return self.header() + self.encodeBlocks(records)

    def write(self, fp, records: Iterable[Mapping]) -> None:
        fp.write(self.encode(records))


__all__ = ["ContainerEncoder"]
