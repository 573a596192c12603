"""Lazy decoding of a byte stream into a sequence of records.

The stream is pulled chunk by chunk from any iterable of ``bytes`` (a file
read loop, a socket, an HTTP response body) and only as far as needed to
delimit the record or block currently being decoded. Two layouts are
understood:

* raw: encoded records back to back with nothing between them. There is no
  way to find the start of the next record after a bad one, so the first
  decode error is the last element of the sequence.
* framed: object container blocks, each closed by a 16-byte sync marker.
  After a bad record the rest of its block is skipped; after a corrupted
  block header or sync marker the decoder scans forward for the next
  marker and carries on from there.

Elements of the sequence are either :class:`Record` or :class:`DecodeError`
instances; errors are yielded, not raised, so one bad record does not end a
stream that can recover from it.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator, Optional, TypeVar, Union

from ...config import DEFAULT_CONFIG, DecoderConfig
from ...data.Record import Record
from ...exception.DecodeError import DecodeError
from ...exception.InvalidEncoding import InvalidEncoding
from ...exception.SchemaError import SchemaError
from ...exception.TruncatedInput import TruncatedInput
from ...schema.Schema import Schema
from ...util.AvroBinaryUtil import decodeLong
from ...util.ByteBuf import ByteBuf
from ..ContainerFormat import SUPPORTED_CODECS, SYNC_SIZE, decompress
from .RecordDecoder import RecordDecoder

logger = logging.getLogger(__name__)

T = TypeVar("T")

ByteSource = Union[bytes, bytearray, memoryview, Iterable[bytes]]
StreamElement = Union[Record, DecodeError]


class ChunkFeed:
    """Pulls chunks from a byte source into a :class:`ByteBuf` on demand.

    ``base`` counts the bytes already dropped from the front of the buffer,
    so ``base + buf.readerIndex()`` is the absolute position in the stream.
    """

    def __init__(self, source: ByteSource) -> None:
        if isinstance(source, (bytes, bytearray, memoryview)):
            self._chunks: Iterator[bytes] = iter((bytes(source),))
        else:
            self._chunks = iter(source)
        self.buf = ByteBuf()
        self.base = 0
        self.exhausted = False

    def position(self) -> int:
        return self.base + self.buf.readerIndex()

    def fill(self) -> bool:
        """Append the next non-empty chunk. Returns False once the source is exhausted."""
        while not self.exhausted:
            try:
                chunk = next(self._chunks)
            except StopIteration:
                self.exhausted = True
                break
            if not chunk:
                continue
            self.base += self.buf.readerIndex()
            self.buf.discardReadBytes()
            self.buf.writeBytes(chunk)
            return True
        return False

    def read(self, reader: Callable[[ByteBuf], T]) -> T:
        """Run ``reader`` against the buffer, pulling more chunks while it is truncated.

        The reader index is rewound before every retry, so ``reader`` always
        starts from the same position.

        :raises TruncatedInput: if the source ends before ``reader`` succeeds
        """
        while True:
            start = self.buf.readerIndex()
            try:
                return reader(self.buf)
            except TruncatedInput:
                self.buf.setReaderIndex(start)
                if not self.fill():
                    raise

    def rebase(self, err: DecodeError, base: Optional[int] = None) -> DecodeError:
        """Turn a buffer-relative error offset into an absolute stream offset."""
        if err.offset is not None:
            err.offset += self.base if base is None else base
        return err

    def close(self) -> None:
        close = getattr(self._chunks, "close", None)
        if close is not None:
            close()


class StreamDecoder:
    """Decodes a byte stream into records of one schema.

    :param schema: schema of every record in the stream
    :param sync_marker: 16-byte block sync marker; enables framed mode
    :param codec: block codec for framed mode, ``null`` or ``deflate``
    :raises SchemaError: if ``schema`` is not a Schema
    """

    def __init__(
        self,
        schema: Schema,
        *,
        sync_marker: Optional[bytes] = None,
        codec: str = "null",
        config: Optional[DecoderConfig] = None,
    ) -> None:
        if not isinstance(schema, Schema):
            raise SchemaError(f"expected a Schema, got {type(schema).__name__}")
        if sync_marker is not None and len(sync_marker) != SYNC_SIZE:
            raise ValueError(f"sync marker must be {SYNC_SIZE} bytes, got {len(sync_marker)}")
        if codec not in SUPPORTED_CODECS:
            raise ValueError(f"unsupported codec {codec!r}")
        self.schema = schema
        self.sync_marker = bytes(sync_marker) if sync_marker is not None else None
        self.codec = codec
        self.config = config or DEFAULT_CONFIG

    def decode(self, source: ByteSource) -> Iterator[StreamElement]:
        """Return a lazy sequence of records and decode errors from ``source``."""
        feed = ChunkFeed(source)
        try:
            if self.sync_marker is None:
                yield from self._decodeRaw(feed)
            else:
                yield from self.decodeBlocks(feed)
        finally:
            feed.close()

    __call__ = decode

    def _decodeRaw(self, feed: ChunkFeed) -> Iterator[StreamElement]:
        buf = feed.buf
        while True:
            if not buf.isReadable():
                if not feed.fill():
                    return
                continue
            try:
                record = RecordDecoder.readRecord(buf, self.schema, self.config)
            except TruncatedInput as e:
                if feed.fill():
                    continue
                yield feed.rebase(e)
                return
            except DecodeError as e:
                logger.warning("Raw stream has no record boundary to resync to, stopping at %s", e)
                yield feed.rebase(e)
                return
            yield record

    def decodeBlocks(self, feed: ChunkFeed) -> Iterator[StreamElement]:
        """Decode framed blocks from ``feed`` until it is exhausted."""
        buf = feed.buf
        while True:
            if not buf.isReadable() and not feed.fill():
                return

            block_offset = feed.position()
            try:
                count, size, payload = feed.read(self._readBlock)
            except DecodeError as e:
                yield feed.rebase(e)
                # rescan from the start of the damaged block: when only its
                # header is bad, its own marker is the nearest boundary
                buf.setReaderIndex(block_offset - feed.base)
                if not self._resync(feed):
                    logger.warning("No sync marker after offset %d, stream ends", block_offset)
                    return
                logger.warning("Resynchronized at offset %d after corrupt block at %d", feed.position(), block_offset)
                continue

            try:
                data = decompress(self.codec, payload, block_offset)
            except InvalidEncoding as e:
                yield e
                continue
            # offsets inside a compressed block do not map onto the stream
            payload_offset = feed.position() - SYNC_SIZE - size if self.codec == "null" else None

            body = ByteBuf(data)
            for _ in range(count):
                try:
                    record = RecordDecoder.readRecord(body, self.schema, self.config)
                except DecodeError as e:
                    logger.warning("Skipping rest of block at offset %d: %s", block_offset, e)
                    if payload_offset is None:
                        e.offset = block_offset
                    else:
                        feed.rebase(e, payload_offset)
                    yield e
                    break
                yield record
            else:
                if body.isReadable():
                    yield InvalidEncoding(
                        f"{body.readableBytes()} byte(s) left in block after {count} record(s)",
                        offset=block_offset,
                    )

    def _readBlock(self, buf: ByteBuf):
        start = buf.readerIndex()
        count = decodeLong(buf)
        size = decodeLong(buf)
        if count < 0 or size < 0:
            raise InvalidEncoding(f"negative block count {count} or size {size}", offset=start)
        if size > self.config.max_block_size:
            raise InvalidEncoding(f"block size {size} exceeds limit {self.config.max_block_size}", offset=start)
        if count > 0 and size == 0:
            raise InvalidEncoding(f"empty block claims {count} record(s)", offset=start)
        payload = buf.readBytes(size)
        marker_at = buf.readerIndex()
        if buf.readBytes(SYNC_SIZE) != self.sync_marker:
            raise InvalidEncoding("sync marker mismatch", offset=marker_at)
        return count, size, payload

    def _resync(self, feed: ChunkFeed) -> bool:
        """Advance past the next sync marker at or after the reader index.

        Consumes everything scanned, keeping only a marker-sized tail between
        chunks in case the marker straddles them. Returns False if the source
        ends first.
        """
        buf = feed.buf
        while True:
            found = buf.indexOf(self.sync_marker)
            if found >= 0:
                buf.setReaderIndex(found + SYNC_SIZE)
                return True
            end = buf.readerIndex() + buf.readableBytes()
            buf.setReaderIndex(max(buf.readerIndex(), end - (SYNC_SIZE - 1)))
            if not feed.fill():
                return False


def decode_stream(
    schema: Schema,
    source: ByteSource,
    *,
    sync_marker: Optional[bytes] = None,
    codec: str = "null",
    config: Optional[DecoderConfig] = None,
) -> Iterator[StreamElement]:
    """Lazily decode ``source`` into records and decode errors.

    Without ``sync_marker`` the source is read as raw concatenated records;
    with it, as object container blocks closed by that marker.
    """
    return StreamDecoder(schema, sync_marker=sync_marker, codec=codec, config=config).decode(source)


__all__ = ["ByteSource", "ChunkFeed", "StreamDecoder", "StreamElement", "decode_stream"]
