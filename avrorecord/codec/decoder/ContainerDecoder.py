"""Reader for Avro object container data.

A container starts with a header naming the writer's schema, the block
codec and the sync marker, followed by framed blocks of records. The header
is read eagerly on construction; iterating the reader then decodes the
blocks lazily through :class:`StreamDecoder`.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, Optional

from ...config import DEFAULT_CONFIG, DecoderConfig
from ...exception.InvalidEncoding import InvalidEncoding
from ...exception.SchemaError import SchemaError
from ...schema.Schema import Schema
from ...schema.SchemaParser import parse_schema
from ...util.AvroBinaryUtil import decodeBytes, decodeLong, decodeString
from ...util.ByteBuf import ByteBuf
from ..ContainerFormat import CODEC_KEY, MAGIC, SCHEMA_KEY, SUPPORTED_CODECS, SYNC_SIZE
from .StreamDecoder import ByteSource, ChunkFeed, StreamDecoder, StreamElement

logger = logging.getLogger(__name__)


class ContainerHeader:
    """Metadata read from the start of a container."""

    def __init__(self, metadata: Dict[str, bytes], sync_marker: bytes) -> None:
        self.metadata = metadata
        self.sync_marker = sync_marker

    @property
    def codec(self) -> str:
        return self.metadata.get(CODEC_KEY, b"null").decode("ascii", errors="replace")

    @property
    def schemaJson(self) -> Optional[bytes]:
        return self.metadata.get(SCHEMA_KEY)


def readHeader(buf: ByteBuf, config: DecoderConfig = DEFAULT_CONFIG) -> ContainerHeader:
    """Read a container header from ``buf``.

    :raises TruncatedInput: if the header is incomplete
    :raises InvalidEncoding: on a bad magic number or malformed metadata
    """
    start = buf.readerIndex()
    # check the magic as soon as the bytes are there, even on a short header
    magic = buf.readBytes(min(len(MAGIC), buf.readableBytes()))
    if magic != MAGIC[:len(magic)]:
        raise InvalidEncoding(f"not an Avro container, magic is {magic!r}", offset=start)
    if len(magic) < len(MAGIC):
        buf.readBytes(len(MAGIC) - len(magic))

    metadata: Dict[str, bytes] = {}
    while True:
        count = decodeLong(buf, "metadata")
        if count == 0:
            break
        if count < 0:
            # negative count: the block byte size follows and is not needed here
            count = -count
            decodeLong(buf, "metadata")
        for _ in range(count):
            key = decodeString(buf, "metadata", config.max_string_length)
            metadata[key] = decodeBytes(buf, key, config.max_block_size)
    sync_marker = buf.readBytes(SYNC_SIZE, "sync")
    return ContainerHeader(metadata, sync_marker)


class ContainerDecoder:
    """Iterates the records of an object container.

    :param source: container bytes or an iterable of byte chunks
    :param reader_schema: optional expected schema; it must declare the
        same fields as the schema stored in the container
    :raises SchemaError: if the stored schema is missing, unsupported, or
        differs from ``reader_schema``
    :raises InvalidEncoding: if the header is malformed or the codec unknown
    :raises TruncatedInput: if the source ends inside the header
    """

    def __init__(
        self,
        source: ByteSource,
        reader_schema: Optional[Schema] = None,
        config: Optional[DecoderConfig] = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self._feed = ChunkFeed(source)
        try:
            self.header = self._feed.read(lambda buf: readHeader(buf, self.config))
            logger.debug("Read container header: %d metadata key(s), codec=%s", len(self.header.metadata), self.header.codec)

            if self.header.codec not in SUPPORTED_CODECS:
                raise InvalidEncoding(f"unsupported codec {self.header.codec!r}")
            if self.header.schemaJson is None:
                raise SchemaError(f"container metadata has no {SCHEMA_KEY!r} entry")
            writer_schema = parse_schema(self.header.schemaJson)
            if reader_schema is not None and reader_schema != writer_schema:
                raise SchemaError(f"reader schema {reader_schema!r} does not match writer schema {writer_schema!r}")
        except Exception:
            self._feed.close()
            raise

        self.writer_schema = writer_schema
        self.schema = reader_schema if reader_schema is not None else writer_schema
        self._decoder = StreamDecoder(
            self.schema,
            sync_marker=self.header.sync_marker,
            codec=self.header.codec,
            config=self.config,
        )

    @property
    def codec(self) -> str:
        return self.header.codec

    @property
    def sync_marker(self) -> bytes:
        return self.header.sync_marker

    @property
    def metadata(self) -> Dict[str, bytes]:
        return dict(self.header.metadata)

    def __iter__(self) -> Iterator[StreamElement]:
        try:
            yield from self._decoder.decodeBlocks(self._feed)
        finally:
            self._feed.close()

    def close(self) -> None:
        self._feed.close()

    def __enter__(self) -> "ContainerDecoder":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def open_container(
    source: ByteSource,
    reader_schema: Optional[Schema] = None,
    config: Optional[DecoderConfig] = None,
) -> ContainerDecoder:
    return ContainerDecoder(source, reader_schema, config)


__all__ = ["ContainerDecoder", "ContainerHeader", "open_container", "readHeader"]
