"""Decoding helpers.

``RecordDecoder`` turns the bytes of one record into a :class:`Record`.
``StreamDecoder`` slices a byte stream into records, either raw or framed
in sync-marked blocks, and resynchronizes after corrupted data where the
framing allows it. ``ContainerDecoder`` reads an object container header and
then streams its blocks.
"""

from .RecordDecoder import RecordDecoder, decode  # noqa: F401
from .StreamDecoder import StreamDecoder, decode_stream  # noqa: F401
from .ContainerDecoder import ContainerDecoder, open_container  # noqa: F401

__all__ = [
    "ContainerDecoder",
    "RecordDecoder",
    "StreamDecoder",
    "decode",
    "decode_stream",
    "open_container",
]
