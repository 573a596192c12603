"""A minimal growable byte buffer with separate reader and writer positions.

The API follows the Netty ``ByteBuf`` naming the codec classes are written
against: bytes are appended with ``write*`` methods and consumed with
``read*`` methods, and the reader position can be marked and reset so a
decoder can back out of a partially read value when more data is needed.
"""

from __future__ import annotations

from typing import Optional

from ..exception.TruncatedInput import TruncatedInput


class ByteBuf:
    """Byte buffer with a reader index, a mark and an append-only tail."""

    def __init__(self, data: bytes | bytearray | memoryview = b"") -> None:
        self._data = bytearray(data)
        self._reader_index = 0
        self._marked_reader_index = 0

    # -- reader side -------------------------------------------------------

    def readerIndex(self) -> int:
        return self._reader_index

    def setReaderIndex(self, index: int) -> None:
        if index < 0 or index > len(self._data):
            raise IndexError(f"reader index {index} out of range 0..{len(self._data)}")
        self._reader_index = index

    def readableBytes(self) -> int:
        return len(self._data) - self._reader_index

    def isReadable(self, length: int = 1) -> bool:
        return self.readableBytes() >= length

    def markReaderIndex(self) -> None:
        self._marked_reader_index = self._reader_index

    def resetReaderIndex(self) -> None:
        self._reader_index = self._marked_reader_index

    def readUnsignedByte(self, field: Optional[str] = None) -> int:
        if not self.isReadable():
            raise TruncatedInput("expected 1 byte, buffer is exhausted", offset=self._reader_index, field=field)
        value = self._data[self._reader_index]
        self._reader_index += 1
        return value

    def readBytes(self, length: int, field: Optional[str] = None) -> bytes:
        """Read ``length`` bytes into a new ``bytes`` object.

        The result is a copy; it never aliases the buffer.

        :raises TruncatedInput: if fewer than ``length`` bytes are readable
        """
        if not self.isReadable(length):
            raise TruncatedInput(
                f"expected {length} bytes, {self.readableBytes()} available",
                offset=self._reader_index,
                field=field,
            )
        start = self._reader_index
        self._reader_index += length
        return bytes(self._data[start:self._reader_index])

    def skipBytes(self, length: int) -> None:
        self.readBytes(length)

    def indexOf(self, needle: bytes, start: Optional[int] = None) -> int:
        """Return the absolute index of ``needle`` at or after ``start``, or -1."""
        return self._data.find(needle, self._reader_index if start is None else start)

    def discardReadBytes(self) -> None:
        """Drop already consumed bytes so a long-running stream does not grow without bound."""
        if self._reader_index == 0:
            return
        del self._data[:self._reader_index]
        self._marked_reader_index = max(0, self._marked_reader_index - self._reader_index)
        self._reader_index = 0

    # -- writer side -------------------------------------------------------

    def writeByte(self, value: int) -> None:
        self._data.append(value & 0xFF)

    def writeBytes(self, data: bytes | bytearray | memoryview) -> None:
        self._data.extend(data)

    def toBytes(self) -> bytes:
        """Return the readable bytes without consuming them."""
        return bytes(self._data[self._reader_index:])

    def __len__(self) -> int:
        return self.readableBytes()

    def __repr__(self) -> str:
        return f"ByteBuf(readerIndex={self._reader_index}, readable={self.readableBytes()})"


__all__ = ["ByteBuf"]
