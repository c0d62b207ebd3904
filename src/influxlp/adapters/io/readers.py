"""Byte reader adapters for the deserializer.

Both readers share ReaderBase, which owns position tracking. Counters
advance once per consumed byte, so an in-memory reader and a chunked
stream reader report the same position for the same input no matter
where chunk boundaries fall.
"""

import logging
from collections.abc import Iterable, Iterator
from typing import BinaryIO

from influxlp.core.errors import LineProtocolIOError
from influxlp.core.models import Position

logger = logging.getLogger(__name__)

NEWLINE = 0x0A

DEFAULT_CHUNK_SIZE = 8192


class ReaderBase:
    """Base class for ReaderPort adapters.

    Subclasses implement _peek_byte() and _take_byte(). This class keeps
    the offset, line and column counters.
    """

    def __init__(self) -> None:
        self._offset = 0
        self._line = 1
        self._column = 1

    def _peek_byte(self) -> int | None:
        raise NotImplementedError

    def _take_byte(self) -> int | None:
        raise NotImplementedError

    def peek(self) -> int | None:
        """Return the next byte without consuming it, or None at end of input."""
        return self._peek_byte()

    def advance(self) -> int | None:
        """Consume the next byte and update position counters.

        Returns:
            The consumed byte, or None at end of input (position unchanged).
        """
        byte = self._take_byte()
        if byte is None:
            return None
        self._offset += 1
        if byte == NEWLINE:
            self._line += 1
            self._column = 1
        else:
            self._column += 1
        return byte

    def position(self) -> Position:
        """Return the position of the next unconsumed byte."""
        return Position(offset=self._offset, line=self._line, column=self._column)


class SliceReader(ReaderBase):
    """Zero-copy reader over an in-memory buffer.

    Args:
        data: Input bytes. A str is encoded as UTF-8 first.
    """

    def __init__(self, data: bytes | bytearray | memoryview | str) -> None:
        super().__init__()
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._view = memoryview(data).cast("B")
        self._index = 0

    def _peek_byte(self) -> int | None:
        if self._index < len(self._view):
            return self._view[self._index]
        return None

    def _take_byte(self) -> int | None:
        if self._index < len(self._view):
            byte = self._view[self._index]
            self._index += 1
            return byte
        return None


class StreamReader(ReaderBase):
    """Buffered reader over an incremental byte source.

    Args:
        source: A binary file-like object with read(n), or an iterable of
            bytes chunks (e.g., a generator or a socket reader).
        chunk_size: Bytes requested per read() call on file-like sources.
    """

    def __init__(
        self,
        source: BinaryIO | Iterable[bytes],
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        super().__init__()
        self._source = source
        self._chunks: Iterator[bytes] | None = None
        if isinstance(source, (bytes, bytearray, memoryview)):
            self._chunks = iter([bytes(source)])
        elif not hasattr(source, "read"):
            self._chunks = iter(source)
        self._buffer = b""
        self._index = 0
        self._exhausted = False
        self.set_chunk_size(chunk_size)

    def set_chunk_size(self, chunk_size: int) -> None:
        """Set the number of bytes requested per read() call.

        Args:
            chunk_size: Positive chunk size in bytes.
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size

    def _next_chunk(self) -> bytes | None:
        """Return the next non-empty chunk, or None once the source is exhausted."""
        try:
            if self._chunks is None:
                read = self._source.read  # type: ignore[union-attr]
                return read(self.chunk_size) or None
            for chunk in self._chunks:
                if chunk:
                    return chunk
            return None
        except OSError as exc:
            logger.debug("byte source failed at offset %d: %s", self._offset, exc)
            raise LineProtocolIOError(
                f"failed to read from source: {exc}", self._offset
            ) from exc

    def _fill(self) -> bool:
        """Refill the buffer. Returns False once the source is exhausted."""
        while self._index >= len(self._buffer):
            if self._exhausted:
                return False
            chunk = self._next_chunk()
            if chunk is None:
                self._exhausted = True
                return False
            # Text-mode sources hand out str chunks
            if isinstance(chunk, str):
                chunk = chunk.encode("utf-8")
            self._buffer = bytes(chunk)
            self._index = 0
        return True

    def _peek_byte(self) -> int | None:
        if not self._fill():
            return None
        return self._buffer[self._index]

    def _take_byte(self) -> int | None:
        if not self._fill():
            return None
        byte = self._buffer[self._index]
        self._index += 1
        return byte
