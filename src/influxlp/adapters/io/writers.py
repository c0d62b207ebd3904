"""Byte writer adapters for the serializer.

A writer is bound to a single serialize call: after finalize() it refuses
further writes until reset() is called.
"""

import logging
from collections.abc import Callable
from typing import BinaryIO

from influxlp.core.errors import LineProtocolIOError

logger = logging.getLogger(__name__)


class BufferWriter:
    """Growable in-memory writer."""

    def __init__(self) -> None:
        self._buffer = bytearray()
        self._finalized = False

    def write(self, data: bytes) -> None:
        """Append raw bytes to the buffer."""
        if self._finalized:
            raise RuntimeError("writer already finalized; call reset() first")
        self._buffer += data

    def finalize(self) -> None:
        """Mark the current serialize call as complete."""
        self._finalized = True

    def getvalue(self) -> bytes:
        """Return everything written since the last reset."""
        return bytes(self._buffer)

    def reset(self) -> None:
        """Discard buffered output and accept writes again."""
        self._buffer.clear()
        self._finalized = False


class StreamWriter:
    """Writer that forwards bytes to an incremental sink.

    Bytes reach the sink as they are written; nothing already forwarded is
    retracted when a later step of the same call fails.

    Args:
        sink: A binary file-like object with write(), or a callable that
            accepts bytes.
        flush_on_finalize: Call sink.flush() on finalize() when available.
    """

    def __init__(
        self,
        sink: BinaryIO | Callable[[bytes], object],
        flush_on_finalize: bool = True,
    ) -> None:
        if hasattr(sink, "write"):
            self._emit: Callable[[bytes], object] = sink.write  # type: ignore[union-attr]
        else:
            self._emit = sink  # type: ignore[assignment]
        self._sink = sink
        self.flush_on_finalize = flush_on_finalize
        self._written = 0
        self._finalized = False

    @property
    def bytes_written(self) -> int:
        """Number of bytes forwarded to the sink since the last reset."""
        return self._written

    def write(self, data: bytes) -> None:
        """Forward raw bytes to the sink.

        Raises:
            LineProtocolIOError: If the sink raises OSError.
        """
        if self._finalized:
            raise RuntimeError("writer already finalized; call reset() first")
        try:
            self._emit(data)
        except OSError as exc:
            logger.debug("byte sink failed at offset %d: %s", self._written, exc)
            raise LineProtocolIOError(
                f"failed to write to sink: {exc}", self._written
            ) from exc
        self._written += len(data)

    def finalize(self) -> None:
        """Complete the current call, flushing the sink if configured."""
        self._finalized = True
        flush = getattr(self._sink, "flush", None)
        if not self.flush_on_finalize or flush is None:
            return
        try:
            flush()
        except OSError as exc:
            logger.debug("byte sink flush failed at offset %d: %s", self._written, exc)
            raise LineProtocolIOError(
                f"failed to flush sink: {exc}", self._written
            ) from exc

    def reset(self) -> None:
        """Accept writes again and restart the byte count."""
        self._written = 0
        self._finalized = False
