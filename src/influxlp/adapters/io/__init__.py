"""Reader and writer adapters implementing ReaderPort and WriterPort."""

from influxlp.adapters.io.readers import (
    DEFAULT_CHUNK_SIZE,
    ReaderBase,
    SliceReader,
    StreamReader,
)
from influxlp.adapters.io.writers import BufferWriter, StreamWriter

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "BufferWriter",
    "ReaderBase",
    "SliceReader",
    "StreamReader",
    "StreamWriter",
]
