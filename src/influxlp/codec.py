"""Entry points for encoding and decoding line protocol.

In-memory input is read through a SliceReader and output collected in a
BufferWriter. Any other source or sink is wrapped in the streaming
adapters.
"""

from collections.abc import Callable, Iterable, Iterator
from typing import BinaryIO

from influxlp.adapters.io.readers import SliceReader, StreamReader
from influxlp.adapters.io.writers import BufferWriter, StreamWriter
from influxlp.core.encoding.deserializer import Deserializer
from influxlp.core.encoding.serializer import Serializer
from influxlp.core.models import Point
from influxlp.core.ports import ReaderPort

Source = str | bytes | bytearray | memoryview | BinaryIO | Iterable[bytes]
Sink = BinaryIO | Callable[[bytes], object]


def _reader_for(source: Source) -> ReaderPort:
    if isinstance(source, (str, bytes, bytearray, memoryview)):
        return SliceReader(source)
    return StreamReader(source)


def serialize(point: Point) -> str:
    """Encode one Point as a line protocol record.

    Args:
        point: The point to encode.

    Returns:
        The record text without a trailing line feed.
    """
    writer = BufferWriter()
    Serializer(writer).serialize(point)
    return writer.getvalue().decode("utf-8")


def serialize_many(points: Iterable[Point]) -> str:
    """Encode Points as records joined by line feeds.

    Returns:
        Line protocol text with no trailing separator.
        Empty string if no points.
    """
    writer = BufferWriter()
    Serializer(writer).serialize_many(points)
    return writer.getvalue().decode("utf-8")


def serialize_to(points: Point | Iterable[Point], sink: Sink) -> None:
    """Stream one or more Points to a byte sink.

    Bytes for records written before a failure stay in the sink.

    Args:
        points: A Point or an iterable of Points.
        sink: Binary file-like object or callable accepting bytes.
    """
    serializer = Serializer(StreamWriter(sink))
    if isinstance(points, Point):
        serializer.serialize(points)
    else:
        serializer.serialize_many(points)


def deserialize(data: str | bytes | bytearray | memoryview) -> Point:
    """Decode text holding exactly one record.

    Raises:
        LineProtocolSyntaxError: If the text is malformed, empty, or holds
            more than one record.
    """
    return Deserializer(SliceReader(data)).parse_single()


def deserialize_many(data: str | bytes | bytearray | memoryview) -> list[Point]:
    """Decode every record in the text.

    Blank and comment lines are skipped. The first malformed record aborts
    the call and no points are returned.

    Raises:
        LineProtocolSyntaxError: On the first malformed record.
    """
    return Deserializer(SliceReader(data)).parse_all()


def iter_deserialize(source: Source) -> Iterator[Point]:
    """Lazily decode records from text or a byte stream.

    Points are yielded as each record is parsed. A malformed record raises
    when it is reached, after the records before it were yielded.

    Args:
        source: Text, bytes, a binary file-like object, or an iterable of
            bytes chunks.
    """
    yield from Deserializer(_reader_for(source))


def deserialize_from(stream: BinaryIO | Iterable[bytes]) -> list[Point]:
    """Decode every record from a byte stream, failing on the first error."""
    return Deserializer(StreamReader(stream)).parse_all()
