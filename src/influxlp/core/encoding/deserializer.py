"""Line protocol deserializer.

Parses records of the form::

    measurement[,tag=value...] field=value[,field=value...] [timestamp]

one per line. Blank lines and lines starting with the comment prefix are
skipped. Parsing is driven by a small state machine; each state consumes
its element from the reader and names the state that follows.
"""

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import Enum, auto

from influxlp.core.encoding.escaping import RESERVED_BYTES, ElementKind, unescape
from influxlp.core.encoding.numbers import (
    parse_field_token,
    parse_tag_token,
    parse_timestamp,
)
from influxlp.core.errors import LineProtocolSyntaxError
from influxlp.core.models import Point, Position, Text, Value
from influxlp.core.ports import ReaderPort

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "#"

_BACKSLASH = ord("\\")
_QUOTE = ord('"')
_COMMA = ord(",")
_EQUALS = ord("=")
_SPACE = ord(" ")
_TAB = ord("\t")
_CR = ord("\r")
_NEWLINE = ord("\n")

_BLANKS = frozenset({_SPACE, _TAB})
_TRAILING = frozenset({_SPACE, _TAB, _CR})

# Bytes that end each kind of token when not escaped
_MEASUREMENT_STOP = frozenset({_COMMA, _SPACE, _TAB, _NEWLINE})
_KEY_STOP = frozenset({_COMMA, _EQUALS, _SPACE, _TAB, _NEWLINE})
_FIELD_VALUE_STOP = frozenset({_COMMA, _SPACE, _TAB, _CR, _NEWLINE})
_TIMESTAMP_STOP = frozenset({_SPACE, _TAB, _CR, _NEWLINE})


class State(Enum):
    """Parser states within one record."""

    START = auto()
    MEASUREMENT = auto()
    TAG_LOOP = auto()
    EXPECT_FIELD_SEPARATOR_WS = auto()
    FIELD_LOOP = auto()
    EXPECT_TIMESTAMP_WS = auto()
    TIMESTAMP = auto()
    RECORD_END = auto()


@dataclass
class _RecordBuilder:
    measurement: str = ""
    tags: dict[str, Value] = field(default_factory=dict)
    fields: dict[str, Value] = field(default_factory=dict)
    timestamp: int | None = None

    def build(self) -> Point:
        return Point(
            measurement=self.measurement,
            tags=self.tags,
            fields=self.fields,
            timestamp=self.timestamp,
        )


class Deserializer:
    """Pull parser producing Points from a ReaderPort.

    Iterating a Deserializer yields one Point per record. A syntax error
    is raised when the failing record is reached; records before it have
    already been yielded.

    Args:
        reader: Source of input bytes.
        comment_prefix: Single character that marks a comment line.
    """

    def __init__(
        self, reader: ReaderPort, comment_prefix: str = COMMENT_PREFIX
    ) -> None:
        if len(comment_prefix) != 1 or not comment_prefix.isascii():
            raise ValueError("comment_prefix must be a single ASCII character")
        self._reader = reader
        self._comment = ord(comment_prefix)
        self._handlers: dict[State, Callable[[_RecordBuilder], State]] = {
            State.START: self._start,
            State.MEASUREMENT: self._measurement,
            State.TAG_LOOP: self._tag,
            State.EXPECT_FIELD_SEPARATOR_WS: self._field_separator,
            State.FIELD_LOOP: self._field,
            State.EXPECT_TIMESTAMP_WS: self._timestamp_separator,
            State.TIMESTAMP: self._timestamp,
        }

    def __iter__(self) -> Iterator[Point]:
        while (point := self.next_point()) is not None:
            yield point

    def next_point(self) -> Point | None:
        """Parse the next record.

        Returns:
            The next Point, or None when the input holds no further records.

        Raises:
            LineProtocolSyntaxError: If the record is malformed.
        """
        if not self._skip_to_record():
            return None
        record = _RecordBuilder()
        state = State.START
        while state is not State.RECORD_END:
            state = self._handlers[state](record)
        self._record_end()
        return record.build()

    def parse_all(self) -> list[Point]:
        """Parse every remaining record, failing on the first error."""
        points = list(self)
        logger.debug("parsed %d line protocol records", len(points))
        return points

    def parse_single(self) -> Point:
        """Parse input that must contain exactly one record.

        Raises:
            LineProtocolSyntaxError: If the input is empty or holds more
                than one record.
        """
        point = self.next_point()
        if point is None:
            raise self._error("empty input")
        if self._skip_to_record():
            raise self._error("expected a single record")
        return point

    # === Lexical helpers ===

    def _error(
        self, message: str, position: Position | None = None
    ) -> LineProtocolSyntaxError:
        return LineProtocolSyntaxError(message, position or self._reader.position())

    def _skip(self, chars: frozenset[int]) -> None:
        reader = self._reader
        while (byte := reader.peek()) is not None and byte in chars:
            reader.advance()

    def _skip_to_record(self) -> bool:
        """Skip blank and comment lines. Returns False at end of input."""
        reader = self._reader
        while True:
            self._skip(_TRAILING)
            byte = reader.peek()
            if byte is None:
                return False
            if byte == _NEWLINE:
                reader.advance()
                continue
            if byte == self._comment:
                logger.debug("skipping comment at line %d", reader.position().line)
                while (byte := reader.advance()) is not None and byte != _NEWLINE:
                    pass
                continue
            return True

    def _decode(self, raw: bytearray, start: Position, what: str) -> str:
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            raise self._error(f"invalid UTF-8 in {what}", start) from None

    def _read_escaped(
        self, kind: ElementKind, stop: frozenset[int]
    ) -> tuple[str, Position]:
        """Read an escapable token and return its unescaped text and start."""
        reader = self._reader
        start = reader.position()
        reserved = RESERVED_BYTES[kind]
        raw = bytearray()
        while (byte := reader.peek()) is not None and byte not in stop:
            reader.advance()
            raw.append(byte)
            if byte == _BACKSLASH:
                following = reader.peek()
                if following is not None and following in reserved:
                    reader.advance()
                    raw.append(following)
        return unescape(self._decode(raw, start, kind.value), kind), start

    def _read_raw(self, stop: frozenset[int], what: str) -> tuple[str, Position]:
        reader = self._reader
        start = reader.position()
        raw = bytearray()
        while (byte := reader.peek()) is not None and byte not in stop:
            raw.append(reader.advance())  # type: ignore[arg-type]
        return self._decode(raw, start, what), start

    def _read_quoted(self) -> Text:
        """Read a double quoted field string, starting at the opening quote."""
        reader = self._reader
        start = reader.position()
        reader.advance()
        raw = bytearray()
        while True:
            byte = reader.advance()
            if byte is None:
                raise self._error("unterminated string value")
            if byte == _QUOTE:
                break
            raw.append(byte)
            if byte == _BACKSLASH:
                following = reader.peek()
                if following in (_QUOTE, _BACKSLASH):
                    raw.append(reader.advance())  # type: ignore[arg-type]
        text = self._decode(raw, start, ElementKind.FIELD_STRING.value)
        return Text(unescape(text, ElementKind.FIELD_STRING))

    def _expect_fields_follow(self) -> None:
        byte = self._reader.peek()
        if byte is None or byte == _NEWLINE:
            raise self._error("expected field set")

    # === State handlers ===

    def _start(self, record: _RecordBuilder) -> State:
        return State.MEASUREMENT

    def _measurement(self, record: _RecordBuilder) -> State:
        name, start = self._read_escaped(ElementKind.MEASUREMENT, _MEASUREMENT_STOP)
        if not name:
            raise self._error("expected measurement", start)
        record.measurement = name
        byte = self._reader.peek()
        if byte == _COMMA:
            self._reader.advance()
            return State.TAG_LOOP
        self._expect_fields_follow()
        return State.EXPECT_FIELD_SEPARATOR_WS

    def _tag(self, record: _RecordBuilder) -> State:
        reader = self._reader
        key, key_start = self._read_escaped(ElementKind.TAG_KEY, _KEY_STOP)
        if not key:
            raise self._error("expected tag key", key_start)
        if reader.peek() != _EQUALS:
            raise self._error("expected '=' after tag key")
        reader.advance()
        value, value_start = self._read_escaped(ElementKind.TAG_VALUE, _KEY_STOP)
        if not value:
            raise self._error("expected tag value", value_start)
        if reader.peek() == _EQUALS:
            raise self._error("unexpected '=' in tag value")
        if key in record.tags:
            raise self._error(f"duplicate tag key {key!r}", key_start)
        record.tags[key] = parse_tag_token(value)

        if reader.peek() == _COMMA:
            reader.advance()
            return State.TAG_LOOP
        self._expect_fields_follow()
        return State.EXPECT_FIELD_SEPARATOR_WS

    def _field_separator(self, record: _RecordBuilder) -> State:
        self._skip(_BLANKS)
        self._expect_fields_follow()
        return State.FIELD_LOOP

    def _field(self, record: _RecordBuilder) -> State:
        reader = self._reader
        key, key_start = self._read_escaped(ElementKind.FIELD_KEY, _KEY_STOP)
        if not key:
            raise self._error("expected field key", key_start)
        if reader.peek() != _EQUALS:
            raise self._error("expected '=' after field key")
        reader.advance()

        value: Value | None
        if reader.peek() == _QUOTE:
            value = self._read_quoted()
        else:
            token, value_start = self._read_raw(_FIELD_VALUE_STOP, "field value")
            if not token:
                raise self._error("expected field value", value_start)
            value = parse_field_token(token)
            if value is None:
                raise self._error(f"invalid field value {token!r}", value_start)
        if key in record.fields:
            raise self._error(f"duplicate field key {key!r}", key_start)
        record.fields[key] = value

        byte = reader.peek()
        if byte == _COMMA:
            reader.advance()
            return State.FIELD_LOOP
        if byte in _BLANKS:
            return State.EXPECT_TIMESTAMP_WS
        if byte is None or byte in (_CR, _NEWLINE):
            return State.RECORD_END
        raise self._error(f"unexpected character {chr(byte)!r} after field value")

    def _timestamp_separator(self, record: _RecordBuilder) -> State:
        self._skip(_BLANKS)
        byte = self._reader.peek()
        if byte is None or byte in (_CR, _NEWLINE):
            return State.RECORD_END
        return State.TIMESTAMP

    def _timestamp(self, record: _RecordBuilder) -> State:
        token, start = self._read_raw(_TIMESTAMP_STOP, "timestamp")
        timestamp = parse_timestamp(token)
        if timestamp is None:
            raise self._error(f"invalid timestamp {token!r}", start)
        record.timestamp = timestamp
        return State.RECORD_END

    def _record_end(self) -> None:
        self._skip(_TRAILING)
        byte = self._reader.peek()
        if byte is None:
            return
        if byte == _NEWLINE:
            self._reader.advance()
            return
        raise self._error(f"unexpected character {chr(byte)!r} at end of record")
