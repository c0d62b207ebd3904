"""Line protocol serializer.

Writes a Point as a single record through a WriterPort. ABSENT tags and
fields are skipped; tags and fields keep the caller's iteration order.
"""

import logging
from collections.abc import Iterable

from influxlp.core.encoding.escaping import ElementKind, escape
from influxlp.core.encoding.numbers import (
    format_field_value,
    format_tag_value,
    format_timestamp,
    is_absent,
)
from influxlp.core.errors import (
    EmptyMeasurementError,
    InvalidValueError,
    MissingFieldError,
)
from influxlp.core.models import Point, Text, to_value
from influxlp.core.ports import WriterPort

logger = logging.getLogger(__name__)

DEFAULT_LINE_SEPARATOR = "\n"

# Readers treat these as token delimiters, so no escape can protect them
_UNESCAPABLE = ("\n", "\t")


def _check_name(text: str, kind: ElementKind) -> None:
    if not isinstance(text, str):
        raise InvalidValueError(f"{kind.value} must be a string, got {text!r}")
    if not text:
        raise InvalidValueError(f"{kind.value} must not be empty")
    for char in _UNESCAPABLE:
        if char in text:
            raise InvalidValueError(f"{kind.value} {text!r} contains {char!r}")
    # The separator written next would read as an escaped character
    if text.endswith("\\"):
        raise InvalidValueError(f"{kind.value} {text!r} ends with a backslash")


def encode_measurement(measurement: str) -> str:
    """Validate and escape a measurement name.

    Raises:
        EmptyMeasurementError: If the name is empty.
        InvalidValueError: If the name starts with '#' or a carriage
            return, ends with a backslash, or holds a tab or line feed.
    """
    if measurement == "":
        raise EmptyMeasurementError()
    _check_name(measurement, ElementKind.MEASUREMENT)
    if measurement.startswith("#"):
        raise InvalidValueError(
            f"measurement {measurement!r} would be read as a comment"
        )
    if measurement.startswith("\r"):
        raise InvalidValueError(
            f"measurement {measurement!r} starts with a carriage return"
        )
    return escape(measurement, ElementKind.MEASUREMENT)


def encode_tag(key: str, value: object) -> str | None:
    """Encode one ``key=value`` tag pair, or None for an ABSENT value."""
    tag_value = to_value(value)
    if is_absent(tag_value):
        return None
    _check_name(key, ElementKind.TAG_KEY)
    if isinstance(tag_value, Text):
        _check_name(tag_value.value, ElementKind.TAG_VALUE)
    return f"{escape(key, ElementKind.TAG_KEY)}={format_tag_value(tag_value)}"


def encode_field(key: str, value: object) -> str | None:
    """Encode one ``key=value`` field pair, or None for an ABSENT value."""
    field_value = to_value(value)
    if is_absent(field_value):
        return None
    _check_name(key, ElementKind.FIELD_KEY)
    return f"{escape(key, ElementKind.FIELD_KEY)}={format_field_value(field_value)}"


class Serializer:
    """Writes Points to a WriterPort.

    Args:
        writer: Destination for encoded bytes.
        line_separator: Separator placed between records by serialize_many().
    """

    def __init__(
        self, writer: WriterPort, line_separator: str = DEFAULT_LINE_SEPARATOR
    ) -> None:
        self._writer = writer
        self.set_line_separator(line_separator)

    def set_line_separator(self, separator: str) -> None:
        """Set the separator written between records.

        Args:
            separator: Either "\\n" or "\\r\\n".
        """
        if separator not in ("\n", "\r\n"):
            raise ValueError("line separator must be '\\n' or '\\r\\n'")
        self.line_separator = separator

    def _write(self, text: str) -> None:
        self._writer.write(text.encode("utf-8"))

    def write_point(self, point: Point) -> None:
        """Write one record without a trailing separator.

        The measurement and tags are written before fields are checked, so
        a streaming writer may hold a partial record when this raises.

        Raises:
            EmptyMeasurementError: If the measurement is empty.
            MissingFieldError: If every field is ABSENT.
            InvalidValueError: If a name or value cannot be represented.
        """
        self._write(encode_measurement(point.measurement))
        for key, value in point.tags.items():
            pair = encode_tag(key, value)
            if pair is not None:
                self._write("," + pair)

        pairs = [encode_field(key, value) for key, value in point.fields.items()]
        present = [pair for pair in pairs if pair is not None]
        if not present:
            raise MissingFieldError(point.measurement)
        line_end = ""
        if point.timestamp is not None:
            line_end = " " + format_timestamp(point.timestamp)
        self._write(" " + ",".join(present) + line_end)

    def serialize(self, point: Point) -> None:
        """Write one record and finalize the writer."""
        self.write_point(point)
        self._writer.finalize()

    def serialize_many(self, points: Iterable[Point]) -> None:
        """Write records separated by the line separator, then finalize."""
        count = 0
        for point in points:
            if count:
                self._write(self.line_separator)
            self.write_point(point)
            count += 1
        self._writer.finalize()
        logger.debug("serialized %d line protocol records", count)
