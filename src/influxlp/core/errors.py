"""Exception hierarchy for line protocol encoding and decoding.

Every error raised by the codec derives from LineProtocolError. Each class
also derives from the closest standard exception so callers that already
handle ValueError, TypeError or OSError keep working.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from influxlp.core.models import Position, ValueKind


class LineProtocolError(Exception):
    """Base class for all influxlp errors."""


class LineProtocolSyntaxError(LineProtocolError, ValueError):
    """Malformed line protocol input.

    Attributes:
        message: Human readable description of the failure.
        offset: 0-based byte offset of the failing byte.
        line: 1-based line of the failing byte.
        column: 1-based column of the failing byte.
    """

    def __init__(self, message: str, position: Position) -> None:
        self.message = message
        self.offset = position.offset
        self.line = position.line
        self.column = position.column
        super().__init__(
            f"{message} at line {self.line}, column {self.column} "
            f"(offset {self.offset})"
        )


class EmptyMeasurementError(LineProtocolError, ValueError):
    """A point was serialized with an empty measurement name."""

    def __init__(self) -> None:
        super().__init__("measurement must not be empty")


class MissingFieldError(LineProtocolError, ValueError):
    """A point was serialized without any non-absent field."""

    def __init__(self, measurement: str) -> None:
        self.measurement = measurement
        super().__init__(f"point {measurement!r} has no fields to write")


class InvalidValueError(LineProtocolError, ValueError):
    """A value cannot be represented in line protocol."""


class TypeCoercionError(LineProtocolError, TypeError):
    """A value cannot be converted to the requested kind.

    Attributes:
        from_kind: Kind of the source value.
        to_kind: Kind that was requested.
    """

    def __init__(self, from_kind: ValueKind, to_kind: ValueKind) -> None:
        self.from_kind = from_kind
        self.to_kind = to_kind
        super().__init__(f"cannot coerce {from_kind.value} to {to_kind.value}")


class LineProtocolIOError(LineProtocolError, OSError):
    """The underlying byte source or sink failed.

    Attributes:
        offset: Number of bytes read or written before the failure.
    """

    def __init__(self, message: str, offset: int) -> None:
        self.offset = offset
        super().__init__(f"{message} (offset {offset})")
