"""Conversion between values and their line protocol tokens.

Floats use Python's shortest round-trip repr, which always carries a
decimal point or an exponent, so a float never reads back as an integer.
"""

import math
import re

from influxlp.core.encoding.escaping import ElementKind, escape
from influxlp.core.errors import InvalidValueError
from influxlp.core.models import (
    INT64_MAX,
    INT64_MIN,
    UINT64_MAX,
    Absent,
    Boolean,
    Float,
    Integer,
    Text,
    UnsignedInteger,
    Value,
)

TRUE_TOKENS = frozenset({"t", "T", "true", "True", "TRUE"})
FALSE_TOKENS = frozenset({"f", "F", "false", "False", "FALSE"})

_INTEGER_RE = re.compile(r"-?[0-9]+i")
_UNSIGNED_RE = re.compile(r"[0-9]+u")
_FLOAT_RE = re.compile(r"-?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_TIMESTAMP_RE = re.compile(r"-?[0-9]+")


def format_float(number: float) -> str:
    """Format a float as its shortest exact decimal form.

    Raises:
        InvalidValueError: If the float is NaN or infinite.
    """
    if not math.isfinite(number):
        raise InvalidValueError(f"float must be finite, got {number!r}")
    return repr(number)


def format_field_value(value: Value) -> str:
    """Format a value as a field set token.

    Raises:
        InvalidValueError: If the value is ABSENT or not representable.
    """
    if isinstance(value, Float):
        return format_float(value.value)
    if isinstance(value, Boolean):
        return "true" if value.value else "false"
    if isinstance(value, Integer):
        return f"{value.value}i"
    if isinstance(value, UnsignedInteger):
        return f"{value.value}u"
    if isinstance(value, Text):
        return '"' + escape(value.value, ElementKind.FIELD_STRING) + '"'
    raise InvalidValueError(f"cannot format {value.kind.value} value")


def format_tag_value(value: Value) -> str:
    """Format a value as a tag set token.

    Text is written bare with tag escaping; other kinds use the field form.

    Raises:
        InvalidValueError: If the value is ABSENT or an empty string.
    """
    if isinstance(value, Text):
        if not value.value:
            raise InvalidValueError("tag value must not be empty")
        return escape(value.value, ElementKind.TAG_VALUE)
    return format_field_value(value)


def format_timestamp(timestamp: int) -> str:
    """Format a nanosecond timestamp.

    Raises:
        InvalidValueError: If the timestamp is not a signed 64-bit integer.
    """
    if isinstance(timestamp, bool) or not isinstance(timestamp, int):
        raise InvalidValueError(f"timestamp must be an integer, got {timestamp!r}")
    if not INT64_MIN <= timestamp <= INT64_MAX:
        raise InvalidValueError(f"timestamp {timestamp} out of signed 64-bit range")
    return str(timestamp)


def parse_number(token: str) -> Value | None:
    """Parse an unquoted token as an integer, unsigned integer or float.

    Returns:
        The typed value, or None if the token is not a number or is out of
        range for its type.
    """
    if _INTEGER_RE.fullmatch(token):
        number = int(token[:-1])
        return Integer(number) if INT64_MIN <= number <= INT64_MAX else None
    if _UNSIGNED_RE.fullmatch(token):
        number = int(token[:-1])
        return UnsignedInteger(number) if number <= UINT64_MAX else None
    if _FLOAT_RE.fullmatch(token):
        parsed = float(token)
        return Float(parsed) if math.isfinite(parsed) else None
    return None


def parse_boolean(token: str) -> Value | None:
    """Parse one of the accepted boolean spellings."""
    if token in TRUE_TOKENS:
        return Boolean(True)
    if token in FALSE_TOKENS:
        return Boolean(False)
    return None


def parse_field_token(token: str) -> Value | None:
    """Type an unquoted field value by its lexical form.

    Returns:
        The typed value, or None if the token has no valid typed form.
    """
    return parse_number(token) or parse_boolean(token)


def parse_tag_token(token: str) -> Value:
    """Type a tag value, falling back to Text for untyped tokens."""
    return parse_field_token(token) or Text(token)


def parse_timestamp(token: str) -> int | None:
    """Parse a decimal nanosecond timestamp, None if malformed or out of range."""
    if not _TIMESTAMP_RE.fullmatch(token):
        return None
    timestamp = int(token)
    return timestamp if INT64_MIN <= timestamp <= INT64_MAX else None


def is_absent(value: Value) -> bool:
    """Return True for the ABSENT placeholder."""
    return isinstance(value, Absent)
