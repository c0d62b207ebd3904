"""Explicit conversions between Value kinds.

Values never change after construction; every conversion returns a new
Value or raises TypeCoercionError. The tables below are the complete set of
conversions the codec performs.
"""

import math

from influxlp.core.errors import InvalidValueError, TypeCoercionError
from influxlp.core.models import (
    INT64_MAX,
    INT64_MIN,
    UINT64_MAX,
    Boolean,
    Float,
    Integer,
    Text,
    UnsignedInteger,
    Value,
    ValueKind,
)

TRUE_STRINGS = frozenset({"true", "t", "1"})
FALSE_STRINGS = frozenset({"false", "f", "0"})

_NUMERIC_KINDS = frozenset({ValueKind.FLOAT, ValueKind.INTEGER, ValueKind.UNSIGNED})


def _to_float(value: Value) -> Value | None:
    if isinstance(value, (Integer, UnsignedInteger)):
        converted = float(value.value)
        # Large integers lose precision as floats
        if int(converted) == value.value:
            return Float(converted)
    return None


def _to_integer(value: Value) -> Value | None:
    if isinstance(value, UnsignedInteger) and value.value <= INT64_MAX:
        return Integer(value.value)
    if isinstance(value, Float) and math.isfinite(value.value):
        if value.value.is_integer() and INT64_MIN <= value.value <= INT64_MAX:
            return Integer(int(value.value))
    return None


def _to_unsigned(value: Value) -> Value | None:
    if isinstance(value, Integer) and value.value >= 0:
        return UnsignedInteger(value.value)
    if isinstance(value, Float) and math.isfinite(value.value):
        if value.value.is_integer() and 0 <= value.value <= UINT64_MAX:
            return UnsignedInteger(int(value.value))
    return None


def _to_boolean(value: Value) -> Value | None:
    if isinstance(value, Text):
        lowered = value.value.lower()
        if lowered in TRUE_STRINGS:
            return Boolean(True)
        if lowered in FALSE_STRINGS:
            return Boolean(False)
        return None
    if isinstance(value, Float) and math.isnan(value.value):
        return None
    if value.kind in _NUMERIC_KINDS:
        return Boolean(value.value != 0)
    return None


def _to_text(value: Value) -> Value | None:
    if isinstance(value, Boolean):
        return Text("true" if value.value else "false")
    if isinstance(value, Float):
        return Text(repr(value.value))
    if isinstance(value, (Integer, UnsignedInteger)):
        return Text(str(value.value))
    return None


_CONVERTERS = {
    ValueKind.FLOAT: _to_float,
    ValueKind.INTEGER: _to_integer,
    ValueKind.UNSIGNED: _to_unsigned,
    ValueKind.BOOLEAN: _to_boolean,
    ValueKind.TEXT: _to_text,
}


def coerce(value: Value, target: ValueKind) -> Value:
    """Convert a value to the target kind.

    Numeric conversions succeed only when no information is lost. Boolean
    conversion follows the text and zero/nonzero rules. Text conversion
    renders numbers and booleans as bare tokens.

    Args:
        value: The source value.
        target: The kind to convert to.

    Returns:
        A value of the target kind. The source itself if kinds match.

    Raises:
        TypeCoercionError: If no lossless conversion exists.
    """
    if value.kind is target:
        return value
    converter = _CONVERTERS.get(target)
    converted = converter(value) if converter is not None else None
    if converted is None:
        raise TypeCoercionError(value.kind, target)
    return converted


_NATIVE_KINDS: dict[type, ValueKind] = {
    bool: ValueKind.BOOLEAN,
    int: ValueKind.INTEGER,
    float: ValueKind.FLOAT,
    str: ValueKind.TEXT,
}


def to_native(value: Value, target: type) -> bool | int | float | str:
    """Convert a value to a native Python scalar of the given type.

    An int target accepts both signed and unsigned integers unchanged.

    Raises:
        TypeCoercionError: If the value cannot be converted.
        InvalidValueError: If the target type is not a supported scalar.
    """
    kind = _NATIVE_KINDS.get(target)
    if kind is None:
        raise InvalidValueError(f"unsupported target type: {target.__name__}")
    if target is int and isinstance(value, UnsignedInteger):
        return value.value
    converted = coerce(value, kind)
    return converted.value  # type: ignore[union-attr]
