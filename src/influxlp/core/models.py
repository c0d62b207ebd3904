"""Core domain models for line protocol data."""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar

from influxlp.core.errors import InvalidValueError

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
UINT64_MAX = 2**64 - 1


class ValueKind(Enum):
    """Discriminant of a Value variant."""

    FLOAT = "float"
    INTEGER = "integer"
    UNSIGNED = "unsigned integer"
    TEXT = "string"
    BOOLEAN = "boolean"
    ABSENT = "absent"


@dataclass(frozen=True)
class Float:
    """A 64-bit floating point value, written as ``1.5``."""

    value: float
    kind: ClassVar[ValueKind] = ValueKind.FLOAT

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise InvalidValueError(f"float value expected, got {self.value!r}")
        try:
            number = float(self.value)
        except OverflowError:
            raise InvalidValueError(
                f"integer {self.value} too large for a float"
            ) from None
        object.__setattr__(self, "value", number)


@dataclass(frozen=True)
class Integer:
    """A signed 64-bit integer value, written as ``15i``."""

    value: int
    kind: ClassVar[ValueKind] = ValueKind.INTEGER

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidValueError(f"integer value expected, got {self.value!r}")
        if not INT64_MIN <= self.value <= INT64_MAX:
            raise InvalidValueError(f"integer {self.value} out of signed 64-bit range")


@dataclass(frozen=True)
class UnsignedInteger:
    """An unsigned 64-bit integer value, written as ``15u``."""

    value: int
    kind: ClassVar[ValueKind] = ValueKind.UNSIGNED

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidValueError(f"integer value expected, got {self.value!r}")
        if not 0 <= self.value <= UINT64_MAX:
            raise InvalidValueError(
                f"unsigned integer {self.value} out of 64-bit range"
            )


@dataclass(frozen=True)
class Text:
    """A string value, written double quoted in a field set."""

    value: str
    kind: ClassVar[ValueKind] = ValueKind.TEXT

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise InvalidValueError(f"string value expected, got {self.value!r}")


@dataclass(frozen=True)
class Boolean:
    """A boolean value, written as ``true`` or ``false``."""

    value: bool
    kind: ClassVar[ValueKind] = ValueKind.BOOLEAN

    def __post_init__(self) -> None:
        if not isinstance(self.value, bool):
            raise InvalidValueError(f"boolean value expected, got {self.value!r}")


@dataclass(frozen=True)
class Absent:
    """Placeholder for a missing value. Never written to output."""

    kind: ClassVar[ValueKind] = ValueKind.ABSENT


ABSENT = Absent()

Value = Float | Integer | UnsignedInteger | Text | Boolean | Absent

_VALUE_TYPES = (Float, Integer, UnsignedInteger, Text, Boolean, Absent)


def to_value(obj: object) -> Value:
    """Convert a native Python scalar to its Value variant.

    Args:
        obj: A Value, None, bool, int, float or str.

    Returns:
        The matching Value. None maps to ABSENT. Integers above the signed
        64-bit range but within the unsigned range map to UnsignedInteger.

    Raises:
        InvalidValueError: If the object has no line protocol representation.
    """
    if isinstance(obj, _VALUE_TYPES):
        return obj
    if obj is None:
        return ABSENT
    # bool before int: bool is an int subclass
    if isinstance(obj, bool):
        return Boolean(obj)
    if isinstance(obj, int):
        if INT64_MAX < obj <= UINT64_MAX:
            return UnsignedInteger(obj)
        return Integer(obj)
    if isinstance(obj, float):
        return Float(obj)
    if isinstance(obj, str):
        return Text(obj)
    raise InvalidValueError(f"unsupported value type: {type(obj).__name__}")


@dataclass(frozen=True)
class Position:
    """Location of the next unconsumed byte in a reader.

    Attributes:
        offset: 0-based count of bytes consumed so far.
        line: 1-based line number.
        column: 1-based column within the line, counted in bytes.
    """

    offset: int = 0
    line: int = 1
    column: int = 1


@dataclass(frozen=True)
class Point:
    """A single line protocol record.

    Attributes:
        measurement: Series name (e.g., cpu).
        tags: Indexed key-value pairs, written in iteration order.
        fields: Unindexed key-value pairs, written in iteration order.
        timestamp: Unix time in nanoseconds, if any.
    """

    measurement: str
    tags: dict[str, Value] = field(default_factory=dict)
    fields: dict[str, Value] = field(default_factory=dict)
    timestamp: int | None = None

    def without_absent(self) -> "Point":
        """Return a copy with all ABSENT tag and field entries dropped."""
        return Point(
            measurement=self.measurement,
            tags={k: v for k, v in self.tags.items() if not isinstance(v, Absent)},
            fields={k: v for k, v in self.fields.items() if not isinstance(v, Absent)},
            timestamp=self.timestamp,
        )
