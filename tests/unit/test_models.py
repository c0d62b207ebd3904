"""Tests for the value model and Point."""

import pytest

from influxlp.core.errors import InvalidValueError
from influxlp.core.models import (
    ABSENT,
    INT64_MAX,
    INT64_MIN,
    UINT64_MAX,
    Absent,
    Boolean,
    Float,
    Integer,
    Point,
    Text,
    UnsignedInteger,
    ValueKind,
    to_value,
)


class TestValueConstruction:
    """Tests for Value variant constructors."""

    @pytest.mark.core
    def test_each_variant_carries_its_kind(self) -> None:
        """Every variant is tagged with a distinct ValueKind."""
        assert Float(1.5).kind is ValueKind.FLOAT
        assert Integer(1).kind is ValueKind.INTEGER
        assert UnsignedInteger(1).kind is ValueKind.UNSIGNED
        assert Text("a").kind is ValueKind.TEXT
        assert Boolean(True).kind is ValueKind.BOOLEAN
        assert ABSENT.kind is ValueKind.ABSENT

    @pytest.mark.core
    def test_float_accepts_int_and_stores_float(self) -> None:
        """Float(2) stores 2.0."""
        value = Float(2)
        assert value.value == 2.0
        assert isinstance(value.value, float)

    @pytest.mark.core
    def test_float_rejects_huge_int(self) -> None:
        """An int beyond the float range raises InvalidValueError."""
        with pytest.raises(InvalidValueError, match="too large for a float"):
            Float(10**400)

    @pytest.mark.core
    def test_integer_rejects_bool(self) -> None:
        """bool is not accepted where an integer is expected."""
        with pytest.raises(InvalidValueError, match="integer value expected"):
            Integer(True)

    @pytest.mark.core
    def test_integer_range_is_signed_64_bit(self) -> None:
        """Integer accepts the signed 64-bit range only."""
        assert Integer(INT64_MIN).value == INT64_MIN
        assert Integer(INT64_MAX).value == INT64_MAX
        with pytest.raises(InvalidValueError, match="out of signed 64-bit range"):
            Integer(INT64_MAX + 1)

    @pytest.mark.core
    def test_unsigned_rejects_negative(self) -> None:
        """UnsignedInteger rejects values below zero."""
        with pytest.raises(InvalidValueError, match="out of 64-bit range"):
            UnsignedInteger(-1)

    @pytest.mark.core
    def test_unsigned_accepts_max(self) -> None:
        """UnsignedInteger accepts 2**64 - 1."""
        assert UnsignedInteger(UINT64_MAX).value == UINT64_MAX

    @pytest.mark.core
    def test_boolean_rejects_int(self) -> None:
        """Boolean only accepts bool."""
        with pytest.raises(InvalidValueError, match="boolean value expected"):
            Boolean(1)  # type: ignore[arg-type]

    @pytest.mark.core
    def test_text_rejects_bytes(self) -> None:
        """Text only accepts str."""
        with pytest.raises(InvalidValueError, match="string value expected"):
            Text(b"abc")  # type: ignore[arg-type]


class TestValueEquality:
    """Tests for structural equality and hashing."""

    @pytest.mark.core
    def test_equal_values_are_equal_and_hash_alike(self) -> None:
        """Values with the same kind and payload are interchangeable."""
        assert Float(1.5) == Float(1.5)
        assert hash(Text("a")) == hash(Text("a"))
        assert len({Integer(3), Integer(3), Integer(4)}) == 2

    @pytest.mark.core
    def test_different_kinds_are_not_equal(self) -> None:
        """Integer(1), UnsignedInteger(1) and Float(1.0) are all distinct."""
        assert Integer(1) != UnsignedInteger(1)
        assert Integer(1) != Float(1.0)
        assert Boolean(True) != Integer(1)

    @pytest.mark.core
    def test_absent_instances_are_equal(self) -> None:
        """Any Absent equals the ABSENT singleton."""
        assert Absent() == ABSENT
        assert hash(Absent()) == hash(ABSENT)


class TestToValue:
    """Tests for to_value() native conversion."""

    @pytest.mark.core
    @pytest.mark.parametrize(
        ("native", "expected"),
        [
            (None, ABSENT),
            (True, Boolean(True)),
            (False, Boolean(False)),
            (5, Integer(5)),
            (-5, Integer(-5)),
            (2.5, Float(2.5)),
            ("x", Text("x")),
            (INT64_MAX + 1, UnsignedInteger(INT64_MAX + 1)),
        ],
    )
    def test_native_scalars_map_to_variants(self, native, expected) -> None:
        """Native scalars map to the matching Value variant."""
        assert to_value(native) == expected

    @pytest.mark.core
    def test_value_passes_through(self) -> None:
        """An existing Value is returned unchanged."""
        value = UnsignedInteger(3)
        assert to_value(value) is value

    @pytest.mark.core
    def test_unsupported_type_raises(self) -> None:
        """Lists have no line protocol representation."""
        with pytest.raises(InvalidValueError, match="unsupported value type: list"):
            to_value([1, 2])

    @pytest.mark.core
    def test_integer_beyond_unsigned_range_raises(self) -> None:
        """Integers above 2**64 - 1 cannot be represented."""
        with pytest.raises(InvalidValueError):
            to_value(UINT64_MAX + 1)


class TestPoint:
    """Tests for the Point record."""

    @pytest.mark.core
    def test_defaults(self) -> None:
        """Tags and fields default to empty, timestamp to None."""
        point = Point(measurement="cpu")
        assert point.tags == {}
        assert point.fields == {}
        assert point.timestamp is None

    @pytest.mark.core
    def test_without_absent_drops_absent_entries(self) -> None:
        """without_absent() removes ABSENT tags and fields only."""
        point = Point(
            measurement="cpu",
            tags={"host": Text("a"), "zone": ABSENT},
            fields={"usage": Float(0.5), "idle": ABSENT},
            timestamp=10,
        )

        result = point.without_absent()

        assert result == Point(
            measurement="cpu",
            tags={"host": Text("a")},
            fields={"usage": Float(0.5)},
            timestamp=10,
        )

    @pytest.mark.core
    def test_is_immutable(self) -> None:
        """Point attributes cannot be reassigned."""
        point = Point(measurement="cpu")
        with pytest.raises(AttributeError):
            point.measurement = "mem"  # type: ignore[misc]
