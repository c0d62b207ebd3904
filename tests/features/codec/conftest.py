"""BDD step definitions for line protocol codec features."""

from dataclasses import dataclass, field

import pytest
from pytest_bdd import given, parsers, then, when

from influxlp import (
    ABSENT,
    Boolean,
    Float,
    Integer,
    LineProtocolError,
    LineProtocolSyntaxError,
    Point,
    Text,
    UnsignedInteger,
    Value,
    deserialize_many,
    serialize_many,
)


@dataclass
class PendingPoint:
    """Point under construction by given-steps."""

    measurement: str
    tags: dict[str, Value] = field(default_factory=dict)
    fields: dict[str, Value] = field(default_factory=dict)
    timestamp: int | None = None

    def build(self) -> Point:
        return Point(self.measurement, self.tags, self.fields, self.timestamp)


@dataclass
class CodecScenarioContext:
    """State shared between the steps of one scenario."""

    pending: list[PendingPoint] = field(default_factory=list)
    lines: list[str] = field(default_factory=list)
    output: str | None = None
    decoded: list[Point] = field(default_factory=list)
    error: LineProtocolError | None = None

    @property
    def current(self) -> PendingPoint:
        return self.pending[-1]

    def points(self) -> list[Point]:
        return [p.build() for p in self.pending]


@pytest.fixture
def ctx() -> CodecScenarioContext:
    """Fresh scenario context for each test."""
    return CodecScenarioContext()


# === Building points ===


@given(parsers.parse('a point "{measurement}" at timestamp {timestamp:d}'))
def step_point_at(ctx: CodecScenarioContext, measurement: str, timestamp: int) -> None:
    ctx.pending.append(PendingPoint(measurement, timestamp=timestamp))


@given(parsers.parse('a point "{measurement}"'))
def step_point(ctx: CodecScenarioContext, measurement: str) -> None:
    ctx.pending.append(PendingPoint(measurement))


@given(parsers.parse('a text tag "{key}" of "{text}"'))
def step_text_tag(ctx: CodecScenarioContext, key: str, text: str) -> None:
    ctx.current.tags[key] = Text(text)


@given(parsers.parse('a float tag "{key}" of {number:g}'))
def step_float_tag(ctx: CodecScenarioContext, key: str, number: float) -> None:
    ctx.current.tags[key] = Float(number)


@given(parsers.parse('an absent tag "{key}"'))
def step_absent_tag(ctx: CodecScenarioContext, key: str) -> None:
    ctx.current.tags[key] = ABSENT


@given(parsers.parse('a text field "{key}" of "{text}"'))
def step_text_field(ctx: CodecScenarioContext, key: str, text: str) -> None:
    ctx.current.fields[key] = Text(text)


@given(parsers.parse('a float field "{key}" of {number:g}'))
def step_float_field(ctx: CodecScenarioContext, key: str, number: float) -> None:
    ctx.current.fields[key] = Float(number)


@given(parsers.parse('an integer field "{key}" of {number:d}'))
def step_integer_field(ctx: CodecScenarioContext, key: str, number: int) -> None:
    ctx.current.fields[key] = Integer(number)


@given(parsers.parse('an unsigned field "{key}" of {number:d}'))
def step_unsigned_field(ctx: CodecScenarioContext, key: str, number: int) -> None:
    ctx.current.fields[key] = UnsignedInteger(number)


@given(parsers.parse('a boolean field "{key}" of {flag}'))
def step_boolean_field(ctx: CodecScenarioContext, key: str, flag: str) -> None:
    ctx.current.fields[key] = Boolean(flag == "true")


@given(parsers.parse('an absent field "{key}"'))
def step_absent_field(ctx: CodecScenarioContext, key: str) -> None:
    ctx.current.fields[key] = ABSENT


# === Building input ===


@given(parsers.parse("the input line '{line}'"))
def step_input_line(ctx: CodecScenarioContext, line: str) -> None:
    ctx.lines.append(line)


@given("a blank input line")
def step_blank_line(ctx: CodecScenarioContext) -> None:
    ctx.lines.append("")


# === Actions ===


@when("the points are serialized")
def step_serialize(ctx: CodecScenarioContext) -> None:
    try:
        ctx.output = serialize_many(ctx.points())
    except LineProtocolError as exc:
        ctx.error = exc


@when("the input is deserialized")
def step_deserialize(ctx: CodecScenarioContext) -> None:
    try:
        ctx.decoded = deserialize_many("\n".join(ctx.lines))
    except LineProtocolError as exc:
        ctx.error = exc


# === Serializer outcomes ===


@then(parsers.parse("the output is '{expected}'"))
def step_output_is(ctx: CodecScenarioContext, expected: str) -> None:
    assert ctx.error is None
    assert ctx.output == expected


@then(parsers.parse("the output line {index:d} starts with '{prefix}'"))
def step_output_line_prefix(ctx: CodecScenarioContext, index: int, prefix: str) -> None:
    assert ctx.output is not None
    assert ctx.output.split("\n")[index - 1].startswith(prefix)


@then(parsers.parse("the output has {count:d} lines"))
def step_output_lines(ctx: CodecScenarioContext, count: int) -> None:
    assert ctx.output is not None
    assert len(ctx.output.split("\n")) == count


@then("the output round trips to the same points")
def step_round_trip(ctx: CodecScenarioContext) -> None:
    assert ctx.output is not None
    expected = [p.without_absent() for p in ctx.points()]
    assert deserialize_many(ctx.output) == expected


@then(parsers.parse("serialization fails with {error_name}"))
def step_serialization_fails(ctx: CodecScenarioContext, error_name: str) -> None:
    assert ctx.error is not None
    assert type(ctx.error).__name__ == error_name


# === Deserializer outcomes ===


@then(parsers.re(r"(?P<count>\d+) points? (is|are) decoded"))
def step_decoded_count(ctx: CodecScenarioContext, count: str) -> None:
    assert ctx.error is None
    assert len(ctx.decoded) == int(count)


@then(parsers.parse('point {index:d} has measurement "{measurement}"'))
def step_measurement(ctx: CodecScenarioContext, index: int, measurement: str) -> None:
    assert ctx.decoded[index - 1].measurement == measurement


@then(parsers.parse("point {index:d} has no tags"))
def step_no_tags(ctx: CodecScenarioContext, index: int) -> None:
    assert ctx.decoded[index - 1].tags == {}


@then(parsers.parse("point {index:d} has no timestamp"))
def step_no_timestamp(ctx: CodecScenarioContext, index: int) -> None:
    assert ctx.decoded[index - 1].timestamp is None


@then(parsers.parse("point {index:d} has timestamp {timestamp:d}"))
def step_timestamp(ctx: CodecScenarioContext, index: int, timestamp: int) -> None:
    assert ctx.decoded[index - 1].timestamp == timestamp


def _expected_value(kind: str, literal: str) -> Value:
    if kind == "text":
        return Text(literal.strip('"'))
    if kind == "boolean":
        return Boolean(literal == "true")
    if kind == "integer":
        return Integer(int(literal))
    if kind == "unsigned integer":
        return UnsignedInteger(int(literal))
    return Float(float(literal))


@then(
    parsers.re(
        r'point (?P<index>\d+) (?P<element>tag|field) "(?P<key>[^"]+)" is the '
        r"(?P<kind>text|boolean|integer|unsigned integer|float) (?P<literal>.+)"
    )
)
def step_element_value(
    ctx: CodecScenarioContext,
    index: str,
    element: str,
    key: str,
    kind: str,
    literal: str,
) -> None:
    decoded = ctx.decoded[int(index) - 1]
    values = decoded.tags if element == "tag" else decoded.fields
    assert values[key] == _expected_value(kind, literal)


@then(parsers.parse('parsing fails with "{message}" at offset {offset:d}'))
def step_fails_at_offset(ctx: CodecScenarioContext, message: str, offset: int) -> None:
    assert isinstance(ctx.error, LineProtocolSyntaxError)
    assert ctx.error.message == message
    assert ctx.error.offset == offset


@then(
    parsers.parse(
        'parsing fails with "{message}" at line {line:d}, column {column:d}'
    )
)
def step_fails_at_line(
    ctx: CodecScenarioContext, message: str, line: int, column: int
) -> None:
    assert isinstance(ctx.error, LineProtocolSyntaxError)
    assert ctx.error.message == message
    assert (ctx.error.line, ctx.error.column) == (line, column)
