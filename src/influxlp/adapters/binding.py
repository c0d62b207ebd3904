"""Binding between caller-defined record types and Points.

A record type satisfies PointModel by listing its components explicitly::

    @dataclass
    class CpuSample:
        host: str
        usage: float
        ok: bool

        def to_components(self):
            return {
                "measurement": "cpu",
                "tags": {"host": self.host},
                "fields": {"usage": self.usage, "ok": self.ok},
            }

        @classmethod
        def from_components(cls, components):
            return cls(
                host=components.tag("host"),
                usage=components.field("usage", float),
                ok=components.field("ok", bool),
            )

Components performs the value coercions, so ``ok=1i`` on the wire still
binds to a bool attribute.
"""

import dataclasses
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import TypeVar

from influxlp.codec import deserialize, deserialize_many, serialize, serialize_many
from influxlp.core.coercion import to_native
from influxlp.core.errors import InvalidValueError, MissingFieldError
from influxlp.core.models import Absent, Point, Value
from influxlp.core.points import point
from influxlp.core.ports import PointModel

COMPONENT_NAMES = frozenset({"measurement", "tags", "fields", "timestamp"})

M = TypeVar("M", bound=PointModel)

_MISSING = object()


class Components:
    """Decoded components of one record, handed to from_components().

    Getters convert values to the requested Python type using the
    coercion rules of influxlp.core.coercion.
    """

    def __init__(self, source: Point) -> None:
        self._point = source

    @property
    def measurement(self) -> str:
        return self._point.measurement

    @property
    def timestamp(self) -> int | None:
        return self._point.timestamp

    @property
    def tags(self) -> Mapping[str, Value]:
        return self._point.tags

    @property
    def fields(self) -> Mapping[str, Value]:
        return self._point.fields

    def tag(self, name: str, target: type = str, default: object = _MISSING):
        """Return a tag value converted to target.

        Args:
            name: Tag key.
            target: One of bool, int, float or str.
            default: Returned when the tag is missing. Without a default a
                missing tag raises InvalidValueError.

        Raises:
            TypeCoercionError: If the value cannot be converted to target.
        """
        return self._get(self._point.tags, "tag", name, target, default)

    def field(self, name: str, target: type, default: object = _MISSING):
        """Return a field value converted to target.

        Behaves like tag() for the field set.
        """
        return self._get(self._point.fields, "field", name, target, default)

    @staticmethod
    def _get(
        values: Mapping[str, Value],
        element: str,
        name: str,
        target: type,
        default: object,
    ):
        value = values.get(name)
        if value is None or isinstance(value, Absent):
            if default is _MISSING:
                raise InvalidValueError(f"missing {element} {name!r}")
            return default
        return to_native(value, target)


def _as_mapping(component: str, value: object) -> Mapping[str, object] | None:
    """Flatten a tags or fields component into a name to value mapping.

    Accepts a mapping or a dataclass instance whose attributes are scalars.
    """
    if value is None or isinstance(value, Mapping):
        return value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    raise InvalidValueError(
        f"{component} must be a mapping or a dataclass, got {type(value).__name__}"
    )


def to_point(model: PointModel) -> Point:
    """Build a Point from a model's components.

    Raises:
        InvalidValueError: On unknown component names, a missing
            measurement, or tags or fields that are neither a mapping nor a
            dataclass.
        MissingFieldError: If the model has no fields component.
    """
    components = model.to_components()
    unknown = set(components) - COMPONENT_NAMES
    if unknown:
        raise InvalidValueError(f"unknown components: {sorted(unknown)}")
    if "measurement" not in components:
        raise InvalidValueError("missing component 'measurement'")
    measurement = components["measurement"]
    # str-valued enums name their measurement by value
    if isinstance(measurement, Enum):
        measurement = measurement.value
    fields = _as_mapping("fields", components.get("fields"))
    if fields is None:
        raise MissingFieldError(str(measurement))
    return point(
        measurement,
        fields,
        tags=_as_mapping("tags", components.get("tags")),
        timestamp=components.get("timestamp"),
    )


def from_point(model_type: type[M], source: Point) -> M:
    """Build a model instance from a decoded Point."""
    return model_type.from_components(Components(source))


def dumps(model: PointModel) -> str:
    """Encode one model as a line protocol record."""
    return serialize(to_point(model))


def dumps_many(models: Iterable[PointModel]) -> str:
    """Encode models as records joined by line feeds."""
    return serialize_many(to_point(model) for model in models)


def loads(model_type: type[M], data: str | bytes) -> M:
    """Decode a single record into a model instance."""
    return from_point(model_type, deserialize(data))


def loads_many(model_type: type[M], data: str | bytes) -> list[M]:
    """Decode every record into model instances.

    Input holding one record yields a list of length one.
    """
    return [from_point(model_type, source) for source in deserialize_many(data)]
