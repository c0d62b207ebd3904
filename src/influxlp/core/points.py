"""Helper functions for creating Point objects from native values."""

import time
from collections.abc import Mapping

from influxlp.core.models import Point, to_value


def now_ns() -> int:
    """Return the current Unix time in nanoseconds."""
    return time.time_ns()


def point(
    measurement: str,
    fields: Mapping[str, object],
    tags: Mapping[str, object] | None = None,
    timestamp: int | None = None,
) -> Point:
    """Create a Point, converting native scalars to Values.

    Args:
        measurement: Measurement name (e.g., "cpu")
        fields: Field values; None becomes ABSENT
        tags: Optional tag values; None becomes ABSENT
        timestamp: Optional Unix time in nanoseconds

    Returns:
        Point with tags and fields in the given order
    """
    return Point(
        measurement=measurement,
        tags={key: to_value(value) for key, value in (tags or {}).items()},
        fields={key: to_value(value) for key, value in fields.items()},
        timestamp=timestamp,
    )


def timestamped_point(
    measurement: str,
    fields: Mapping[str, object],
    tags: Mapping[str, object] | None = None,
) -> Point:
    """Create a Point stamped with the current time.

    Args:
        measurement: Measurement name (e.g., "cpu")
        fields: Field values; None becomes ABSENT
        tags: Optional tag values; None becomes ABSENT

    Returns:
        Point with a nanosecond timestamp taken from the system clock
    """
    return point(measurement, fields, tags=tags, timestamp=now_ns())
