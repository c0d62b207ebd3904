"""influxlp - InfluxDB line protocol codec.

Encode Points to line protocol text and decode text back to Points:

    from influxlp import point, serialize, deserialize

    line = serialize(point("cpu", {"usage": 0.5}, tags={"host": "a"}))
    # 'cpu,host=a usage=0.5'
    deserialize(line).fields["usage"]
    # Float(value=0.5)
"""

import logging

from influxlp.adapters.binding import (
    Components,
    dumps,
    dumps_many,
    from_point,
    loads,
    loads_many,
    to_point,
)
from influxlp.adapters.io.readers import SliceReader, StreamReader
from influxlp.adapters.io.writers import BufferWriter, StreamWriter
from influxlp.codec import (
    deserialize,
    deserialize_from,
    deserialize_many,
    iter_deserialize,
    serialize,
    serialize_many,
    serialize_to,
)
from influxlp.core.coercion import coerce, to_native
from influxlp.core.encoding.deserializer import Deserializer
from influxlp.core.encoding.serializer import Serializer
from influxlp.core.errors import (
    EmptyMeasurementError,
    InvalidValueError,
    LineProtocolError,
    LineProtocolIOError,
    LineProtocolSyntaxError,
    MissingFieldError,
    TypeCoercionError,
)
from influxlp.core.models import (
    ABSENT,
    Absent,
    Boolean,
    Float,
    Integer,
    Point,
    Position,
    Text,
    UnsignedInteger,
    Value,
    ValueKind,
    to_value,
)
from influxlp.core.points import point, timestamped_point
from influxlp.core.ports import PointModel, ReaderPort, WriterPort

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Models
    "ABSENT",
    "Absent",
    "Boolean",
    "Float",
    "Integer",
    "Point",
    "Position",
    "Text",
    "UnsignedInteger",
    "Value",
    "ValueKind",
    "to_value",
    "point",
    "timestamped_point",
    "coerce",
    "to_native",
    # Ports
    "PointModel",
    "ReaderPort",
    "WriterPort",
    # Codec
    "Deserializer",
    "Serializer",
    "deserialize",
    "deserialize_from",
    "deserialize_many",
    "iter_deserialize",
    "serialize",
    "serialize_many",
    "serialize_to",
    # Adapters
    "BufferWriter",
    "SliceReader",
    "StreamReader",
    "StreamWriter",
    "Components",
    "dumps",
    "dumps_many",
    "from_point",
    "loads",
    "loads_many",
    "to_point",
    # Errors
    "EmptyMeasurementError",
    "InvalidValueError",
    "LineProtocolError",
    "LineProtocolIOError",
    "LineProtocolSyntaxError",
    "MissingFieldError",
    "TypeCoercionError",
]
