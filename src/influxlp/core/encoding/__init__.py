"""Line protocol encoding: escaping, number formatting, serializer, deserializer."""

from influxlp.core.encoding.deserializer import Deserializer
from influxlp.core.encoding.serializer import Serializer

__all__ = [
    "Deserializer",
    "Serializer",
]
