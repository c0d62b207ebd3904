"""Port interfaces for byte sources, byte sinks and bound record types.

These protocols define the contracts that adapters must implement.
The core codec depends only on these interfaces, not concrete implementations.
"""

from collections.abc import Mapping
from typing import Any, Protocol, Self, runtime_checkable

from influxlp.core.models import Position


@runtime_checkable
class ReaderPort(Protocol):
    """Port for pulling bytes from a source one at a time.

    Adapters implementing this protocol feed the deserializer.
    Examples: SliceReader, StreamReader.
    """

    def peek(self) -> int | None:
        """Return the next byte without consuming it, or None at end of input."""
        ...

    def advance(self) -> int | None:
        """Consume and return the next byte, or None at end of input."""
        ...

    def position(self) -> Position:
        """Return the offset, line and column of the next unconsumed byte."""
        ...


@runtime_checkable
class WriterPort(Protocol):
    """Port for pushing serialized bytes to a sink.

    Adapters implementing this protocol receive serializer output.
    Examples: BufferWriter, StreamWriter.
    """

    def write(self, data: bytes) -> None:
        """Append raw bytes."""
        ...

    def finalize(self) -> None:
        """Complete the current serialize call.

        Writing after finalize() is an error until the writer is reset.
        """
        ...


@runtime_checkable
class PointModel(Protocol):
    """Port for caller-defined record types bound onto a Point.

    A model exposes four named components: ``measurement`` (str), ``tags``
    and ``fields`` (mappings of name to scalar or Value) and ``timestamp``
    (int or None). Only ``measurement`` and ``fields`` are required.
    """

    def to_components(self) -> Mapping[str, Any]:
        """Return the component name to value mapping for serialization."""
        ...

    @classmethod
    def from_components(cls, components: Any) -> Self:
        """Build an instance from decoded components.

        Args:
            components: A Components accessor with coercing getters.
        """
        ...
