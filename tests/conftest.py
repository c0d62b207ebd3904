"""Shared test fixtures for all test modules."""

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from influxlp.adapters.io.readers import SliceReader, StreamReader
from influxlp.adapters.io.writers import BufferWriter


@pytest.fixture
def line_file_path(tmp_path: Path) -> Path:
    """Provide a temporary file path for line protocol files."""
    return tmp_path / "points.lp"


@pytest.fixture
def buffer_writer() -> BufferWriter:
    """Fresh in-memory writer."""
    return BufferWriter()


def _chunks(data: bytes, size: int) -> Iterator[bytes]:
    for start in range(0, len(data), size):
        yield data[start : start + size]


@pytest.fixture
def chunked_source() -> Callable[[str | bytes, int], Iterator[bytes]]:
    """Factory fixture splitting input into fixed-size byte chunks.

    Small chunk sizes force tokens to straddle buffer refills.
    """

    def _source(data: str | bytes, size: int = 3) -> Iterator[bytes]:
        raw = data.encode("utf-8") if isinstance(data, str) else data
        return _chunks(raw, size)

    return _source


@pytest.fixture(params=["slice", "stream"])
def make_reader(request: pytest.FixtureRequest):
    """Factory fixture building either reader kind over the same input.

    Tests using it run once per reader implementation.
    """

    def _reader(data: str | bytes):
        raw = data.encode("utf-8") if isinstance(data, str) else data
        if request.param == "slice":
            return SliceReader(raw)
        return StreamReader(_chunks(raw, 2))

    return _reader


class FailingSource:
    """Binary source that returns some bytes, then raises OSError."""

    def __init__(self, data: bytes, fail_after: int = 1) -> None:
        self._data = data
        self._reads = 0
        self._fail_after = fail_after

    def read(self, size: int = -1) -> bytes:
        if self._reads >= self._fail_after:
            raise OSError("connection reset")
        self._reads += 1
        return self._data


class FailingSink:
    """Binary sink that accepts some writes, then raises OSError."""

    def __init__(self, fail_after: int = 1) -> None:
        self.data = bytearray()
        self._writes = 0
        self._fail_after = fail_after

    def write(self, data: bytes) -> int:
        if self._writes >= self._fail_after:
            raise OSError("disk full")
        self._writes += 1
        self.data += data
        return len(data)


@pytest.fixture
def failing_source() -> type[FailingSource]:
    """Class of a byte source that fails after its first read."""
    return FailingSource


@pytest.fixture
def failing_sink() -> type[FailingSink]:
    """Class of a byte sink that fails after its first write."""
    return FailingSink
