"""Example round trip through line protocol text, files and record types.

Run with:
    python examples/basic_usage.py

Steps:
    1. Build points from native values and serialize them
    2. Parse a dump with comments and blank lines
    3. Stream points to a file and read them back incrementally
    4. Bind a dataclass onto points with dumps()/loads()
"""

import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path

from influxlp import (
    Components,
    LineProtocolSyntaxError,
    deserialize_many,
    dumps,
    iter_deserialize,
    loads,
    point,
    serialize_many,
    serialize_to,
    timestamped_point,
)

logging.basicConfig(level=logging.DEBUG, format="%(name)s %(message)s")

DUMP = """\
# exported by node-a
cpu,host=server01,region=us-west usage=0.64,cores=8i 1556813561098000000

mem,host=server01 used=1024u,swap=false 1556813561098000000
"""


@dataclass
class DiskSample:
    path: str
    free_bytes: int
    healthy: bool

    def to_components(self) -> dict[str, object]:
        return {
            "measurement": "disk",
            "tags": {"path": self.path},
            "fields": {"free": self.free_bytes, "healthy": self.healthy},
        }

    @classmethod
    def from_components(cls, components: Components) -> "DiskSample":
        return cls(
            path=components.tag("path"),
            free_bytes=components.field("free", int),
            healthy=components.field("healthy", bool),
        )


def main() -> None:
    # Native values become typed Values; None fields are left out
    text = serialize_many(
        [
            point("cpu", {"usage": 0.5, "idle": None}, tags={"host": "web 1"}),
            timestamped_point("requests", {"count": 12, "ok": True}),
        ]
    )
    print(text)

    for parsed in deserialize_many(DUMP):
        print(parsed.measurement, dict(parsed.tags), dict(parsed.fields))

    try:
        deserialize_many("cpu,host=a usage=oops")
    except LineProtocolSyntaxError as exc:
        print(f"rejected: {exc}")

    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "points.lp"
        with open(path, "wb") as sink:
            readings = (
                point("temp", {"celsius": 20 + i / 10}, timestamp=i) for i in range(5)
            )
            serialize_to(readings, sink)
        with open(path, "rb") as source:
            for parsed in iter_deserialize(source):
                print(parsed.timestamp, parsed.fields["celsius"])

    line = dumps(DiskSample("/var", 2048, True))
    print(line)
    print(loads(DiskSample, "disk,path=/tmp free=10i,healthy=1i"))


if __name__ == "__main__":
    main()
