"""System load averages from /proc/loadavg."""

from __future__ import annotations

from dataclasses import dataclass

from procfs.fs import FS, read_file


@dataclass
class LoadAvg:
    """The 1, 5 and 15 minute load averages."""

    load1: float
    load5: float
    load15: float


def _parse_float(text: str) -> float:
    if "_" in text:
        raise ValueError(f"invalid float: {text!r}")
    return float(text)


def parse_load(data: str | bytes) -> LoadAvg:
    """Parse the contents of a loadavg file."""
    if isinstance(data, bytes):
        data = data.decode("utf-8", errors="surrogateescape")
    parts = data.split()
    if len(parts) < 3:
        raise ValueError(
            f"malformed loadavg line: too few fields in loadavg string: {data!r}"
        )
    loads = []
    for part in parts[:3]:
        try:
            loads.append(_parse_float(part))
        except ValueError as exc:
            raise ValueError(f"could not parse load {part!r}: {exc}") from exc
    return LoadAvg(*loads)


def load_avg(fs: FS) -> LoadAvg:
    """Read the load averages of the given proc filesystem."""
    return parse_load(read_file(fs.path("loadavg")))