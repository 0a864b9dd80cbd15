"""Network interface statistics from /proc/net/dev."""

from __future__ import annotations

from dataclasses import dataclass, fields

from procfs.fs import FS, _parse_uint

_HEADER_LINES = 2


@dataclass
class NetDevLine:
    """Counters of one network interface."""

    name: str = ""
    rx_bytes: int = 0
    rx_packets: int = 0
    rx_errors: int = 0
    rx_dropped: int = 0
    rx_fifo: int = 0
    rx_frame: int = 0
    rx_compressed: int = 0
    rx_multicast: int = 0
    tx_bytes: int = 0
    tx_packets: int = 0
    tx_errors: int = 0
    tx_dropped: int = 0
    tx_fifo: int = 0
    tx_collisions: int = 0
    tx_carrier: int = 0
    tx_compressed: int = 0


_COUNTERS = [f.name for f in fields(NetDevLine) if f.name != "name"]


class NetDev(dict):
    """Interface statistics keyed by interface name."""

    def total(self) -> NetDevLine:
        """Sum all interfaces; the name is the sorted, comma-joined interface names."""
        totals = {
            counter: sum(getattr(line, counter) for line in self.values())
            for counter in _COUNTERS
        }
        names = ", ".join(sorted(line.name for line in self.values()))
        return NetDevLine(name=names, **totals)


def parse_net_dev_line(raw_line: str) -> NetDevLine:
    """Parse one data line of a net/dev file (header lines excluded)."""
    idx = raw_line.rfind(":")
    if idx == -1:
        raise ValueError("invalid net/dev line, missing colon")
    name = raw_line[:idx].strip()
    if not name:
        raise ValueError("invalid net/dev line, empty interface name")
    values = raw_line[idx + 1 :].split()
    if len(values) < len(_COUNTERS):
        raise ValueError(f"invalid net/dev line, too few fields: {raw_line!r}")
    return NetDevLine(
        name, *(_parse_uint(value, 10) for value in values[: len(_COUNTERS)])
    )


def _parse_net_dev(text: str) -> NetDev:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    dev = NetDev()
    for line in lines[_HEADER_LINES:]:
        entry = parse_net_dev_line(line.removesuffix("\r"))
        dev[entry.name] = entry
    return dev


def read_net_dev(path: str) -> NetDev:
    """Read and parse a net/dev file."""
    with open(path, encoding="utf-8", errors="surrogateescape") as handle:
        return _parse_net_dev(handle.read())


def net_dev(fs: FS) -> NetDev:
    """Interface statistics of the given proc filesystem."""
    return read_net_dev(fs.path("net/dev"))