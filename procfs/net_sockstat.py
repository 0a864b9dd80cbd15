"""Socket statistics from /proc/net/sockstat and /proc/net/sockstat6."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from procfs.fs import FS, read_file


@dataclass
class NetSockstatProtocol:
    """Statistics for one socket protocol; optional counters may be None."""

    protocol: str = ""
    in_use: int = 0
    orphan: Optional[int] = None
    tw: Optional[int] = None
    alloc: Optional[int] = None
    mem: Optional[int] = None
    memory: Optional[int] = None


@dataclass
class NetSockstat:
    """Contents of a sockstat file; ``used`` is only set for IPv4."""

    used: Optional[int] = None
    protocols: list[NetSockstatProtocol] = field(default_factory=list)


_OPTIONAL_KEYS = {
    "orphan": "orphan",
    "tw": "tw",
    "alloc": "alloc",
    "mem": "mem",
    "memory": "memory",
}


def _parse_int(text: str) -> int:
    if not text or "_" in text or text != text.strip():
        raise ValueError(f"invalid integer: {text!r}")
    return int(text, 10)


def _parse_kvs(fields: list[str]) -> dict[str, int]:
    if len(fields) % 2 != 0:
        raise ValueError("odd number of fields in key/value pairs")
    return {key: _parse_int(value) for key, value in zip(fields[::2], fields[1::2])}


def _parse_protocol(name: str, kvs: dict[str, int]) -> NetSockstatProtocol:
    proto = NetSockstatProtocol(protocol=name, in_use=kvs.get("inuse", 0))
    for key, attribute in _OPTIONAL_KEYS.items():
        if key in kvs:
            setattr(proto, attribute, kvs[key])
    return proto


def parse_sockstat(text: str) -> NetSockstat:
    """Parse the contents of a sockstat file."""
    stat = NetSockstat()
    for line in text.splitlines():
        fields = line.split(" ")
        if len(fields) < 3:
            raise ValueError(f"malformed sockstat line: {line!r}")
        try:
            kvs = _parse_kvs(fields[1:])
        except ValueError as exc:
            raise ValueError(
                f"error parsing sockstat key/value pairs from {line!r}: {exc}"
            ) from exc
        name = fields[0].removesuffix(":")
        if name == "sockets":
            stat.used = kvs.get("used", 0)
        else:
            stat.protocols.append(_parse_protocol(name, kvs))
    return stat


def read_sockstat(path: str) -> NetSockstat:
    """Read and parse a sockstat file; OS errors propagate unchanged."""
    text = read_file(path)
    try:
        return parse_sockstat(text)
    except ValueError as exc:
        raise ValueError(f"failed to read sockstats from {path!r}: {exc}") from exc


def net_sockstat(fs: FS) -> NetSockstat:
    """IPv4 socket statistics."""
    return read_sockstat(fs.path("net", "sockstat"))


def net_sockstat6(fs: FS) -> NetSockstat:
    """IPv6 socket statistics; FileNotFoundError if IPv6 is disabled."""
    return read_sockstat(fs.path("net", "sockstat6"))