"""Socket tables shared by /proc/net/{tcp,udp}{,6}."""

from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass
from typing import Iterator, Union

from procfs.fs import _parse_uint

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

_HEX_RE = re.compile(r"[0-9a-fA-F]*")
_MIN_FIELDS = 10


@dataclass
class NetIPSocketLine:
    """The fields of one line of a socket table that are of interest."""

    sl: int
    local_addr: IPAddress
    local_port: int
    rem_addr: IPAddress
    rem_port: int
    st: int
    tx_queue: int
    rx_queue: int
    uid: int
    inode: int


@dataclass
class NetIPSocketSummary:
    """Totals over a socket table: queue lengths and the number of sockets."""

    tx_queue_length: int = 0
    rx_queue_length: int = 0
    used_sockets: int = 0


def parse_ip(hex_ip: str) -> IPAddress:
    """Decode an address as the kernel writes it in socket tables.

    IPv4 addresses are four bytes in reverse order; IPv6 addresses are four
    words of four bytes, each word in reverse order.
    """
    if not _HEX_RE.fullmatch(hex_ip) or len(hex_ip) % 2:
        raise ValueError(f"cannot parse address field in socket line {hex_ip!r}")
    raw = bytes.fromhex(hex_ip)
    if len(raw) == 4:
        return ipaddress.IPv4Address(raw[::-1])
    if len(raw) == 16:
        return ipaddress.IPv6Address(
            b"".join(raw[i : i + 4][::-1] for i in range(0, 16, 4))
        )
    raise ValueError(f"unable to parse IP {hex_ip}")


def _uint(text: str, base: int, what: str) -> int:
    try:
        return _parse_uint(text, base)
    except ValueError as exc:
        raise ValueError(f"cannot parse {what} in socket line: {exc}") from exc


def _pair(text: str, message: str) -> tuple[str, str]:
    parts = text.split(":")
    if len(parts) != 2:
        raise ValueError(f"{message} {text!r}")
    return parts[0], parts[1]


def parse_net_ip_socket_line(fields: list[str]) -> NetIPSocketLine:
    """Parse one socket table line given as whitespace-separated fields."""
    if len(fields) < _MIN_FIELDS:
        raise ValueError(
            "cannot parse net socket line as it has less then 10 columns "
            f"{' '.join(fields)!r}"
        )

    sl, _ = _pair(fields[0], "cannot parse sl field in socket line")
    sl_value = _uint(sl, 0, "sl value")

    local, local_port = _pair(fields[1], "cannot parse local_address field in socket line")
    local_addr = parse_ip(local)
    local_port_value = _uint(local_port, 16, "local_address port value")

    remote, remote_port = _pair(fields[2], "cannot parse rem_address field in socket line")
    rem_addr = parse_ip(remote)
    rem_port_value = _uint(remote_port, 16, "rem_address port value")

    st = _uint(fields[3], 16, "st value")

    tx, rx = _pair(
        fields[4], "cannot parse tx/rx queues in socket line as it has a missing colon"
    )
    tx_queue = _uint(tx, 16, "tx_queue value")
    rx_queue = _uint(rx, 16, "rx_queue value")

    uid = _uint(fields[7], 0, "uid value")
    inode = _uint(fields[9], 0, "inode value")

    return NetIPSocketLine(
        sl=sl_value,
        local_addr=local_addr,
        local_port=local_port_value,
        rem_addr=rem_addr,
        rem_port=rem_port_value,
        st=st,
        tx_queue=tx_queue,
        rx_queue=rx_queue,
        uid=uid,
        inode=inode,
    )


def _socket_lines(path: str) -> Iterator[NetIPSocketLine]:
    with open(path, encoding="utf-8", errors="surrogateescape") as handle:
        next(handle, None)  # header
        for line in handle:
            yield parse_net_ip_socket_line(line.split())


def read_net_ip_socket(path: str) -> list[NetIPSocketLine]:
    """Read every line of a socket table file, skipping its header."""
    return list(_socket_lines(path))


def read_net_ip_socket_summary(path: str) -> NetIPSocketSummary:
    """Read a socket table file and return only its totals."""
    summary = NetIPSocketSummary()
    for line in _socket_lines(path):
        summary.tx_queue_length += line.tx_queue
        summary.rx_queue_length += line.rx_queue
        summary.used_sockets += 1
    return summary