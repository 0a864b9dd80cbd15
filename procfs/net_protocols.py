"""Protocol statistics from /proc/net/protocols."""

from __future__ import annotations

from dataclasses import dataclass, field, fields

from procfs.fs import FS, _parse_uint, read_file

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_MIN_FIELDS = 8


@dataclass
class NetProtocolCapabilities:
    """Which operations a protocol implements."""

    close: bool = False
    connect: bool = False
    disconnect: bool = False
    accept: bool = False
    io_ctl: bool = False
    init: bool = False
    destroy: bool = False
    shutdown: bool = False
    set_sock_opt: bool = False
    get_sock_opt: bool = False
    send_msg: bool = False
    recv_msg: bool = False
    send_page: bool = False
    bind: bool = False
    backlog_rcv: bool = False
    hash: bool = False
    un_hash: bool = False
    get_port: bool = False
    enter_memory_pressure: bool = False


_CAPABILITY_NAMES = [f.name for f in fields(NetProtocolCapabilities)]


@dataclass
class NetProtocolStatLine:
    """One line of net/protocols.

    ``pressure`` is 1 for "yes", 0 for "no" and -1 for anything else (NI).
    """

    name: str
    size: int
    sockets: int
    memory: int
    pressure: int
    max_header: int
    slab: bool
    module_name: str
    capabilities: NetProtocolCapabilities = field(
        default_factory=NetProtocolCapabilities
    )


def _parse_int(text: str) -> int:
    if not text or "_" in text or text != text.strip():
        raise ValueError(f"invalid integer: {text!r}")
    value = int(text, 10)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return value


def parse_capabilities(capabilities: list[str]) -> NetProtocolCapabilities:
    """Map a sequence of "y"/"n" flags onto the capability fields in order."""
    if len(capabilities) > len(_CAPABILITY_NAMES):
        raise ValueError(
            f"too many capabilities for protocol: {len(capabilities)} given"
        )
    values = {}
    for position, (name, flag) in enumerate(zip(_CAPABILITY_NAMES, capabilities)):
        if flag == "y":
            values[name] = True
        elif flag == "n":
            values[name] = False
        else:
            raise ValueError(
                f"unable to parse capability block for protocol: position {position}"
            )
    return NetProtocolCapabilities(**values)


def parse_protocol_line(raw_line: str) -> NetProtocolStatLine:
    """Parse one data line of net/protocols."""
    parts = raw_line.split()
    if len(parts) < _MIN_FIELDS:
        raise ValueError(f"malformed net/protocols line: {raw_line!r}")
    name = parts[0]
    size = _parse_uint(parts[1], 10)
    sockets = _parse_int(parts[2])
    memory = _parse_int(parts[3])
    pressure = {"yes": 1, "no": 0}.get(parts[4], -1)
    max_header = _parse_uint(parts[5], 10)
    if parts[6] == "yes":
        slab = True
    elif parts[6] == "no":
        slab = False
    else:
        raise ValueError(f"unable to parse capability for protocol: {name}")
    return NetProtocolStatLine(
        name=name,
        size=size,
        sockets=sockets,
        memory=memory,
        pressure=pressure,
        max_header=max_header,
        slab=slab,
        module_name=parts[7],
        capabilities=parse_capabilities(parts[8:]),
    )


def parse_net_protocols(text: str | bytes) -> dict[str, NetProtocolStatLine]:
    """Parse net/protocols contents into lines keyed by protocol name."""
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="surrogateescape")
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    result = {}
    for line in lines[1:]:
        entry = parse_protocol_line(line.removesuffix("\r"))
        result[entry.name] = entry
    return result


def net_protocols(fs: FS) -> dict[str, NetProtocolStatLine]:
    """Protocol statistics of the given proc filesystem."""
    return parse_net_protocols(read_file(fs.path("net/protocols")))