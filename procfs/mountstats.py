"""Per-mount statistics from /proc/<pid>/mountstats, with NFS details."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Iterator, Optional

from procfs.fs import _parse_uint, read_file

_DEVICE_ENTRY_LEN = 8
_FIELD_BYTES_LEN = 8
_FIELD_EVENTS_LEN = 27

_STAT_VERSION_10 = "1.0"
_STAT_VERSION_11 = "1.1"

_TRANSPORT_LENGTHS = {
    _STAT_VERSION_10: {"tcp": 10, "udp": 7},
    _STAT_VERSION_11: {"tcp": 13, "udp": 10},
}
_TRANSPORT_FIELDS = 13
_MIN_OPERATION_FIELDS = 9

_NFS_TYPES = frozenset({"nfs", "nfs4"})
_STAT_VERSION_PREFIX = "statvers="

_DEVICE_FORMAT = ((0, "device"), (2, "mounted"), (3, "on"), (5, "with"), (6, "fstype"))

_SECONDS_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)", re.ASCII)


@dataclass
class NFSBytesStats:
    """Byte counters of an NFS mount."""

    read: int = 0
    write: int = 0
    direct_read: int = 0
    direct_write: int = 0
    read_total: int = 0
    write_total: int = 0
    read_pages: int = 0
    write_pages: int = 0


@dataclass
class NFSEventsStats:
    """Event counters of an NFS mount."""

    inode_revalidate: int = 0
    dnode_revalidate: int = 0
    data_invalidate: int = 0
    attribute_invalidate: int = 0
    vfs_open: int = 0
    vfs_lookup: int = 0
    vfs_access: int = 0
    vfs_update_page: int = 0
    vfs_read_page: int = 0
    vfs_read_pages: int = 0
    vfs_write_page: int = 0
    vfs_write_pages: int = 0
    vfs_getdents: int = 0
    vfs_setattr: int = 0
    vfs_flush: int = 0
    vfs_fsync: int = 0
    vfs_lock: int = 0
    vfs_file_release: int = 0
    congestion_wait: int = 0
    truncation: int = 0
    write_extension: int = 0
    silly_rename: int = 0
    short_read: int = 0
    short_write: int = 0
    jukebox_delay: int = 0
    pnfs_read: int = 0
    pnfs_write: int = 0


@dataclass
class NFSOperationStats:
    """Statistics of a single NFS operation."""

    operation: str = ""
    requests: int = 0
    transmissions: int = 0
    major_timeouts: int = 0
    bytes_sent: int = 0
    bytes_received: int = 0
    cumulative_queue_milliseconds: int = 0
    cumulative_total_response_milliseconds: int = 0
    cumulative_total_request_milliseconds: int = 0
    errors: int = 0


@dataclass
class NFSTransportStats:
    """RPC transport statistics of an NFS mount."""

    protocol: str = ""
    port: int = 0
    bind: int = 0
    connect: int = 0
    connect_idle_time: int = 0
    idle_time_seconds: int = 0
    sends: int = 0
    receives: int = 0
    bad_transaction_ids: int = 0
    cumulative_active_requests: int = 0
    cumulative_backlog: int = 0
    maximum_rpc_slots_used: int = 0
    cumulative_sending_queue: int = 0
    cumulative_pending_queue: int = 0


@dataclass
class MountStatsNFS:
    """Detailed statistics of an NFSv3 or NFSv4 mount."""

    stat_version: str = ""
    opts: dict[str, str] = field(default_factory=dict)
    age: timedelta = field(default_factory=timedelta)
    bytes: NFSBytesStats = field(default_factory=NFSBytesStats)
    events: NFSEventsStats = field(default_factory=NFSEventsStats)
    operations: list[NFSOperationStats] = field(default_factory=list)
    transport: NFSTransportStats = field(default_factory=NFSTransportStats)


@dataclass
class Mount:
    """A device mount; ``stats`` is set when statistics are available."""

    device: str
    mount: str
    type: str
    stats: Optional[MountStatsNFS] = None


def _uints(fields: list[str]) -> list[int]:
    return [_parse_uint(item, 10) for item in fields]


def _parse_seconds(text: str) -> timedelta:
    if not _SECONDS_RE.fullmatch(text):
        raise ValueError(f"invalid duration: {text!r}s")
    return timedelta(seconds=float(text))


def _parse_mount(fields: list[str]) -> Mount:
    if len(fields) < _DEVICE_ENTRY_LEN:
        raise ValueError(f"invalid device entry: {fields}")
    for index, word in _DEVICE_FORMAT:
        if fields[index] != word:
            raise ValueError(f"invalid device entry: {fields}")
    return Mount(device=fields[1], mount=fields[4], type=fields[7])


def _parse_bytes(fields: list[str]) -> NFSBytesStats:
    if len(fields) != _FIELD_BYTES_LEN:
        raise ValueError(f"invalid NFS bytes stats: {fields}")
    return NFSBytesStats(*_uints(fields))


def _parse_events(fields: list[str]) -> NFSEventsStats:
    if len(fields) != _FIELD_EVENTS_LEN:
        raise ValueError(f"invalid NFS events stats: {fields}")
    return NFSEventsStats(*_uints(fields))


def _parse_transport(fields: list[str], stat_version: str) -> NFSTransportStats:
    protocol, rest = fields[0], fields[1:]
    lengths = _TRANSPORT_LENGTHS.get(stat_version)
    if lengths is None:
        raise ValueError(f"unrecognized NFS transport stats version: {stat_version!r}")
    expected = lengths.get(protocol)
    if expected is None:
        raise ValueError(
            f'invalid NFS protocol "{protocol}" in stats {stat_version} statement: {rest}'
        )
    if len(rest) != expected:
        raise ValueError(f"invalid NFS transport stats {stat_version} statement: {rest}")

    values = _uints(rest)
    values += [0] * (_TRANSPORT_FIELDS - len(values))
    if protocol == "udp":
        # UDP has no connect count, connect idle time or idle time.
        values = values[:2] + [0, 0, 0] + values[2:]
    return NFSTransportStats(protocol, *values[:_TRANSPORT_FIELDS])


def _parse_operations(lines: Iterator[list[str]]) -> list[NFSOperationStats]:
    operations = []
    for fields in lines:
        if not fields:
            break
        if len(fields) < _MIN_OPERATION_FIELDS:
            raise ValueError(f"invalid NFS per-operations stats: {fields}")
        values = _uints(fields[1:])
        operations.append(
            NFSOperationStats(
                fields[0].removesuffix(":"),
                *values[:8],
                errors=values[8] if len(values) > 8 else 0,
            )
        )
    return operations


def _parse_opts(text: str) -> dict[str, str]:
    opts = {}
    for opt in text.split(","):
        parts = opt.split("=")
        if len(parts) == 2:
            opts[parts[0]] = parts[1]
        else:
            opts[opt] = ""
    return opts


def _parse_nfs(lines: Iterator[list[str]], stat_version: str) -> MountStatsNFS:
    stats = MountStatsNFS(stat_version=stat_version)
    for fields in lines:
        if not fields:
            break
        key = fields[0]
        if key in ("opts:", "age:", "bytes:", "events:") and len(fields) < 2:
            raise ValueError(f"not enough information for NFS stats: {fields}")
        if key == "opts:":
            stats.opts.update(_parse_opts(fields[1]))
        elif key == "age:":
            stats.age = _parse_seconds(fields[1])
        elif key == "bytes:":
            stats.bytes = _parse_bytes(fields[1:])
        elif key == "events:":
            stats.events = _parse_events(fields[1:])
        elif key == "xprt:":
            if len(fields) < 3:
                raise ValueError(f"not enough information for NFS transport stats: {fields}")
            stats.transport = _parse_transport(fields[1:], stat_version)
        elif key == "per-op":
            break
    stats.operations = _parse_operations(lines)
    return stats


def _field_lines(text: str) -> Iterator[list[str]]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    for line in lines:
        yield line.removesuffix("\r").split()


def parse_mount_stats(text: str | bytes) -> list[Mount]:
    """Parse the contents of a mountstats file."""
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="surrogateescape")
    lines = _field_lines(text)
    mounts = []
    for fields in lines:
        if not fields or fields[0] != "device":
            continue
        mount = _parse_mount(fields)
        if len(fields) > _DEVICE_ENTRY_LEN:
            if mount.type not in _NFS_TYPES:
                raise ValueError(f"cannot parse MountStats for fstype {mount.type!r}")
            version = fields[8].removeprefix(_STAT_VERSION_PREFIX)
            mount.stats = _parse_nfs(lines, version)
        mounts.append(mount)
    return mounts


def read_mount_stats(path: str) -> list[Mount]:
    """Read and parse a mountstats file."""
    return parse_mount_stats(read_file(path))