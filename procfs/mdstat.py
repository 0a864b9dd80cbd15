"""Software RAID (md) device status from /proc/mdstat."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from procfs.fs import FS, read_file

_STATUS_LINE_RE = re.compile(r"(\d+) blocks .*\[(\d+)/(\d+)\] \[([U_]+)\]", re.ASCII)
_RECOVERY_BLOCKS_RE = re.compile(r"\((\d+)/\d+\)", re.ASCII)
_RECOVERY_PCT_RE = re.compile(r"= (.+)%")
_RECOVERY_FINISH_RE = re.compile(r"finish=(.+)min")
_RECOVERY_SPEED_RE = re.compile(r"speed=(.+)[A-Z]")
_COMPONENT_DEVICE_RE = re.compile(r"(.*)\[\d+\]", re.ASCII)

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


@dataclass
class MDStat:
    """State of one md device."""

    name: str
    activity_state: str
    disks_active: int = 0
    disks_total: int = 0
    disks_failed: int = 0
    disks_down: int = 0
    disks_spare: int = 0
    blocks_total: int = 0
    blocks_synced: int = 0
    blocks_synced_pct: float = 0.0
    blocks_synced_finish_time: float = 0.0
    blocks_synced_speed: float = 0.0
    devices: list[str] = field(default_factory=list)


def _parse_int(text: str) -> int:
    if not text or "_" in text or text != text.strip():
        raise ValueError(f"invalid integer: {text!r}")
    value = int(text, 10)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return value


def _parse_float(text: str) -> float:
    if not text or "_" in text or text != text.strip():
        raise ValueError(f"invalid float: {text!r}")
    return float(text)


def _eval_status_line(device_line: str, status_line: str) -> tuple[int, int, int, int]:
    """Return (active, total, down, size) for a device and its status line."""
    fields = status_line.split()
    if not fields:
        raise ValueError(f"unexpected statusLine {status_line!r}: empty line")
    try:
        size = _parse_int(fields[0])
    except ValueError as exc:
        raise ValueError(f"unexpected statusLine {status_line!r}: {exc}") from exc

    if "raid0" in device_line or "linear" in device_line:
        # Only member disks carry a bracketed number on the device line.
        total = device_line.count("[")
        return total, total, 0, size

    if "inactive" in device_line:
        return 0, 0, 0, size

    match = _STATUS_LINE_RE.search(status_line)
    if match is None:
        raise ValueError(f"couldn't find all the substring matches: {status_line}")
    try:
        total = _parse_int(match.group(2))
        active = _parse_int(match.group(3))
    except ValueError as exc:
        raise ValueError(f"unexpected statusLine {status_line!r}: {exc}") from exc
    down = match.group(4).count("_")
    return active, total, down, size


def _eval_recovery_line(line: str) -> tuple[int, float, float, float]:
    """Return (synced blocks, percent, finish minutes, speed) of a sync line."""
    match = _RECOVERY_BLOCKS_RE.search(line)
    if match is None:
        raise ValueError(f"unexpected recoveryLine: {line}")
    try:
        synced = _parse_int(match.group(1))
    except ValueError as exc:
        raise ValueError(f"error parsing int from recoveryLine {line!r}: {exc}") from exc

    match = _RECOVERY_PCT_RE.search(line)
    if match is None:
        raise ValueError(f"unexpected recoveryLine matching percentage: {line}")
    try:
        pct = _parse_float(match.group(1).strip())
    except ValueError as exc:
        raise ValueError(f"error parsing float from recoveryLine {line!r}: {exc}") from exc

    match = _RECOVERY_FINISH_RE.search(line)
    if match is None:
        raise ValueError(f"unexpected recoveryLine matching est. finish time: {line}")
    try:
        finish = _parse_float(match.group(1))
    except ValueError as exc:
        raise ValueError(f"error parsing float from recoveryLine {line!r}: {exc}") from exc

    match = _RECOVERY_SPEED_RE.search(line)
    if match is None:
        raise ValueError(f"unexpected recoveryLine matching speed: {line}")
    try:
        speed = _parse_float(match.group(1))
    except ValueError as exc:
        raise ValueError(f"error parsing float from recoveryLine {line!r}: {exc}") from exc

    return synced, pct, finish, speed


def _eval_component_devices(device_fields: list[str]) -> list[str]:
    devices = []
    for item in device_fields[4:]:
        match = _COMPONENT_DEVICE_RE.search(item)
        if match is not None:
            devices.append(match.group(1))
    return devices


def parse_mdstat(data: str | bytes) -> list[MDStat]:
    """Parse the contents of an mdstat file."""
    if isinstance(data, bytes):
        data = data.decode("utf-8", errors="surrogateescape")
    lines = data.split("\n")
    stats: list[MDStat] = []

    for i, line in enumerate(lines):
        if (
            not line.strip()
            or line[0] == " "
            or line.startswith("Personalities")
            or line.startswith("unused")
        ):
            continue

        device_fields = line.split()
        if len(device_fields) < 3:
            raise ValueError(
                f"not enough fields in mdline (expected at least 3): {line}"
            )
        name = device_fields[0]
        state = device_fields[2]

        if len(lines) <= i + 3:
            raise ValueError(f"error parsing {name!r}: too few lines for md device")

        failed = line.count("(F)")
        spare = line.count("(S)")
        try:
            active, total, down, size = _eval_status_line(line, lines[i + 1])
        except ValueError as exc:
            raise ValueError(f"error parsing md device lines: {exc}") from exc

        sync_line = lines[i + 2]
        if "bitmap" in sync_line:
            sync_line = lines[i + 3]

        synced = size
        pct = finish = speed = 0.0
        recovering = "recovery" in sync_line
        resyncing = "resync" in sync_line
        checking = "check" in sync_line

        if recovering or resyncing or checking:
            if recovering:
                state = "recovering"
            elif checking:
                state = "checking"
            else:
                state = "resyncing"

            if "PENDING" in sync_line or "DELAYED" in sync_line:
                synced = 0
            else:
                try:
                    synced, pct, finish, speed = _eval_recovery_line(sync_line)
                except ValueError as exc:
                    raise ValueError(
                        f"error parsing sync line in md device {name!r}: {exc}"
                    ) from exc

        stats.append(
            MDStat(
                name=name,
                activity_state=state,
                disks_active=active,
                disks_total=total,
                disks_failed=failed,
                disks_down=down,
                disks_spare=spare,
                blocks_total=size,
                blocks_synced=synced,
                blocks_synced_pct=pct,
                blocks_synced_finish_time=finish,
                blocks_synced_speed=speed,
                devices=_eval_component_devices(device_fields),
            )
        )

    return stats


def mdstat(fs: FS) -> list[MDStat]:
    """Read and parse the mdstat file of the given proc filesystem."""
    path = fs.path("mdstat")
    data = read_file(path)
    try:
        return parse_mdstat(data)
    except ValueError as exc:
        raise ValueError(f"error parsing mdstat {path!r}: {exc}") from exc