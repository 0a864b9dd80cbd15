"""Mount details from /proc/<pid>/mountinfo."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from procfs.fs import read_file

_VALID_OPTIONAL_FIELDS = frozenset({"shared", "master", "propagate_from", "unbindable"})


@dataclass
class MountInfo:
    """One entry of a mountinfo file."""

    mount_id: int
    parent_id: int
    major_minor_ver: str
    root: str
    mount_point: str
    options: dict[str, str] = field(default_factory=dict)
    optional_fields: Optional[dict[str, str]] = None
    fs_type: str = ""
    source: str = ""
    super_options: dict[str, str] = field(default_factory=dict)


def _parse_int(text: str) -> int:
    if not text or "_" in text or text != text.strip():
        raise ValueError(f"invalid integer: {text!r}")
    return int(text, 10)


def _parse_options(options: str) -> dict[str, str]:
    result = {}
    for option in options.split(","):
        parts = option.split("=")
        result[parts[0]] = parts[1] if len(parts) > 1 else ""
    return result


def _parse_optional_fields(fields: list[str]) -> dict[str, str]:
    result = {}
    for item in fields:
        key, _, value = item.partition(":")
        if key in _VALID_OPTIONAL_FIELDS:
            result[key] = value
    return result


def parse_mount_info_string(mount_string: str) -> MountInfo:
    """Parse a single mountinfo line."""
    fields = mount_string.split(" ")
    if len(fields) < 10:
        raise ValueError(f"couldn't find enough fields in mount string: {mount_string}")
    if fields[-4] != "-":
        raise ValueError(f"couldn't find separator in expected field: {fields[-4]}")

    try:
        mount_id = _parse_int(fields[0])
    except ValueError:
        raise ValueError("failed to parse mount ID") from None
    try:
        parent_id = _parse_int(fields[1])
    except ValueError:
        raise ValueError("failed to parse parent ID") from None

    optional_fields = None
    if fields[6] != "":
        optional_fields = _parse_optional_fields(fields[6:-4])

    return MountInfo(
        mount_id=mount_id,
        parent_id=parent_id,
        major_minor_ver=fields[2],
        root=fields[3],
        mount_point=fields[4],
        options=_parse_options(fields[5]),
        optional_fields=optional_fields,
        fs_type=fields[-3],
        source=fields[-2],
        super_options=_parse_options(fields[-1]),
    )


def _lines(data: str) -> list[str]:
    lines = data.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


def parse_mount_info(data: str | bytes) -> list[MountInfo]:
    """Parse every line of a mountinfo file."""
    if isinstance(data, bytes):
        data = data.decode("utf-8", errors="surrogateescape")
    return [parse_mount_info_string(line) for line in _lines(data)]


def get_mounts() -> list[MountInfo]:
    """Mounts of the current process."""
    return parse_mount_info(read_file("/proc/self/mountinfo"))


def get_proc_mounts(pid: int) -> list[MountInfo]:
    """Mounts of the process with the given PID."""
    return parse_mount_info(read_file(f"/proc/{pid}/mountinfo"))