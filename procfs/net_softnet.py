"""Per-CPU packet processing statistics from /proc/net/softnet_stat."""

from __future__ import annotations

from dataclasses import dataclass

from procfs.fs import FS, _parse_uint, read_file

_MIN_COLUMNS = 9
_UINT32_MAX = 2**32 - 1


@dataclass
class SoftnetStat:
    """One row of softnet_stat."""

    processed: int = 0
    dropped: int = 0
    time_squeezed: int = 0


def _parse_hex_uint32(text: str) -> int:
    value = _parse_uint(text, 16)
    if value > _UINT32_MAX:
        raise ValueError(f"value out of range: {text!r}")
    return value


def parse_softnet(text: str | bytes) -> list[SoftnetStat]:
    """Parse softnet_stat contents; only the first three columns are used."""
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="surrogateescape")
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    stats = []
    for line in lines:
        columns = line.split()
        if len(columns) < _MIN_COLUMNS:
            raise ValueError(
                f"{len(columns)} columns were detected, "
                f"but at least {_MIN_COLUMNS} were expected"
            )
        stats.append(SoftnetStat(*(_parse_hex_uint32(c) for c in columns[:3])))
    return stats


def read_softnet_stat(path: str) -> list[SoftnetStat]:
    """Read and parse a softnet_stat file."""
    text = read_file(path)
    try:
        return parse_softnet(text)
    except ValueError as exc:
        raise ValueError(f"failed to parse /proc/net/softnet_stat: {exc}") from exc


def net_softnet_stat(fs: FS) -> list[SoftnetStat]:
    """Softnet statistics of the given proc filesystem, one row per CPU."""
    return read_softnet_stat(fs.path("net/softnet_stat"))