"""Netfilter conntrack statistics from /proc/net/stat/nf_conntrack."""

from __future__ import annotations

from dataclasses import dataclass

from procfs.fs import FS, _parse_uint, read_file

_ENTRY_FIELDS = 17

# Column index of each reported counter within a data line.
_COLUMNS = {
    "entries": 0,
    "found": 2,
    "invalid": 4,
    "ignore": 5,
    "insert": 8,
    "insert_failed": 9,
    "drop": 10,
    "early_drop": 11,
    "search_restart": 16,
}


@dataclass
class ConntrackStatEntry:
    """Conntrack statistics of one CPU core."""

    entries: int = 0
    found: int = 0
    invalid: int = 0
    ignore: int = 0
    insert: int = 0
    insert_failed: int = 0
    drop: int = 0
    early_drop: int = 0
    search_restart: int = 0


def _lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


def _parse_field(text: str) -> int:
    try:
        return _parse_uint(text, 16)
    except ValueError as exc:
        raise ValueError(f"couldn't parse {text!r} field: {exc}") from exc


def _parse_entry(fields: list[str]) -> ConntrackStatEntry:
    if len(fields) != _ENTRY_FIELDS:
        raise ValueError("invalid conntrackstat entry, missing fields")
    return ConntrackStatEntry(
        **{name: _parse_field(fields[index]) for name, index in _COLUMNS.items()}
    )


def parse_conntrack_stat(text: str | bytes) -> list[ConntrackStatEntry]:
    """Parse conntrack statistics; the first line is a header and is skipped."""
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="surrogateescape")
    return [_parse_entry(line.split()) for line in _lines(text)[1:]]


def read_conntrack_stat(path: str) -> list[ConntrackStatEntry]:
    """Read and parse a conntrack statistics file; OS errors propagate unchanged."""
    text = read_file(path)
    try:
        return parse_conntrack_stat(text)
    except ValueError as exc:
        raise ValueError(f"failed to read conntrack stats from {path!r}: {exc}") from exc


def conntrack_stat(fs: FS) -> list[ConntrackStatEntry]:
    """Conntrack statistics of the given proc filesystem, one entry per CPU."""
    return read_conntrack_stat(fs.path("net", "stat", "nf_conntrack"))