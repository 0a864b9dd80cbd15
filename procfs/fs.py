"""Access to a mounted proc-style pseudo-filesystem and small file helpers."""

from __future__ import annotations

import errno
import os
import stat

DEFAULT_PROC_MOUNT_POINT = "/proc"

_UINT64_MAX = 2**64 - 1
_BASE_PREFIXES = {16: "x", 8: "o", 2: "b"}


def _parse_uint(text: str, base: int = 10) -> int:
    """Parse an unsigned 64-bit integer strictly.

    With ``base`` 0 the base is taken from the prefix: ``0x`` hex, ``0o`` or a
    bare leading ``0`` octal, ``0b`` binary, otherwise decimal.
    """
    invalid = ValueError(f"invalid unsigned integer: {text!r}")
    if not text or text[0] in "+-" or text != text.strip():
        raise invalid
    if base == 0:
        if len(text) > 1 and text[0] == "0" and text[1] not in "xXoObB":
            text = "0o" + text[1:]
    else:
        if "_" in text:
            raise invalid
        prefix = _BASE_PREFIXES.get(base)
        if prefix and len(text) > 1 and text[0] == "0" and text[1].lower() == prefix:
            raise invalid
    try:
        value = int(text, base)
    except ValueError:
        raise invalid from None
    if value > _UINT64_MAX:
        raise ValueError(f"value out of range: {text!r}")
    return value


class FS:
    """A proc filesystem mounted at a given directory."""

    def __init__(self, mount_point: str | os.PathLike = DEFAULT_PROC_MOUNT_POINT) -> None:
        mount_point = os.fspath(mount_point)
        info = os.stat(mount_point)
        if not stat.S_ISDIR(info.st_mode):
            raise NotADirectoryError(
                errno.ENOTDIR, "mount point is not a directory", mount_point
            )
        self.mount_point = mount_point

    def path(self, *args: str) -> str:
        """Return the path of a file below the mount point."""
        return os.path.join(self.mount_point, *args)

    def __repr__(self) -> str:
        return f"FS({self.mount_point!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FS):
            return NotImplemented
        return self.mount_point == other.mount_point

    def __hash__(self) -> int:
        return hash(self.mount_point)


def read_file(path: str | os.PathLike) -> str:
    """Read a whole (usually small, pseudo) file as text."""
    with open(path, encoding="utf-8", errors="surrogateescape") as handle:
        return handle.read()


def read_uint_from_file(path: str | os.PathLike) -> int:
    """Read a file holding a single unsigned decimal integer."""
    return _parse_uint(read_file(path).strip(), 10)