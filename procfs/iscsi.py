"""iSCSI target statistics from configfs and sysfs."""

from __future__ import annotations

import glob
import os
import stat
from dataclasses import dataclass, field
from typing import Optional

from procfs.fs import FS as _MountFS
from procfs.fs import read_file, read_uint_from_file

DEFAULT_SYS_MOUNT_POINT = "/sys"
DEFAULT_CONFIGFS_MOUNT_POINT = "/sys/kernel/config"

_IQN_GLOB = "target/iscsi/iqn*"
_TARGET_CORE = "target/core"
_DEVICE_PATH = "devices/rbd"

_TRUE_WORDS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_WORDS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


@dataclass
class LUN:
    """A logical unit of a target portal group."""

    name: str
    lun_path: str
    backstore: str = ""
    object_name: str = ""
    type_number: str = ""


@dataclass
class TPGT:
    """A target portal group tag."""

    name: str
    tpgt_path: str
    is_enable: bool = False
    luns: list[LUN] = field(default_factory=list)


@dataclass
class Stats:
    """All target portal groups of one IQN."""

    name: str
    tpgt: list[TPGT] = field(default_factory=list)
    root_path: str = ""


@dataclass
class FILEIO:
    """A fileio backstore and the file it exports."""

    name: str
    fnumber: str
    object_name: str
    filename: str = ""


@dataclass
class IBLOCK:
    """An iblock backstore and the block device it exports."""

    name: str
    bnumber: str
    object_name: str
    iblock: str = ""


@dataclass
class RBD:
    """An rbd backstore and its pool and image."""

    name: str
    rnumber: str
    pool: str = ""
    image: str = ""


@dataclass
class RDMCP:
    """A ramdisk (rd_mcp) backstore."""

    name: str
    object_name: str


def _rewrap(exc: Exception, message: str) -> Exception:
    if isinstance(exc, OSError):
        return OSError(exc.errno, message, exc.filename)
    return ValueError(message)


def _parse_bool(text: str) -> bool:
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    raise ValueError(f"invalid boolean: {text!r}")


def _is_path_enable(path: str) -> bool:
    """Whether the ``enable`` file below ``path`` holds a true value."""
    return _parse_bool(read_file(os.path.join(path, "enable")).strip())


def _base(path: str) -> str:
    stripped = path.rstrip(os.sep)
    return os.path.basename(stripped) if stripped else os.sep


def _sorted_glob(pattern: str) -> list[str]:
    return sorted(glob.glob(pattern))


def _get_lun_link_target(lun_path: str) -> LUN:
    lun = LUN(name=_base(lun_path), lun_path=lun_path)
    for entry in sorted(os.listdir(lun_path)):
        full = os.path.join(lun_path, entry)
        try:
            info = os.lstat(full)
        except OSError:
            continue
        if not stat.S_ISLNK(info.st_mode):
            continue
        target = os.readlink(full)
        target_dir, object_name = os.path.split(target)
        type_with_number = os.path.basename(os.path.normpath(target_dir))
        backstore, sep, number = type_with_number.rpartition("_")
        if sep:
            lun.backstore = backstore
            lun.type_number = number
        lun.object_name = object_name
        return lun
    raise FileNotFoundError(f"iscsi: getLunLinkTarget: Lun Link does not exist in {lun_path!r}")


def get_stats(iqn_path: str) -> Stats:
    """Collect the portal groups and their LUNs below one IQN directory."""
    stats = Stats(name=_base(iqn_path), root_path=os.path.dirname(iqn_path))
    for tpgt_path in _sorted_glob(os.path.join(glob.escape(iqn_path), "tpgt*")):
        try:
            enabled = _is_path_enable(tpgt_path)
        except (OSError, ValueError):
            enabled = False
        tpgt = TPGT(name=_base(tpgt_path), tpgt_path=tpgt_path, is_enable=enabled)
        if enabled:
            pattern = os.path.join(glob.escape(tpgt_path), "lun", "lun*")
            for lun_path in _sorted_glob(pattern):
                try:
                    tpgt.luns.append(_get_lun_link_target(lun_path))
                except OSError:
                    continue
        stats.tpgt.append(tpgt)
    return stats


def read_write_ops(iqn_path: str, tpgt: str, lun: str) -> tuple[int, int, int]:
    """Return (read megabytes, written megabytes, commands) of a LUN."""
    base = os.path.join(iqn_path, tpgt, "lun", lun, "statistics", "scsi_tgt_port")
    values = []
    for filename in ("read_mbytes", "write_mbytes", "in_cmds"):
        path = os.path.join(base, filename)
        try:
            values.append(read_uint_from_file(path))
        except (OSError, ValueError) as exc:
            raise _rewrap(
                exc, f"iscsi: ReadWriteOPS: {filename} error file {path!r}: {exc}"
            ) from exc
    return values[0], values[1], values[2]


def _match_pool_image(pool: str, image: str, pool_image: str) -> bool:
    return f"{pool}-{image}" == pool_image


def _read_stripped(path: str) -> Optional[str]:
    try:
        return read_file(path).strip()
    except OSError:
        return None


class FS:
    """The sysfs and configfs mounts that expose iSCSI target data."""

    def __init__(
        self,
        sysfs_path: Optional[str] = "",
        configfs_mount_point: Optional[str] = "",
    ) -> None:
        if not sysfs_path or not str(sysfs_path).strip():
            sysfs_path = DEFAULT_SYS_MOUNT_POINT
        if not configfs_mount_point or not str(configfs_mount_point).strip():
            configfs_mount_point = DEFAULT_CONFIGFS_MOUNT_POINT
        self.sysfs = _MountFS(sysfs_path)
        self.configfs = _MountFS(configfs_mount_point)

    def path(self, *args: str) -> str:
        """Return a path below the configfs mount point."""
        return self.configfs.path(*args)

    def iscsi_stats(self) -> list[Stats]:
        """Statistics for every IQN found in configfs, in name order."""
        pattern = os.path.join(glob.escape(self.configfs.mount_point), _IQN_GLOB)
        return [get_stats(iqn_path) for iqn_path in _sorted_glob(pattern)]

    def _read_udev(self, name: str, object_name: str, kind: str, what: str) -> str:
        udev_path = self.configfs.path(_TARGET_CORE, name, object_name, "udev_path")
        try:
            return read_file(udev_path).strip()
        except FileNotFoundError as exc:
            raise FileNotFoundError(
                exc.errno, f"iscsi: {kind}: {name} is missing file name", udev_path
            ) from exc
        except OSError as exc:
            raise OSError(
                exc.errno, f"iscsi: {kind}: Cannot read {what} from udev link", udev_path
            ) from exc

    def get_fileio_udev(self, fileio_number: str, object_name: str) -> FILEIO:
        """The fileio backstore with the given number and the file it exports."""
        fileio = FILEIO(
            name=f"fileio_{fileio_number}",
            fnumber=fileio_number,
            object_name=object_name,
        )
        fileio.filename = self._read_udev(
            fileio.name, object_name, "GetFileioUdev", "filename"
        )
        return fileio

    def get_iblock_udev(self, iblock_number: str, object_name: str) -> IBLOCK:
        """The iblock backstore with the given number and its block device."""
        iblock = IBLOCK(
            name=f"iblock_{iblock_number}",
            bnumber=iblock_number,
            object_name=object_name,
        )
        iblock.iblock = self._read_udev(
            iblock.name, object_name, "GetIBlockUdev", "iblock"
        )
        return iblock

    def get_rbd_match(self, rbd_number: str, pool_image: str) -> Optional[RBD]:
        """The rbd device with the given number whose "pool-image" matches, or None."""
        rbd = RBD(name=f"rbd_{rbd_number}", rnumber=rbd_number)
        pattern = os.path.join(
            glob.escape(self.sysfs.path(_DEVICE_PATH)), "[0-9]*"
        )
        for index, rbd_path in enumerate(_sorted_glob(pattern)):
            pool = _read_stripped(os.path.join(rbd_path, "pool"))
            if pool is None:
                continue
            image = _read_stripped(os.path.join(rbd_path, "name"))
            if image is None:
                continue
            if str(index) == rbd_number and _match_pool_image(pool, image, pool_image):
                rbd.pool = pool
                rbd.image = image
                return rbd
        return None

    def get_rdmcp_path(self, rdmcp_number: str, object_name: str) -> Optional[RDMCP]:
        """The rd_mcp backstore if it exists and is enabled, otherwise None."""
        rdmcp = RDMCP(name=f"rd_mcp_{rdmcp_number}", object_name=object_name)
        rdmcp_path = self.configfs.path(_TARGET_CORE, rdmcp.name, object_name)
        if not os.path.exists(rdmcp_path):
            raise FileNotFoundError(
                2, f"iscsi: GetRDMCPPath {rdmcp_path!r} does not exist", rdmcp_path
            )
        try:
            enabled = _is_path_enable(rdmcp_path)
        except (OSError, ValueError) as exc:
            raise _rewrap(exc, f"iscsi: GetRDMCPPath: error {exc}") from exc
        return rdmcp if enabled else None

    def __repr__(self) -> str:
        return f"FS(sysfs={self.sysfs.mount_point!r}, configfs={self.configfs.mount_point!r})"