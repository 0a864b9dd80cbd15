import os

import pytest

from procfs.iscsi import (
    FILEIO,
    FS,
    IBLOCK,
    LUN,
    RBD,
    RDMCP,
    TPGT,
    Stats,
    get_stats,
    read_write_ops,
)

IQN_RDMCP = "iqn.2003-01.org.example.target:sn.example0001"
IQN_IBLOCK = "iqn.2003-01.org.example.target:sn.example0002"
IQN_FILEIO = "iqn.2016-11.org.example.igw:dev.rbd0"
IQN_RBD = "iqn.2016-11.org.example.igw:sn.ramdemo"

TARGETS = {
    IQN_RDMCP: ("rd_mcp_119", "ramdisk_lio_1G", (10325, 40325, 204950)),
    IQN_IBLOCK: ("iblock_0", "block_lio_rbd1", (20095, 71235, 104950)),
    IQN_FILEIO: ("fileio_1", "file_lio_1G", (10195, 30195, 301950)),
    IQN_RBD: ("rbd_0", "iscsi-images-demo", (1504, 4733, 1234)),
}


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)


@pytest.fixture
def fixture_root(tmp_path):
    sys_dir = tmp_path / "sys"
    config = sys_dir / "kernel" / "config"
    iscsi_dir = config / "target" / "iscsi"
    for iqn, (core_dir, obj, (read, write, cmds)) in TARGETS.items():
        tpgt = iscsi_dir / iqn / "tpgt_1"
        _write(tpgt / "enable", "1\n")
        lun = tpgt / "lun" / "lun_0"
        stats = lun / "statistics" / "scsi_tgt_port"
        _write(stats / "read_mbytes", f"{read}\n")
        _write(stats / "write_mbytes", f"{write}\n")
        _write(stats / "in_cmds", f"{cmds}\n")
        os.symlink(
            f"../../../../../../target/core/{core_dir}/{obj}", lun / "link0"
        )
    core = config / "target" / "core"
    _write(core / "rd_mcp_119" / "ramdisk_lio_1G" / "enable", "1\n")
    _write(core / "iblock_0" / "block_lio_rbd1" / "udev_path", "/dev/rbd1\n")
    _write(core / "fileio_1" / "file_lio_1G" / "udev_path", "/home/iscsi/file_back_1G\n")
    _write(sys_dir / "devices" / "rbd" / "0" / "pool", "iscsi-images\n")
    _write(sys_dir / "devices" / "rbd" / "0" / "name", "demo\n")
    return sys_dir, config


@pytest.fixture
def iscsi_fs(fixture_root):
    sys_dir, config = fixture_root
    return FS(str(sys_dir), str(config))


def test_iscsi_stats(iscsi_fs, fixture_root):
    _, config = fixture_root
    root = str(config / "target" / "iscsi")
    stats = iscsi_fs.iscsi_stats()
    assert [s.name for s in stats] == sorted(TARGETS)
    for stat in stats:
        core_dir, obj, _ = TARGETS[stat.name]
        backstore, _, number = core_dir.rpartition("_")
        tpgt_path = os.path.join(root, stat.name, "tpgt_1")
        assert stat == Stats(
            name=stat.name,
            tpgt=[
                TPGT(
                    name="tpgt_1",
                    tpgt_path=tpgt_path,
                    is_enable=True,
                    luns=[
                        LUN(
                            name="lun_0",
                            lun_path=os.path.join(tpgt_path, "lun", "lun_0"),
                            backstore=backstore,
                            object_name=obj,
                            type_number=number,
                        )
                    ],
                )
            ],
            root_path=root,
        )


def test_rdmcp_lun_fields(iscsi_fs):
    stats = {s.name: s for s in iscsi_fs.iscsi_stats()}
    lun = stats[IQN_RDMCP].tpgt[0].luns[0]
    assert (lun.backstore, lun.object_name, lun.type_number) == (
        "rd_mcp",
        "ramdisk_lio_1G",
        "119",
    )


def test_read_write_ops(iscsi_fs):
    for stat in iscsi_fs.iscsi_stats():
        result = read_write_ops(
            os.path.join(stat.root_path, stat.name),
            stat.tpgt[0].name,
            stat.tpgt[0].luns[0].name,
        )
        assert result == TARGETS[stat.name][2]


def test_read_write_ops_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_write_ops(str(tmp_path), "tpgt_1", "lun_0")


def test_read_write_ops_bad_value(tmp_path):
    stats = tmp_path / "tpgt_1" / "lun" / "lun_0" / "statistics" / "scsi_tgt_port"
    _write(stats / "read_mbytes", "abc\n")
    with pytest.raises(ValueError):
        read_write_ops(str(tmp_path), "tpgt_1", "lun_0")


def test_get_rdmcp_path(iscsi_fs):
    assert iscsi_fs.get_rdmcp_path("119", "ramdisk_lio_1G") == RDMCP(
        "rd_mcp_119", "ramdisk_lio_1G"
    )


def test_get_rdmcp_path_disabled(iscsi_fs, fixture_root):
    _, config = fixture_root
    _write(config / "target" / "core" / "rd_mcp_5" / "disk" / "enable", "0\n")
    assert iscsi_fs.get_rdmcp_path("5", "disk") is None


def test_get_rdmcp_path_missing(iscsi_fs):
    with pytest.raises(FileNotFoundError):
        iscsi_fs.get_rdmcp_path("7", "nothing")


def test_get_iblock_udev(iscsi_fs):
    assert iscsi_fs.get_iblock_udev("0", "block_lio_rbd1") == IBLOCK(
        "iblock_0", "0", "block_lio_rbd1", "/dev/rbd1"
    )


def test_get_fileio_udev(iscsi_fs):
    assert iscsi_fs.get_fileio_udev("1", "file_lio_1G") == FILEIO(
        "fileio_1", "1", "file_lio_1G", "/home/iscsi/file_back_1G"
    )


def test_get_fileio_udev_missing(iscsi_fs):
    with pytest.raises(FileNotFoundError):
        iscsi_fs.get_fileio_udev("9", "file_lio_1G")


def test_get_rbd_match(iscsi_fs):
    assert iscsi_fs.get_rbd_match("0", "iscsi-images-demo") == RBD(
        "rbd_0", "0", "iscsi-images", "demo"
    )


def test_get_rbd_no_match(iscsi_fs):
    assert iscsi_fs.get_rbd_match("0", "other-image") is None
    assert iscsi_fs.get_rbd_match("1", "iscsi-images-demo") is None


def test_disabled_tpgt_has_no_luns(tmp_path):
    iqn = tmp_path / "iqn.example"
    _write(iqn / "tpgt_1" / "enable", "false\n")
    lun = iqn / "tpgt_1" / "lun" / "lun_0"
    lun.mkdir(parents=True)
    os.symlink("../core/fileio_1/obj", lun / "link")
    stats = get_stats(str(iqn))
    assert stats.tpgt == [
        TPGT(name="tpgt_1", tpgt_path=str(iqn / "tpgt_1"), is_enable=False)
    ]


def test_invalid_enable_and_missing_link(tmp_path):
    iqn = tmp_path / "iqn.example"
    _write(iqn / "tpgt_1" / "enable", "maybe\n")
    _write(iqn / "tpgt_2" / "enable", "True\n")
    (iqn / "tpgt_2" / "lun" / "lun_0").mkdir(parents=True)
    stats = get_stats(str(iqn))
    assert [(t.name, t.is_enable, t.luns) for t in stats.tpgt] == [
        ("tpgt_1", False, []),
        ("tpgt_2", True, []),
    ]
    assert stats.name == "iqn.example"
    assert stats.root_path == str(tmp_path)


def test_path(iscsi_fs, fixture_root):
    _, config = fixture_root
    assert iscsi_fs.path("target", "core") == os.path.join(str(config), "target", "core")


def test_fs_missing_mount_point(tmp_path):
    with pytest.raises(FileNotFoundError):
        FS(str(tmp_path / "missing"), str(tmp_path))
    with pytest.raises(FileNotFoundError):
        FS(str(tmp_path), str(tmp_path / "missing"))


def test_empty_configfs_uses_no_iqns(tmp_path):
    fs = FS(str(tmp_path), str(tmp_path))
    assert fs.iscsi_stats() == []