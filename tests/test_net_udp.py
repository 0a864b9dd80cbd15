import ipaddress

import pytest

from procfs.fs import FS
from procfs.net_ip_socket import NetIPSocketLine, NetIPSocketSummary
from procfs.net_udp import net_udp, net_udp6, net_udp6_summary, net_udp_summary

UDP = (
    "  sl  local_address rem_address   st tx_queue rx_queue tr tm->when retrnsmt   uid  timeout inode ref pointer drops\n"
    "    0: 0500000A:0016 00000000:0000 0A 00000000:00000001 00:00000000 00000000     0        0 2740 1 0000000000000000 0\n"
    "    1: 00000000:0016 00000000:0000 0A 00000001:00000000 00:00000000 00000000     0        0 2740 1 0000000000000000 0\n"
    "    2: 00000000:0016 00000000:0000 0A 00000001:00000001 00:00000000 00000000     0        0 2740 1 0000000000000000 0\n"
)
ZERO6_HEX = "0" * 32
UDP6 = (
    "  sl  local_address                         remote_address                        st tx_queue rx_queue tr tm->when retrnsmt   uid  timeout inode ref pointer drops\n"
    f" 1315: {ZERO6_HEX}:14EB {ZERO6_HEX}:0000 07 00000000:00000000 00:00000000 00000000   981        0 21040 2 0000000000000000 0\n"
    f" 6073: 000080FE00000000FFADE15609667CFE:C781 {ZERO6_HEX}:0000 07 00000000:00000000 00:00000000 00000000  1000        0 11337031 2 0000000000000000 0\n"
)
BROKEN = (
    "  sl  local_address rem_address   st tx_queue rx_queue tr tm->when retrnsmt   uid  timeout inode\n"
    "    1: 00000000:0000 00000000:0000 07 0000000000000001 00:00000000 00000000\n"
)

ZERO4 = ipaddress.ip_address("0.0.0.0")
ZERO6 = ipaddress.ip_address("::")


def _proc(tmp_path, files):
    net = tmp_path / "net"
    net.mkdir(parents=True, exist_ok=True)
    for name, content in files.items():
        (net / name).write_text(content)
    return FS(tmp_path)


@pytest.fixture
def fs(tmp_path):
    return _proc(tmp_path, {"udp": UDP, "udp6": UDP6})


def test_net_udp(fs):
    local = ipaddress.ip_address("10.0.0.5")
    assert net_udp(fs) == [
        NetIPSocketLine(0, local, 22, ZERO4, 0, 10, 0, 1, 0, 2740),
        NetIPSocketLine(1, ZERO4, 22, ZERO4, 0, 10, 1, 0, 0, 2740),
        NetIPSocketLine(2, ZERO4, 22, ZERO4, 0, 10, 1, 1, 0, 2740),
    ]


def test_net_udp6(fs):
    local = ipaddress.IPv6Address(
        bytes([254, 128, 0, 0, 0, 0, 0, 0, 86, 225, 173, 255, 254, 124, 102, 9])
    )
    assert net_udp6(fs) == [
        NetIPSocketLine(1315, ZERO6, 5355, ZERO6, 0, 7, 0, 0, 981, 21040),
        NetIPSocketLine(6073, local, 51073, ZERO6, 0, 7, 0, 0, 1000, 11337031),
    ]


def test_net_udp_summary(fs):
    assert net_udp_summary(fs) == NetIPSocketSummary(2, 2, 3)


def test_net_udp6_summary(fs):
    assert net_udp6_summary(fs) == NetIPSocketSummary(0, 0, 2)


def test_missing_file(tmp_path):
    fs = FS(tmp_path)
    with pytest.raises(FileNotFoundError):
        net_udp6(fs)
    with pytest.raises(FileNotFoundError):
        net_udp6_summary(fs)


def test_broken_file(tmp_path):
    fs = _proc(tmp_path, {"udp": BROKEN})
    with pytest.raises(ValueError):
        net_udp(fs)
    with pytest.raises(ValueError):
        net_udp_summary(fs)