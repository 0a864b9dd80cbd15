import pytest

from procfs.fs import FS
from procfs.net_protocols import (
    NetProtocolCapabilities,
    NetProtocolStatLine,
    net_protocols,
    parse_capabilities,
    parse_net_protocols,
    parse_protocol_line,
)

T, F = True, False
TCP_CAPS = NetProtocolCapabilities(T, T, T, T, T, T, T, T, T, T, T, T, T, F, T, T, T, T, T)
NONE_CAPS = NetProtocolCapabilities()
UDP_CAPS = NetProtocolCapabilities(T, T, T, F, T, T, T, F, T, T, T, T, T, F, F, T, T, T, F)
PINGV6_CAPS = NetProtocolCapabilities(T, T, T, F, F, T, F, F, T, T, T, T, F, T, T, T, T, T, F)

PROTOCOLS = (
    "protocol  size sockets  memory press maxhdr  slab module     cl co di ac io in de sh ss gs se re sp bi br ha uh gp em\n"
    "PACKET    1344      2      -1   NI       0   no   kernel      n  n  n  n  n  n  n  n  n  n  n  n  n  n  n  n  n  n  n\n"
    "PINGv6    1112      0      -1   NI       0   yes  kernel      y  y  y  n  n  y  n  n  y  y  y  y  n  y  y  y  y  y  n\n"
    "UDP       1024     73      57   NI       0   yes  kernel      y  y  y  n  y  y  y  n  y  y  y  y  y  n  n  y  y  y  n\n"
    "TCP       1984  93064 1225378  yes     320   yes  kernel      y  y  y  y  y  y  y  y  y  y  y  y  y  n  y  y  y  y  y\n"
)

EXPECTED = {
    "PACKET": NetProtocolStatLine("PACKET", 1344, 2, -1, -1, 0, False, "kernel", NONE_CAPS),
    "PINGv6": NetProtocolStatLine("PINGv6", 1112, 0, -1, -1, 0, True, "kernel", PINGV6_CAPS),
    "UDP": NetProtocolStatLine("UDP", 1024, 73, 57, -1, 0, True, "kernel", UDP_CAPS),
    "TCP": NetProtocolStatLine("TCP", 1984, 93064, 1225378, 1, 320, True, "kernel", TCP_CAPS),
}


def test_parse_capabilities():
    raw = "y  y  y  y  y  y  y  y  y  y  y  y  y  n  y  y  y  y  y\n"
    assert parse_capabilities(raw.split()) == TCP_CAPS


def test_parse_capabilities_invalid_flag():
    with pytest.raises(ValueError, match="position 2"):
        parse_capabilities(["y", "n", "x"])


def test_protocols_parse_line():
    raw = "TCP       1984  93064  1225378   no     320   yes  kernel      y  y  y  y  y  y  y  y  y  y  y  y  y  n  y  y  y  y  y\n"
    assert parse_protocol_line(raw) == NetProtocolStatLine(
        "TCP", 1984, 93064, 1225378, 0, 320, True, "kernel", TCP_CAPS
    )


def test_parse_line_bad_slab():
    raw = "TCP 1984 93064 1225378 no 320 maybe kernel y y"
    with pytest.raises(ValueError):
        parse_protocol_line(raw)


def test_parse_line_bad_size():
    raw = "TCP -1 93064 1225378 no 320 yes kernel y y"
    with pytest.raises(ValueError):
        parse_protocol_line(raw)


def test_parse_net_protocols():
    assert parse_net_protocols(PROTOCOLS) == EXPECTED


def test_net_protocols_from_fs(tmp_path):
    (tmp_path / "net").mkdir()
    (tmp_path / "net" / "protocols").write_text(PROTOCOLS)
    stats = net_protocols(FS(tmp_path))
    assert stats == EXPECTED
    assert len(stats) == 4


def test_net_protocols_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        net_protocols(FS(tmp_path))