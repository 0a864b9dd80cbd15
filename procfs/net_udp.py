"""UDP socket tables from /proc/net/udp and /proc/net/udp6."""

from __future__ import annotations

from procfs.fs import FS
from procfs.net_ip_socket import (
    NetIPSocketLine,
    NetIPSocketSummary,
    read_net_ip_socket,
    read_net_ip_socket_summary,
)


def net_udp(fs: FS) -> list[NetIPSocketLine]:
    """IPv4 UDP sockets."""
    return read_net_ip_socket(fs.path("net/udp"))


def net_udp6(fs: FS) -> list[NetIPSocketLine]:
    """IPv6 UDP sockets."""
    return read_net_ip_socket(fs.path("net/udp6"))


def net_udp_summary(fs: FS) -> NetIPSocketSummary:
    """Totals over the IPv4 UDP sockets."""
    return read_net_ip_socket_summary(fs.path("net/udp"))


def net_udp6_summary(fs: FS) -> NetIPSocketSummary:
    """Totals over the IPv6 UDP sockets."""
    return read_net_ip_socket_summary(fs.path("net/udp6"))