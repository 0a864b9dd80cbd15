"""TCP socket tables from /proc/net/tcp and /proc/net/tcp6."""

from __future__ import annotations

from procfs.fs import FS
from procfs.net_ip_socket import (
    NetIPSocketLine,
    NetIPSocketSummary,
    read_net_ip_socket,
    read_net_ip_socket_summary,
)


def net_tcp(fs: FS) -> list[NetIPSocketLine]:
    """IPv4 TCP sockets."""
    return read_net_ip_socket(fs.path("net/tcp"))


def net_tcp6(fs: FS) -> list[NetIPSocketLine]:
    """IPv6 TCP sockets."""
    return read_net_ip_socket(fs.path("net/tcp6"))


def net_tcp_summary(fs: FS) -> NetIPSocketSummary:
    """Totals over the IPv4 TCP sockets."""
    return read_net_ip_socket_summary(fs.path("net/tcp"))


def net_tcp6_summary(fs: FS) -> NetIPSocketSummary:
    """Totals over the IPv6 TCP sockets."""
    return read_net_ip_socket_summary(fs.path("net/tcp6"))