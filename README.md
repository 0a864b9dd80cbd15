# procfs

Read and parse Linux kernel statistics from `/proc`, and iSCSI target
information from configfs and `/sys`. Most readers take an `FS` rooted at a
mount point, so they work on the live system or on a captured copy of it.
The parsing functions also take text directly, which makes them easy to use
on saved files.

Python 3.10 or later is required. There are no runtime dependencies.

## Installation

From a checkout of the package:

```
pip install .
```

## Usage

```python
from procfs.fs import FS
from procfs.loadavg import load_avg
from procfs.meminfo import meminfo
from procfs.net_dev import net_dev

fs = FS("/proc")

avg = load_avg(fs)
print(avg.load1, avg.load5, avg.load15)

mem = meminfo(fs)
print(mem.mem_total, mem.mem_available)  # None when the file has no such line

interfaces = net_dev(fs)      # a dict of NetDevLine keyed by interface name
print(interfaces.total())     # counters summed over all interfaces
```

`FS(mount_point)` raises `FileNotFoundError` if the mount point does not
exist and `NotADirectoryError` if it is not a directory. `FS.path(*parts)`
joins parts below the mount point.

Parsing text directly:

```python
from procfs.loadavg import parse_load
from procfs.mountinfo import parse_mount_info_string

parse_load("0.00 0.03 0.05 1/502 33634")
parse_mount_info_string(
    "16 21 0:16 / /sys rw,nosuid shared:7 - sysfs sysfs rw"
)
```

## Modules

| Module | Reads | Main functions |
| --- | --- | --- |
| `procfs.fs` | helpers | `FS`, `read_file`, `read_uint_from_file` |
| `procfs.kernel_random` | `sys/kernel/random/*` | `kernel_random(fs)` |
| `procfs.loadavg` | `loadavg` | `load_avg(fs)`, `parse_load(data)` |
| `procfs.meminfo` | `meminfo` | `meminfo(fs)`, `parse_meminfo(text)` |
| `procfs.mdstat` | `mdstat` | `mdstat(fs)`, `parse_mdstat(data)` |
| `procfs.mountinfo` | `/proc/self/mountinfo`, `/proc/<pid>/mountinfo` | `get_mounts()`, `get_proc_mounts(pid)`, `parse_mount_info(data)`, `parse_mount_info_string(line)` |
| `procfs.mountstats` | a `mountstats` file, with NFS statistics | `read_mount_stats(path)`, `parse_mount_stats(text)` |
| `procfs.net_conntrackstat` | `net/stat/nf_conntrack` | `conntrack_stat(fs)`, `read_conntrack_stat(path)`, `parse_conntrack_stat(text)` |
| `procfs.net_dev` | `net/dev` | `net_dev(fs)`, `read_net_dev(path)`, `parse_net_dev_line(line)` |
| `procfs.net_ip_socket` | socket tables | `read_net_ip_socket(path)`, `read_net_ip_socket_summary(path)`, `parse_net_ip_socket_line(fields)`, `parse_ip(hex_ip)` |
| `procfs.net_tcp` | `net/tcp`, `net/tcp6` | `net_tcp`, `net_tcp6`, `net_tcp_summary`, `net_tcp6_summary` |
| `procfs.net_udp` | `net/udp`, `net/udp6` | `net_udp`, `net_udp6`, `net_udp_summary`, `net_udp6_summary` |
| `procfs.net_protocols` | `net/protocols` | `net_protocols(fs)`, `parse_net_protocols(text)`, `parse_protocol_line(line)`, `parse_capabilities(flags)` |
| `procfs.net_sockstat` | `net/sockstat`, `net/sockstat6` | `net_sockstat(fs)`, `net_sockstat6(fs)`, `read_sockstat(path)`, `parse_sockstat(text)` |
| `procfs.net_softnet` | `net/softnet_stat` | `net_softnet_stat(fs)`, `read_softnet_stat(path)`, `parse_softnet(text)` |
| `procfs.iscsi` | iSCSI targets in configfs, RBD devices in sysfs | `FS`, `get_stats(iqn_path)`, `read_write_ops(iqn_path, tpgt, lun)` |

Results are dataclasses. Addresses in socket tables come back as
`ipaddress.IPv4Address` or `ipaddress.IPv6Address`; the NFS mount age is a
`datetime.timedelta`.

## Errors

A file that cannot be opened raises the usual `OSError` (for example
`FileNotFoundError`), except in `kernel_random`, which leaves a value as
`None` when its file is absent. Malformed content raises `ValueError`.

## iSCSI

```python
from procfs.iscsi import FS as IscsiFS, read_write_ops

iscsi = IscsiFS("/sys", "/sys/kernel/config")
for stats in iscsi.iscsi_stats():
    for tpgt in stats.tpgt:
        for lun in tpgt.luns:
            print(lun.backstore, lun.object_name, lun.type_number)
            print(read_write_ops(f"{stats.root_path}/{stats.name}", tpgt.name, lun.name))
```

An empty string for either path selects the default mount point (`/sys` or
`/sys/kernel/config`). The backstore details are available through
`get_fileio_udev`, `get_iblock_udev`, `get_rbd_match` and `get_rdmcp_path`;
the last two return `None` when nothing matches or the backstore is disabled.

## What this package does not do

- It has no command-line program; it is a library only.
- There is no per-process object: apart from `get_proc_mounts(pid)`, files
  under `/proc/<pid>/` are read by passing their path (for example
  `read_mount_stats("/proc/1234/mountstats")` or
  `read_net_dev("/proc/1234/net/dev")`).
- Only the files listed above are parsed; other `/proc` and `/sys` files
  such as `stat` or per-CPU information are not covered.

## Running the tests

```
pip install -e .[test]
pytest
```