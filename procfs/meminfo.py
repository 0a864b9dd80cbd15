"""Memory statistics from /proc/meminfo."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from procfs.fs import FS, _parse_uint, read_file


@dataclass
class Meminfo:
    """Memory statistics; values not present in the file are None."""

    mem_total: Optional[int] = None
    mem_free: Optional[int] = None
    mem_available: Optional[int] = None
    buffers: Optional[int] = None
    cached: Optional[int] = None
    swap_cached: Optional[int] = None
    active: Optional[int] = None
    inactive: Optional[int] = None
    active_anon: Optional[int] = None
    inactive_anon: Optional[int] = None
    active_file: Optional[int] = None
    inactive_file: Optional[int] = None
    unevictable: Optional[int] = None
    mlocked: Optional[int] = None
    swap_total: Optional[int] = None
    swap_free: Optional[int] = None
    dirty: Optional[int] = None
    writeback: Optional[int] = None
    anon_pages: Optional[int] = None
    mapped: Optional[int] = None
    shmem: Optional[int] = None
    slab: Optional[int] = None
    s_reclaimable: Optional[int] = None
    s_unreclaim: Optional[int] = None
    kernel_stack: Optional[int] = None
    page_tables: Optional[int] = None
    nfs_unstable: Optional[int] = None
    bounce: Optional[int] = None
    writeback_tmp: Optional[int] = None
    commit_limit: Optional[int] = None
    committed_as: Optional[int] = None
    vmalloc_total: Optional[int] = None
    vmalloc_used: Optional[int] = None
    vmalloc_chunk: Optional[int] = None
    hardware_corrupted: Optional[int] = None
    anon_huge_pages: Optional[int] = None
    shmem_huge_pages: Optional[int] = None
    shmem_pmd_mapped: Optional[int] = None
    cma_total: Optional[int] = None
    cma_free: Optional[int] = None
    huge_pages_total: Optional[int] = None
    huge_pages_free: Optional[int] = None
    huge_pages_rsvd: Optional[int] = None
    huge_pages_surp: Optional[int] = None
    hugepagesize: Optional[int] = None
    direct_map_4k: Optional[int] = None
    direct_map_2m: Optional[int] = None
    direct_map_1g: Optional[int] = None


_KEYS = {
    "MemTotal:": "mem_total",
    "MemFree:": "mem_free",
    "MemAvailable:": "mem_available",
    "Buffers:": "buffers",
    "Cached:": "cached",
    "SwapCached:": "swap_cached",
    "Active:": "active",
    "Inactive:": "inactive",
    "Active(anon):": "active_anon",
    "Inactive(anon):": "inactive_anon",
    "Active(file):": "active_file",
    "Inactive(file):": "inactive_file",
    "Unevictable:": "unevictable",
    "Mlocked:": "mlocked",
    "SwapTotal:": "swap_total",
    "SwapFree:": "swap_free",
    "Dirty:": "dirty",
    "Writeback:": "writeback",
    "AnonPages:": "anon_pages",
    "Mapped:": "mapped",
    "Shmem:": "shmem",
    "Slab:": "slab",
    "SReclaimable:": "s_reclaimable",
    "SUnreclaim:": "s_unreclaim",
    "KernelStack:": "kernel_stack",
    "PageTables:": "page_tables",
    "NFS_Unstable:": "nfs_unstable",
    "Bounce:": "bounce",
    "WritebackTmp:": "writeback_tmp",
    "CommitLimit:": "commit_limit",
    "Committed_AS:": "committed_as",
    "VmallocTotal:": "vmalloc_total",
    "VmallocUsed:": "vmalloc_used",
    "VmallocChunk:": "vmalloc_chunk",
    "HardwareCorrupted:": "hardware_corrupted",
    "AnonHugePages:": "anon_huge_pages",
    "ShmemHugePages:": "shmem_huge_pages",
    "ShmemPmdMapped:": "shmem_pmd_mapped",
    "CmaTotal:": "cma_total",
    "CmaFree:": "cma_free",
    "HugePages_Total:": "huge_pages_total",
    "HugePages_Free:": "huge_pages_free",
    "HugePages_Rsvd:": "huge_pages_rsvd",
    "HugePages_Surp:": "huge_pages_surp",
    "Hugepagesize:": "hugepagesize",
    "DirectMap4k:": "direct_map_4k",
    "DirectMap2M:": "direct_map_2m",
    "DirectMap1G:": "direct_map_1g",
}


def parse_meminfo(text: str) -> Meminfo:
    """Parse meminfo contents; units are ignored and unknown keys skipped."""
    values = {}
    for line in text.splitlines():
        fields = line.split()
        if len(fields) < 2:
            raise ValueError(f"malformed meminfo line: {line!r}")
        value = _parse_uint(fields[1], 0)
        attribute = _KEYS.get(fields[0])
        if attribute is not None:
            values[attribute] = value
    return Meminfo(**values)


def meminfo(fs: FS) -> Meminfo:
    """Read the memory statistics of the given proc filesystem."""
    text = read_file(fs.path("meminfo"))
    try:
        return parse_meminfo(text)
    except ValueError as exc:
        raise ValueError(f"failed to parse meminfo: {exc}") from exc