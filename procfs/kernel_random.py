"""Kernel random number generator settings from sys/kernel/random."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from procfs.fs import FS, read_uint_from_file

_FILES = {
    "entropy_avail": "entropy_available",
    "poolsize": "pool_size",
    "urandom_min_reseed_secs": "urandom_min_reseed_seconds",
    "write_wakeup_threshold": "write_wakeup_threshold",
    "read_wakeup_threshold": "read_wakeup_threshold",
}


@dataclass
class KernelRandom:
    """State of the kernel's random number generator; absent files are None."""

    entropy_available: Optional[int] = None
    pool_size: Optional[int] = None
    urandom_min_reseed_seconds: Optional[int] = None
    write_wakeup_threshold: Optional[int] = None
    read_wakeup_threshold: Optional[int] = None


def kernel_random(fs: FS) -> KernelRandom:
    """Read the values below sys/kernel/random, skipping files that do not exist."""
    values = {}
    for filename, attribute in _FILES.items():
        try:
            values[attribute] = read_uint_from_file(
                fs.path("sys", "kernel", "random", filename)
            )
        except FileNotFoundError:
            continue
    return KernelRandom(**values)