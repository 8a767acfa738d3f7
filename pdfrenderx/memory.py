"""Memory reclamation and reporting between rendered pages."""

from __future__ import annotations

import ctypes
import ctypes.util
import gc
import logging
import os

import psutil

from .utils import format_file_size

LOGGER = logging.getLogger("pdfrenderx.memory")

_libc = None


def _load_libc():
    global _libc
    if _libc is None:
        name = ctypes.util.find_library("c")
        _libc = ctypes.CDLL(name) if name else False
    return _libc


def reclaim_memory() -> None:
    """Collect garbage and ask the C allocator to return freed pages to the OS."""

    gc.collect()
    libc = _load_libc()
    trim = getattr(libc, "malloc_trim", None) if libc else None
    if trim is not None:
        trim(0)


def memory_usage() -> int:
    """Return the resident set size of this process in bytes."""

    return psutil.Process(os.getpid()).memory_info().rss


def report_memory(label: str) -> int:
    rss = memory_usage()
    LOGGER.info("%s: %s", label, format_file_size(rss))
    return rss


__all__ = ["reclaim_memory", "memory_usage", "report_memory"]
