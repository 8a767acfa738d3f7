"""Utility functions shared by the scheduler and the merger."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, Optional, Union

PathLike = Union[str, Path]

LOGGER = logging.getLogger("pdfrenderx.utils")

PAGE_NUMBER_WIDTH = 5


def artifact_path(temp_base: PathLike, page: int) -> str:
    """Return the artifact path of ``page`` for ``temp_base``.

    Page numbers are zero padded so that sorting paths sorts pages.
    """
    return f"{temp_base}-page{page:0{PAGE_NUMBER_WIDTH}d}"


def new_temp_base(directory: Optional[PathLike] = None) -> str:
    """Reserve a unique ``.pdf`` path in ``directory`` without creating it."""

    handle, name = tempfile.mkstemp(suffix=".pdf", dir=directory)
    os.close(handle)
    os.unlink(name)
    return name


def remove_file(path: PathLike) -> bool:
    """Delete ``path`` if it exists. Returns ``True`` when a file was removed."""

    try:
        Path(path).unlink()
    except FileNotFoundError:
        return False
    except OSError as exc:
        LOGGER.warning("Could not delete %s: %s", path, exc)
        return False
    return True


def remove_files(paths: Iterable[PathLike]) -> int:
    return sum(1 for path in paths if remove_file(path))


def format_file_size(size_bytes: float) -> str:
    """
    Format file size in human-readable format.

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string (e.g., "1.5 MB", "500 KB")
    """
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size_bytes < 1024.0:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.1f} PB"
