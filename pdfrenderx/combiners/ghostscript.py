"""Ghostscript combiner: merges page files in a separate process.

Running the merge out of process keeps memory use of large documents
reasonable. The whole file list goes on the command line; modern
systems allow command lines long enough for several hundred pages.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from ..exceptions import MergeFailedError
from .base import Combiner

LOGGER = logging.getLogger("pdfrenderx.combiners.ghostscript")

GHOSTSCRIPT_EXECUTABLES = ("gs", "gswin64c", "gswin32c")
# gs9.16 fails on Windows; 9.21 is known to work.
MIN_WINDOWS_VERSION = 9.21
DEFAULT_TIMEOUT = 3600.0


def _program_files_dirs() -> List[Path]:
    dirs = []
    for variable in ("ProgramFiles", "ProgramW6432", "ProgramFiles(x86)"):
        value = os.environ.get(variable)
        if value:
            path = Path(value.replace(" (x86)", "")) if variable == "ProgramFiles" else Path(value)
            if path not in dirs:
                dirs.append(path)
    return dirs


def _parse_version(name: str) -> Optional[float]:
    if not name.startswith("gs") or len(name) <= 2:
        return None
    try:
        return float(name[2:])
    except ValueError:
        return None


def _search_install_dirs(bases: Iterable[Path]) -> Optional[str]:
    for base in bases:
        gs_root = Path(base) / "gs"
        if not gs_root.is_dir():
            continue
        versions = []
        for version_dir in gs_root.iterdir():
            version = _parse_version(version_dir.name)
            if version is not None and version >= MIN_WINDOWS_VERSION:
                versions.append((version, version_dir))
        for _, version_dir in sorted(versions, reverse=True):
            for program in ("gswin64c.exe", "gswin64.exe", "gswin32c.exe", "gswin32.exe"):
                candidate = version_dir / "bin" / program
                if candidate.is_file():
                    return str(candidate)
    return None


def find_ghostscript(search_dirs: Optional[Iterable[Path]] = None) -> Optional[str]:
    """Locate a Ghostscript executable.

    Looks on ``PATH`` first, then in ``<dir>/gs/gs<version>/bin`` below
    each of ``search_dirs`` (the Program Files folders on Windows).
    Returns ``None`` when nothing suitable is installed.
    """

    for name in GHOSTSCRIPT_EXECUTABLES:
        found = shutil.which(name)
        if found:
            return found

    if search_dirs is None:
        if os.name != "nt":
            return None
        search_dirs = _program_files_dirs()
    return _search_install_dirs(search_dirs)


def _as_text(value: object) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value or "")


def build_ghostscript_command(executable: str, inputs: Sequence[str], output: str) -> List[str]:
    """Construct the Ghostscript merge command for ``inputs`` in order."""

    return [
        executable,
        "-sDEVICE=pdfwrite",
        "-dNOPAUSE",
        "-dBATCH",
        "-dSAFER",
        f"-sOutputFile={output}",
        *inputs,
    ]


class GhostscriptCombiner(Combiner):
    """Combine page files by running Ghostscript's ``pdfwrite`` device."""

    def __init__(self, executable: Optional[str] = None, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.executable = executable
        self.timeout = timeout

    def resolve_executable(self) -> str:
        executable = self.executable or find_ghostscript()
        if not executable:
            raise MergeFailedError(
                "Combining pages failed: Ghostscript could not be found. "
                "Install it or set PDFRENDERX_GHOSTSCRIPT."
            )
        return executable

    def combine(self, inputs: Sequence[str], output: str) -> None:
        if not inputs:
            raise MergeFailedError("No page files to combine.")

        command = build_ghostscript_command(self.resolve_executable(), inputs, output)
        LOGGER.debug("Running Ghostscript command: %s", command)
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            LOGGER.error("Ghostscript timed out after %s seconds", self.timeout)
            raise MergeFailedError(
                f"Combining pages failed: timed out after {self.timeout:g} seconds",
                diagnostic=_as_text(exc.stderr),
            ) from exc
        except OSError as exc:
            LOGGER.error("Failed to execute Ghostscript: %s", exc)
            raise MergeFailedError(
                f"Combining pages failed: {exc}", diagnostic=str(exc)
            ) from exc

        if result.returncode != 0:
            LOGGER.error(
                "Ghostscript failed with code %s: %s", result.returncode, result.stderr
            )
            raise MergeFailedError(
                f"Combining pages failed: {result.stderr.strip()}",
                diagnostic=result.stderr,
            )

        LOGGER.info("Combined %d page file(s) into %s", len(inputs), output)


__all__ = [
    "GhostscriptCombiner",
    "build_ghostscript_command",
    "find_ghostscript",
    "GHOSTSCRIPT_EXECUTABLES",
    "MIN_WINDOWS_VERSION",
]
