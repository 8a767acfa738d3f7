"""Combine per-page artifacts into the final PDF and clean up after them."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from .combiners import Combiner
from .exceptions import MergeFailedError
from .progress import ProgressReporter
from .types import MergeJob
from .utils import PathLike, remove_files

LOGGER = logging.getLogger("pdfrenderx.merger")


class PageMerger:
    """Run a :class:`Combiner` over ordered page artifacts.

    The artifacts are deleted once the combiner has been tried, whether
    or not it succeeded.
    """

    def __init__(self, combiner: Combiner, reporter: Optional[ProgressReporter] = None) -> None:
        self.combiner = combiner
        self.reporter = reporter

    def merge(self, artifact_paths: Sequence[PathLike], output_path: PathLike) -> Path:
        """Merge ``artifact_paths`` (already in page order) into ``output_path``.

        Raises:
            MergeFailedError: If the combiner fails, times out or is missing.
        """

        inputs = [str(path) for path in artifact_paths]
        output = Path(output_path)
        if not inputs:
            raise MergeFailedError("No page files to combine.")

        if self.reporter is not None:
            self.reporter.combining()

        LOGGER.debug("Combining %d page file(s) into %s", len(inputs), output)
        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            self.combiner.combine(inputs, str(output))
        finally:
            removed = remove_files(inputs)
            LOGGER.debug("Removed %d page file(s)", removed)

        if not output.exists():
            raise MergeFailedError(f"Combining pages did not produce {output}")
        return output

    def run(self, job: MergeJob) -> Path:
        return self.merge(job.artifact_paths, job.output_path)


__all__ = ["PageMerger"]
