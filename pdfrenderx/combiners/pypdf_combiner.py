"""In-process combiner built on ``pypdf``.

Holds every page in memory while writing, so it is only meant for hosts
without Ghostscript.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from pypdf import PdfWriter
from pypdf.errors import PdfReadError

from ..exceptions import MergeFailedError
from .base import Combiner

LOGGER = logging.getLogger("pdfrenderx.combiners.pypdf")


class PypdfCombiner(Combiner):
    """Combiner implementation that uses ``pypdf`` under the hood."""

    def combine(self, inputs: Sequence[str], output: str) -> None:
        if not inputs:
            raise MergeFailedError("No page files to combine.")

        writer = PdfWriter()
        for path in inputs:
            LOGGER.debug("Appending %s", path)
            try:
                writer.append(path)
            except (PdfReadError, OSError) as exc:
                raise MergeFailedError(
                    f"Combining pages failed: cannot read {path}", diagnostic=str(exc)
                ) from exc

        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with output_path.open("wb") as handle:
                writer.write(handle)
        except OSError as exc:
            raise MergeFailedError(
                f"Combining pages failed: cannot write {output}", diagnostic=str(exc)
            ) from exc
        LOGGER.info("Combined %d page file(s) into %s", len(inputs), output)
