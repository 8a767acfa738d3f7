"""Combiner protocol used by :class:`pdfrenderx.merger.PageMerger`."""

from __future__ import annotations

from typing import Protocol, Sequence


class Combiner(Protocol):
    """Merges ordered single-page PDFs into one document."""

    def combine(self, inputs: Sequence[str], output: str) -> None:
        """Write ``inputs`` in order into ``output``.

        Raises:
            MergeFailedError: When the merge did not succeed.
        """
