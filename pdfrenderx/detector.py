"""End-of-document detection from the sizes of single-page renders.

The engine does not report a page count up front and keeps emitting
something for page indexes past the end of the document: either a
zero-byte file or a tiny empty page of a fixed size. Five consecutive
small pages with the same byte length mark the end of the document.

A document whose last five pages are near-blank and identical in size
will be cut short by this rule.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

SMALL_PAGE_THRESHOLD = 850
RUN_LIMIT = 4


@dataclass(frozen=True)
class DetectorState:
    previous_length: int = 0
    run_count: int = 0


@dataclass(frozen=True)
class Verdict:
    """Decision for one observed page.

    Attributes:
        stop: Whether the document has ended
        delete_pages: Pages whose artifacts must be discarded, ascending
    """

    stop: bool
    delete_pages: Tuple[int, ...] = ()


CONTINUE = Verdict(stop=False)


def observe(
    state: DetectorState,
    page: int,
    length: int,
    *,
    threshold: int = SMALL_PAGE_THRESHOLD,
    run_limit: int = RUN_LIMIT,
) -> Tuple[DetectorState, Verdict]:
    """Advance the detector by one page of ``length`` bytes."""

    if length == 0:
        return state, Verdict(stop=True, delete_pages=(page,))

    if length < threshold and length == state.previous_length:
        run_count = state.run_count + 1
        next_state = DetectorState(previous_length=length, run_count=run_count)
        if run_count < run_limit:
            return next_state, CONTINUE
        return next_state, Verdict(
            stop=True,
            delete_pages=tuple(range(page - run_count, page + 1)),
        )

    return DetectorState(previous_length=length, run_count=0), CONTINUE


class EndOfDocumentDetector:
    """Stateful wrapper feeding pages through :func:`observe` in order."""

    def __init__(self, threshold: int = SMALL_PAGE_THRESHOLD, run_limit: int = RUN_LIMIT) -> None:
        self.threshold = threshold
        self.run_limit = run_limit
        self.state = DetectorState()

    def observe(self, page: int, length: int) -> Verdict:
        self.state, verdict = observe(
            self.state,
            page,
            length,
            threshold=self.threshold,
            run_limit=self.run_limit,
        )
        return verdict

    def reset(self) -> None:
        self.state = DetectorState()


__all__ = [
    "SMALL_PAGE_THRESHOLD",
    "RUN_LIMIT",
    "DetectorState",
    "Verdict",
    "observe",
    "EndOfDocumentDetector",
]
