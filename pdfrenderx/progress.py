"""Normalize engine and scheduler progress into caller-facing events."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from .types import ConversionOutcome, RenderStatus

LOGGER = logging.getLogger("pdfrenderx.progress")

StatusListener = Callable[[RenderStatus], None]
FinishedListener = Callable[[ConversionOutcome], None]

LOADING_STATUS = "Loading Html..."
PRINTING_STATUS = "Making PDF.."
COMBINING_STATUS = "Combining pages into final PDF file..."


def page_status(page: int) -> str:
    return f"Making Page {page} of PDF..."


class ProgressReporter:
    """Fan out status-changed and finished events to subscribers.

    Percentages reported through :meth:`on_progress` never decrease
    within one print operation; :meth:`begin_print` and
    :meth:`page_started` start a new operation.
    """

    def __init__(
        self,
        on_status: Optional[StatusListener] = None,
        on_finished: Optional[FinishedListener] = None,
    ) -> None:
        self._status_listeners: List[StatusListener] = []
        self._finished_listeners: List[FinishedListener] = []
        if on_status is not None:
            self._status_listeners.append(on_status)
        if on_finished is not None:
            self._finished_listeners.append(on_finished)
        self.status = LOADING_STATUS
        self.percentage = 0

    def subscribe_status(self, listener: StatusListener) -> None:
        self._status_listeners.append(listener)

    def subscribe_finished(self, listener: FinishedListener) -> None:
        self._finished_listeners.append(listener)

    def _emit(self, percentage: int) -> None:
        self.percentage = percentage
        event = RenderStatus(percentage=percentage, status_label=self.status)
        for listener in list(self._status_listeners):
            listener(event)

    def begin_print(self, status: str = PRINTING_STATUS) -> None:
        self.status = status
        self._emit(0)

    def page_started(self, page: int) -> None:
        self.begin_print(page_status(page))

    def on_progress(self, current: int, maximum: int) -> None:
        if maximum == 0:
            return
        if maximum < current:
            # the engine sometimes reports a max below current
            maximum = current
        percentage = min(100, max(0, round(100 * current / maximum)))
        if percentage < self.percentage:
            return
        self._emit(percentage)

    def combining(self) -> None:
        self.status = COMBINING_STATUS
        self._emit(0)

    def finished(self, outcome: ConversionOutcome) -> None:
        LOGGER.debug("Conversion finished: %s", outcome)
        for listener in list(self._finished_listeners):
            listener(outcome)


__all__ = [
    "ProgressReporter",
    "StatusListener",
    "FinishedListener",
    "page_status",
    "LOADING_STATUS",
    "PRINTING_STATUS",
    "COMBINING_STATUS",
]
