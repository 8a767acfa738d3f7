"""High-level entry points wiring the Playwright backend to the scheduler."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from playwright.async_api import Error as PlaywrightError

from .backends.playwright_backend import PlaywrightGateway
from .exceptions import RenderFailedError
from .progress import FinishedListener, ProgressReporter, StatusListener
from .scheduler import PageRenderScheduler
from .settings import RenderSettings
from .types import ConversionOutcome, ConversionRequest

LOGGER = logging.getLogger("pdfrenderx.converter")


async def convert(
    request: ConversionRequest,
    *,
    settings: Optional[RenderSettings] = None,
    on_status: Optional[StatusListener] = None,
    on_finished: Optional[FinishedListener] = None,
) -> ConversionOutcome:
    """Load ``request.input_path`` in headless Chromium and print it to PDF.

    A browser that cannot be started (or shut down) is reported as a
    failed outcome with :class:`RenderFailedError`.
    """

    settings = settings or RenderSettings.from_env()
    reporter = ProgressReporter(on_status=on_status, on_finished=on_finished)
    outcome: Optional[ConversionOutcome] = None
    try:
        async with PlaywrightGateway(debug=request.debug) as gateway:
            gateway.load(request.input_path)
            scheduler = PageRenderScheduler(gateway, settings=settings, reporter=reporter)
            outcome = await scheduler.run(request)
    except PlaywrightError as exc:
        if outcome is not None:
            # the conversion already finished; only shutting the browser down failed
            LOGGER.warning("Closing the browser failed: %s", exc)
            return outcome
        LOGGER.error("Rendering engine failed: %s", exc)
        outcome = ConversionOutcome.failed(
            RenderFailedError(f"The rendering engine could not be started.\n\nDetails: {exc}")
        )
        reporter.finished(outcome)
    return outcome


def convert_document(
    request: ConversionRequest,
    *,
    settings: Optional[RenderSettings] = None,
    on_status: Optional[StatusListener] = None,
    on_finished: Optional[FinishedListener] = None,
) -> ConversionOutcome:
    """Blocking wrapper around :func:`convert` that owns its own event loop."""

    return asyncio.run(
        convert(request, settings=settings, on_status=on_status, on_finished=on_finished)
    )


__all__ = ["convert", "convert_document"]
