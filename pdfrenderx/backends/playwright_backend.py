"""Playwright (headless Chromium) backend implementation for pdfrenderx."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from ..exceptions import RenderFailedError
from ..paper import PrintSettings
from .base import STATE_STOP, ProgressListener, RenderEngineGateway

LOGGER = logging.getLogger("pdfrenderx.backends.playwright")

# Big enough for a 16x11 big-book page at 120dpi; images outside the
# imaginary window sometimes never load.
DEFAULT_VIEWPORT = {"width": 1920, "height": 1320}

_PAST_END_MARKERS = ("page range", "no pages to print")


def to_uri(source: str) -> str:
    """Return ``source`` as a URL, turning plain paths into ``file://`` URIs."""

    if urlparse(source).scheme in {"http", "https", "file", "data", "about"}:
        return source
    return Path(source).expanduser().resolve().as_uri()


def _mm(value: float) -> str:
    return f"{value:g}mm"


def pdf_options(settings: PrintSettings) -> Dict[str, Any]:
    """Translate :class:`PrintSettings` into ``page.pdf`` keyword arguments."""

    margins = settings.margins
    options: Dict[str, Any] = {
        "path": settings.output_file,
        "width": _mm(settings.width_mm),
        "height": _mm(settings.height_mm),
        "landscape": settings.landscape,
        "print_background": settings.print_background,
        "prefer_css_page_size": False,
        "margin": {
            "top": _mm(margins.top),
            "bottom": _mm(margins.bottom),
            "left": _mm(margins.left),
            "right": _mm(margins.right),
        },
    }
    if settings.page_range is not None:
        start, end = settings.page_range
        options["page_ranges"] = f"{start}-{end}" if end is not None else f"{start}-"
    return options


class PlaywrightGateway(RenderEngineGateway):
    """Drive a headless Chromium page through Playwright's async API.

    Must be used from the event loop that entered it::

        async with PlaywrightGateway() as gateway:
            gateway.load("book.html")
            ...
    """

    def __init__(self, *, debug: bool = False, viewport: Optional[Dict[str, int]] = None) -> None:
        self.debug = debug
        self.viewport = viewport or dict(DEFAULT_VIEWPORT)
        self._playwright: Any = None
        self._browser: Any = None
        self._page: Any = None
        self._ready = False
        self._load_error: Optional[BaseException] = None
        self._settings: Optional[PrintSettings] = None
        self._tasks: set[asyncio.Task] = set()

    async def __aenter__(self) -> "PlaywrightGateway":
        try:
            await self.start()
        except BaseException:
            await self.close()
            raise
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def start(self) -> None:
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=True)
        self._page = await self._browser.new_page(viewport=self.viewport)
        if self.debug:
            self._page.on("console", self._on_console)

    async def close(self) -> None:
        pending = list(self._tasks)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

    def _on_console(self, message: Any) -> None:
        LOGGER.info("[console] %s", message.text)

    def _spawn(self, coroutine: Any) -> None:
        task = asyncio.ensure_future(coroutine)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def load(self, source: str) -> None:
        """Start navigating to ``source``; poll :meth:`is_document_ready` for completion."""
        if self._page is None:
            raise RuntimeError("PlaywrightGateway.start() must be awaited before load()")
        self._ready = False
        self._load_error = None
        uri = to_uri(source)
        LOGGER.debug("Loading %s", uri)
        self._spawn(self._navigate(uri))

    async def _navigate(self, uri: str) -> None:
        try:
            await self._page.goto(uri, wait_until="load")
        except Exception as exc:
            self._load_error = exc
            return
        self._ready = True

    def is_document_ready(self) -> bool:
        if self._load_error is not None:
            raise RenderFailedError(f"Unable to load document: {self._load_error}")
        return self._ready

    def configure_print(self, settings: PrintSettings) -> None:
        self._settings = settings

    def print(self, settings: PrintSettings, listener: ProgressListener) -> None:
        self._settings = settings
        self._spawn(self._print(settings, listener))

    async def _print(self, settings: PrintSettings, listener: ProgressListener) -> None:
        listener.on_progress(0, 1)
        try:
            await self._print_pdf(settings)
        except Exception as exc:
            LOGGER.error("Printing to %s failed: %s", settings.output_file, exc)
        else:
            listener.on_progress(1, 1)
        finally:
            listener.on_state_change(STATE_STOP)

    async def _print_pdf(self, settings: PrintSettings) -> None:
        try:
            await self._page.pdf(**pdf_options(settings))
        except PlaywrightError as exc:
            if not any(marker in str(exc).lower() for marker in _PAST_END_MARKERS):
                raise
            # a page past the end still yields an (empty) file
            LOGGER.debug("Page range %s is past the end of the document", settings.page_range)
            Path(settings.output_file).write_bytes(b"")


__all__ = ["PlaywrightGateway", "pdf_options", "to_uri", "DEFAULT_VIEWPORT"]
