"""Page render scheduling: drive the engine one print at a time.

Everything here runs on the event loop that owns the rendering engine.
The scheduler never blocks on the engine; it polls two conditions
("document ready" before the first print and "print complete" after
each one) with ``asyncio.sleep`` between checks. Session fields are
re-read on every tick because the engine flips them from its callbacks.
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

from .backends.base import STATE_STOP, RenderEngineGateway
from .combiners import create_combiner
from .detector import EndOfDocumentDetector
from .exceptions import OutputMoveFailedError, PDFRenderXException, RenderFailedError
from .memory import reclaim_memory, report_memory
from .merger import PageMerger
from .paper import PrintSettings, build_print_settings
from .progress import ProgressReporter
from .settings import RenderSettings
from .types import ConversionOutcome, ConversionRequest, MergeJob, PageArtifact
from .utils import artifact_path, format_file_size, new_temp_base, remove_file, remove_files

LOGGER = logging.getLogger("pdfrenderx.scheduler")


@dataclass
class RenderSession:
    """Mutable state of one conversion, owned by the scheduler."""

    temp_base: str
    page: int = 0
    current_file: str = ""
    artifacts: List[PageArtifact] = field(default_factory=list)
    started_at: float = field(default_factory=time.monotonic)
    print_started_at: float = 0.0
    render_complete: bool = False
    finished: bool = False
    failed: bool = False

    def artifact_files(self) -> List[str]:
        files = [artifact.path for artifact in self.artifacts]
        if self.current_file and self.current_file not in files:
            files.append(self.current_file)
        return files


class _PrintListener:
    """Forwards engine callbacks for a single print into the session."""

    def __init__(self, session: RenderSession, reporter: ProgressReporter) -> None:
        self.session = session
        self.reporter = reporter

    def on_progress(self, current: int, maximum: int) -> None:
        self.reporter.on_progress(current, maximum)

    def on_state_change(self, flags: int) -> None:
        if flags & STATE_STOP:
            self.session.render_complete = True


def _missing_output(path: str) -> RenderFailedError:
    return RenderFailedError(
        f"Unable to create the PDF file ({path}).\n\n"
        "Details: the rendering engine did not produce the expected document."
    )


class PageRenderScheduler:
    """Render a loaded document to PDF, whole or one page at a time.

    Args:
        gateway: The rendering engine, already asked to load the document.
        settings: Poll intervals, combiner choice and temp directory.
        reporter: Receives status and finished events.
        merger: Combines page artifacts; built from ``settings`` if omitted.
        detector_factory: Creates a fresh end-of-document detector per run.
        reclaim: Called between pages to hand freed memory back to the OS.
    """

    def __init__(
        self,
        gateway: RenderEngineGateway,
        *,
        settings: Optional[RenderSettings] = None,
        reporter: Optional[ProgressReporter] = None,
        merger: Optional[PageMerger] = None,
        detector_factory: Callable[[], EndOfDocumentDetector] = EndOfDocumentDetector,
        reclaim: Callable[[], None] = reclaim_memory,
    ) -> None:
        self.gateway = gateway
        self.settings = settings or RenderSettings()
        self.reporter = reporter or ProgressReporter()
        self.merger = merger or PageMerger(create_combiner(self.settings), self.reporter)
        self.detector_factory = detector_factory
        self.reclaim = reclaim
        self.session: Optional[RenderSession] = None

    async def run(self, request: ConversionRequest) -> ConversionOutcome:
        """Convert the loaded document as described by ``request``.

        Package errors become a failed :class:`ConversionOutcome`; the
        finished event fires either way.
        """
        try:
            output, pages = await self._run(request)
        except PDFRenderXException as exc:
            LOGGER.error("Conversion of %s failed: %s", request.input_path, exc)
            outcome = ConversionOutcome.failed(exc)
        else:
            outcome = ConversionOutcome.succeeded(str(output), pages=pages)
        self.reporter.finished(outcome)
        return outcome

    async def _run(self, request: ConversionRequest) -> Tuple[Path, int]:
        output_dir = Path(request.output_path).parent
        remove_file(request.output_path)
        output_dir.mkdir(parents=True, exist_ok=True)

        # os.replace needs the whole-document file on the output filesystem
        temp_base = new_temp_base(self.settings.temp_dir if request.reduce_memory_use else output_dir)
        base_settings = build_print_settings(request, temp_base)
        self.session = session = RenderSession(temp_base=temp_base)

        await self._wait_until(self.gateway.is_document_ready, self.settings.ready_poll_interval)
        LOGGER.debug("Document %s is ready", request.input_path)

        if request.reduce_memory_use:
            return await self._render_pages(request, session, base_settings)
        return await self._render_whole(request, session, base_settings)

    async def _wait_until(self, condition: Callable[[], bool], interval: float) -> None:
        while not condition():
            await asyncio.sleep(interval)

    async def _print(self, session: RenderSession, settings: PrintSettings) -> None:
        session.render_complete = False
        session.print_started_at = time.monotonic()
        self.gateway.configure_print(settings)
        self.gateway.print(settings, _PrintListener(session, self.reporter))
        await self._wait_until(lambda: session.render_complete, self.settings.complete_poll_interval)

    def _report(self, request: ConversionRequest, message: str, started_at: float) -> None:
        if request.report_memory_usage:
            LOGGER.info("%s took %.2fs", message, time.monotonic() - started_at)
            report_memory(f"Memory use after {message.lower()}")

    async def _render_whole(
        self,
        request: ConversionRequest,
        session: RenderSession,
        settings: PrintSettings,
    ) -> Tuple[Path, int]:
        session.current_file = settings.output_file
        self.reporter.begin_print()
        await self._print(session, settings)
        self._report(request, "Making the PDF", session.print_started_at)

        if not Path(settings.output_file).exists():
            session.failed = True
            raise _missing_output(settings.output_file)

        try:
            os.replace(settings.output_file, request.output_path)
        except OSError as exc:
            session.failed = True
            if not request.keep_artifacts_on_failure:
                remove_file(settings.output_file)
            raise OutputMoveFailedError(
                f"Tried to move the file {settings.output_file} to {request.output_path}, "
                "but the operating system said that one of these files was locked. "
                f"Please try again.\n\nDetails: {exc}"
            ) from exc

        session.finished = True
        LOGGER.info("Created %s", request.output_path)
        return Path(request.output_path), 0

    async def _render_pages(
        self,
        request: ConversionRequest,
        session: RenderSession,
        base_settings: PrintSettings,
    ) -> Tuple[Path, int]:
        first, last = request.page_range() or (1, None)
        detector = self.detector_factory()
        pages_started_at = time.monotonic()
        session.page = first

        try:
            while True:
                page = session.page
                session.current_file = artifact_path(session.temp_base, page)
                self.reporter.page_started(page)
                await self._print(session, base_settings.for_page(page, session.current_file))
                self.reclaim()
                self._report(request, f"Making page {page}", session.print_started_at)

                current = Path(session.current_file)
                if not current.exists():
                    raise _missing_output(session.current_file)
                length = current.stat().st_size
                LOGGER.debug("Page %d rendered to %s (%s)", page, current, format_file_size(length))
                session.artifacts.append(PageArtifact(page=page, path=str(current), length=length))

                verdict = detector.observe(page, length)
                if verdict.stop:
                    self._discard(session, verdict.delete_pages)
                    break
                if last is not None and page >= last:
                    break
                session.page = page + 1
        except Exception:
            session.failed = True
            files = session.artifact_files()
            if request.keep_artifacts_on_failure:
                LOGGER.warning("Keeping %d page file(s) under %s for inspection", len(files), session.temp_base)
            else:
                remove_files(files)
            raise

        if not session.artifacts:
            session.failed = True
            raise RenderFailedError(
                f"The rendering engine produced no pages for {request.input_path}."
            )

        job = MergeJob.from_artifacts(session.artifacts, request.output_path)
        LOGGER.info("Rendered %d page(s); combining into %s", len(job.artifact_paths), job.output_path)
        try:
            output = self.merger.run(job)
        except PDFRenderXException:
            session.failed = True
            raise
        self._report(request, "Making all the PDF pages", pages_started_at)

        session.finished = True
        return output, len(job.artifact_paths)

    def _discard(self, session: RenderSession, pages: Iterable[int]) -> None:
        """Delete the artifacts of trailing phantom ``pages``."""
        doomed = set(pages)
        kept: List[PageArtifact] = []
        for artifact in session.artifacts:
            if artifact.page in doomed:
                remove_file(artifact.path)
            else:
                kept.append(artifact)
        session.artifacts = kept
        LOGGER.debug("Document ended; discarded trailing page(s) %s", sorted(doomed))


__all__ = ["PageRenderScheduler", "RenderSession"]
