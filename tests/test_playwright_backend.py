from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import pytest
from playwright.async_api import Error as PlaywrightError

from pdfrenderx.backends import STATE_STOP, PlaywrightGateway
from pdfrenderx.backends.playwright_backend import DEFAULT_VIEWPORT, pdf_options, to_uri
from pdfrenderx.exceptions import RenderFailedError
from pdfrenderx.paper import PrintSettings
from pdfrenderx.types import Margins


class RecordingListener:
    def __init__(self) -> None:
        self.progress = []
        self.states = []

    def on_progress(self, current, maximum):
        self.progress.append((current, maximum))

    def on_state_change(self, flags):
        self.states.append(flags)


class FakePage:
    def __init__(self, error=None, body=b"%PDF-1.4 page"):
        self.error = error
        self.body = body
        self.pdf_calls = []
        self.visited = []

    async def pdf(self, **options):
        self.pdf_calls.append(options)
        if self.error is not None:
            raise self.error
        Path(options["path"]).write_bytes(self.body)

    async def goto(self, uri, wait_until):
        self.visited.append((uri, wait_until))
        if self.error is not None:
            raise self.error


def gateway_with(page: FakePage) -> PlaywrightGateway:
    gateway = PlaywrightGateway()
    gateway._page = page
    return gateway


def test_pdf_options_uses_millimetres_and_page_range() -> None:
    settings = PrintSettings(
        output_file="out.pdf",
        width_mm=148,
        height_mm=210,
        margins=Margins(top=10, bottom=12.5, left=0, right=0),
        landscape=True,
        page_range=(3, 3),
    )

    options = pdf_options(settings)

    assert options["path"] == "out.pdf"
    assert options["width"] == "148mm"
    assert options["height"] == "210mm"
    assert options["margin"] == {"top": "10mm", "bottom": "12.5mm", "left": "0mm", "right": "0mm"}
    assert options["landscape"] is True
    assert options["print_background"] is True
    assert options["page_ranges"] == "3-3"


def test_pdf_options_open_ended_and_whole_document() -> None:
    open_ended = PrintSettings("out.pdf", 210, 297, page_range=(4, None))
    whole = PrintSettings("out.pdf", 210, 297)

    assert pdf_options(open_ended)["page_ranges"] == "4-"
    assert "page_ranges" not in pdf_options(whole)


def test_to_uri(tmp_path) -> None:
    document = tmp_path / "book.html"

    assert to_uri("https://example.com/book.html") == "https://example.com/book.html"
    assert to_uri(str(document)) == document.as_uri()


def test_default_viewport_is_copied() -> None:
    gateway = PlaywrightGateway()
    gateway.viewport["width"] = 10

    assert DEFAULT_VIEWPORT["width"] == 1920


def test_print_writes_file_and_reports_stop(tmp_path) -> None:
    page = FakePage()
    listener = RecordingListener()
    output = tmp_path / "render.pdf-page00001"

    asyncio.run(gateway_with(page)._print(PrintSettings(str(output), 210, 297, page_range=(1, 1)), listener))

    assert output.read_bytes() == b"%PDF-1.4 page"
    assert listener.progress == [(0, 1), (1, 1)]
    assert listener.states == [STATE_STOP]
    assert page.pdf_calls[0]["page_ranges"] == "1-1"


def test_page_past_the_end_yields_empty_file(tmp_path) -> None:
    page = FakePage(error=PlaywrightError("Protocol error (Page.printToPDF): Page range exceeds page count"))
    listener = RecordingListener()
    output = tmp_path / "render.pdf-page00009"

    asyncio.run(gateway_with(page)._print(PrintSettings(str(output), 210, 297, page_range=(9, 9)), listener))

    assert output.exists()
    assert output.stat().st_size == 0
    assert listener.states == [STATE_STOP]


def test_other_print_errors_leave_no_file(tmp_path) -> None:
    page = FakePage(error=PlaywrightError("Target closed"))
    listener = RecordingListener()
    output = tmp_path / "render.pdf"

    asyncio.run(gateway_with(page)._print(PrintSettings(str(output), 210, 297), listener))

    assert not output.exists()
    assert listener.progress == [(0, 1)]
    assert listener.states == [STATE_STOP]


def test_navigation_marks_document_ready() -> None:
    page = FakePage()
    gateway = gateway_with(page)

    assert not gateway.is_document_ready()
    asyncio.run(gateway._navigate("file:///book.html"))

    assert gateway.is_document_ready()
    assert page.visited == [("file:///book.html", "load")]


def test_navigation_error_surfaces_as_render_failure() -> None:
    gateway = gateway_with(FakePage(error=PlaywrightError("net::ERR_FILE_NOT_FOUND")))

    asyncio.run(gateway._navigate("file:///missing.html"))

    with pytest.raises(RenderFailedError, match="ERR_FILE_NOT_FOUND"):
        gateway.is_document_ready()


def test_load_requires_started_gateway() -> None:
    with pytest.raises(RuntimeError):
        PlaywrightGateway().load("book.html")


def test_unexpected_print_error_still_stops(tmp_path, caplog: pytest.LogCaptureFixture) -> None:
    page = FakePage(error=PlaywrightError("Page range exceeds page count"))
    listener = RecordingListener()
    # the stub cannot be written into a directory that does not exist
    output = tmp_path / "gone" / "render.pdf-page00004"

    with caplog.at_level(logging.ERROR, logger="pdfrenderx.backends.playwright"):
        asyncio.run(gateway_with(page)._print(PrintSettings(str(output), 210, 297, page_range=(4, 4)), listener))

    assert not output.exists()
    assert listener.progress == [(0, 1)]
    assert listener.states == [STATE_STOP]
    assert "Printing to" in caplog.text


def test_close_waits_for_cancelled_tasks() -> None:
    started = []

    async def forever():
        started.append(True)
        await asyncio.sleep(3600)

    async def scenario():
        gateway = PlaywrightGateway()
        gateway._spawn(forever())
        await asyncio.sleep(0)
        tasks = list(gateway._tasks)
        await gateway.close()
        return tasks

    tasks = asyncio.run(scenario())

    assert started == [True]
    assert len(tasks) == 1
    assert all(task.cancelled() for task in tasks)
