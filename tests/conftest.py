from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence
import sys

import pytest
from pypdf import PdfWriter

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pdfrenderx.backends.base import STATE_STOP  # noqa: E402
from pdfrenderx.exceptions import MergeFailedError  # noqa: E402
from pdfrenderx.paper import PrintSettings  # noqa: E402
from pdfrenderx.settings import RenderSettings  # noqa: E402


class FakeGateway:
    """Rendering engine double that writes page files of scripted sizes.

    Completion is delivered on a later loop tick, like a real engine.
    With ``page_lengths`` set, every print is treated as a single page
    and pages beyond the list come out empty; otherwise each print
    writes ``whole_document``.
    """

    def __init__(
        self,
        page_lengths: Optional[Sequence[int]] = None,
        *,
        whole_document: Optional[bytes] = b"%PDF-1.4 whole document",
        ready_after: int = 0,
        missing_pages: Iterable[int] = (),
        progress: Sequence[tuple[int, int]] = ((1, 2), (2, 2)),
    ) -> None:
        self.page_lengths = list(page_lengths) if page_lengths is not None else None
        self.whole_document = whole_document
        self.ready_after = ready_after
        self.ready_checks = 0
        self.missing_pages = set(missing_pages)
        self.progress = list(progress)
        self.configured: List[PrintSettings] = []
        self.printed: List[PrintSettings] = []

    @property
    def printed_pages(self) -> List[int]:
        return [settings.page_range[0] for settings in self.printed if settings.page_range]

    def is_document_ready(self) -> bool:
        self.ready_checks += 1
        return self.ready_checks > self.ready_after

    def configure_print(self, settings: PrintSettings) -> None:
        self.configured.append(settings)

    def print(self, settings: PrintSettings, listener) -> None:
        self.printed.append(settings)
        asyncio.get_running_loop().call_soon(self._complete, settings, listener)

    def _complete(self, settings: PrintSettings, listener) -> None:
        for current, maximum in self.progress:
            listener.on_progress(current, maximum)
        if self.page_lengths is not None:
            page = settings.page_range[0]
            if page not in self.missing_pages:
                length = self.page_lengths[page - 1] if page <= len(self.page_lengths) else 0
                Path(settings.output_file).write_bytes(b"x" * length)
        elif self.whole_document is not None:
            Path(settings.output_file).write_bytes(self.whole_document)
        listener.on_state_change(STATE_STOP)


class RecordingCombiner:
    """Combiner double that concatenates its inputs, or fails on request."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: List[tuple[List[str], str]] = []
        self.inputs_existed: List[bool] = []

    def combine(self, inputs: Sequence[str], output: str) -> None:
        self.calls.append((list(inputs), output))
        self.inputs_existed.append(all(Path(path).exists() for path in inputs))
        if self.fail:
            raise MergeFailedError("Combining pages failed: boom", diagnostic="boom")
        Path(output).write_bytes(b"".join(Path(path).read_bytes() for path in inputs))


@pytest.fixture()
def fast_settings(tmp_path: Path) -> RenderSettings:
    work_dir = tmp_path / "work"
    work_dir.mkdir()
    return RenderSettings(
        ready_poll_interval=0.001,
        complete_poll_interval=0.001,
        temp_dir=str(work_dir),
    )


@pytest.fixture()
def fake_gateway() -> Callable[..., FakeGateway]:
    return FakeGateway


@pytest.fixture()
def recording_combiner() -> RecordingCombiner:
    return RecordingCombiner()


@pytest.fixture()
def failing_combiner() -> RecordingCombiner:
    return RecordingCombiner(fail=True)


@pytest.fixture()
def pdf_factory(tmp_path: Path) -> Callable[[str, int], Path]:
    def _create(filename: str, pages: int = 1) -> Path:
        path = tmp_path / filename
        writer = PdfWriter()
        for _ in range(pages):
            writer.add_blank_page(width=72, height=72)
        with path.open("wb") as handle:
            writer.write(handle)
        return path

    return _create


@pytest.fixture()
def page_files(tmp_path: Path) -> Callable[[int], List[Path]]:
    def _create(count: int, base: str = "render.pdf") -> List[Path]:
        paths = []
        for page in range(1, count + 1):
            path = tmp_path / f"{base}-page{page:05d}"
            path.write_bytes(f"page {page};".encode())
            paths.append(path)
        return paths

    return _create


class FakeSessionGateway(FakeGateway):
    """Stands in for PlaywrightGateway, including its async context."""

    instances: List["FakeSessionGateway"] = []

    def __init__(self, *, debug: bool = False) -> None:
        super().__init__()
        self.debug = debug
        self.loaded: List[str] = []
        self.closed = False
        FakeSessionGateway.instances.append(self)

    async def __aenter__(self) -> "FakeSessionGateway":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.closed = True

    def load(self, source: str) -> None:
        self.loaded.append(source)


@pytest.fixture()
def session_gateway() -> Callable[..., FakeSessionGateway]:
    FakeSessionGateway.instances = []
    return FakeSessionGateway
