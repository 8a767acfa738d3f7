"""
Type definitions and dataclasses for pdfrenderx.

This module defines data structures shared by the scheduler, the merger
and the caller-facing event stream.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .exceptions import PDFRenderXException


@dataclass(frozen=True)
class Margins:
    """Page margins in millimetres."""

    top: float = 0.0
    bottom: float = 0.0
    left: float = 0.0
    right: float = 0.0


@dataclass(frozen=True)
class ConversionRequest:
    """
    Everything the caller asks of one conversion.

    Attributes:
        input_path: Path or URL of the document to render
        output_path: Where the finished PDF must end up
        page_size: Named paper size, used when no explicit size is given
        page_width_mm: Explicit paper width; wins over ``page_size`` when > 0
        page_height_mm: Explicit paper height; wins over ``page_size`` when > 0
        margins: Page margins
        landscape: Print in landscape orientation
        first_page: First page to print (1-based), 0 for the whole document
        last_page: Last page to print; ``None`` runs to the end
        reduce_memory_use: Render one page at a time and merge afterwards
        report_memory_usage: Log timings and memory use
        debug: Forward engine console output and keep artifacts on failure
    """
    input_path: str
    output_path: str
    page_size: str = "a4"
    page_width_mm: float = 0.0
    page_height_mm: float = 0.0
    margins: Margins = field(default_factory=Margins)
    landscape: bool = False
    first_page: int = 0
    last_page: Optional[int] = None
    reduce_memory_use: bool = False
    report_memory_usage: bool = False
    debug: bool = False

    def page_range(self) -> Optional[Tuple[int, Optional[int]]]:
        """Return the normalized ``(first, last)`` range, or ``None``."""
        if self.first_page <= 0:
            return None
        last = self.last_page
        if last is not None and last < self.first_page:
            last = self.first_page
        return self.first_page, last

    @property
    def keep_artifacts_on_failure(self) -> bool:
        return self.report_memory_usage or self.debug


@dataclass(frozen=True)
class PageArtifact:
    """One rendered page written to its own file."""

    page: int
    path: str
    length: int


@dataclass(frozen=True)
class MergeJob:
    """Ordered page artifacts waiting to be combined into ``output_path``."""

    artifact_paths: Tuple[str, ...]
    output_path: str

    @classmethod
    def from_artifacts(cls, artifacts: List[PageArtifact], output_path: str) -> "MergeJob":
        # zero-padded names make path order equal page order
        return cls(tuple(sorted(artifact.path for artifact in artifacts)), output_path)


@dataclass(frozen=True)
class RenderStatus:
    """Payload of the status-changed event."""

    percentage: int
    status_label: str


@dataclass(frozen=True)
class ConversionOutcome:
    """
    Result of a conversion.

    Attributes:
        success: Whether the conversion produced the output file
        output_path: Final output path on success
        error: The typed error on failure
        pages: Number of pages merged in reduce-memory mode, else 0
    """
    success: bool
    output_path: Optional[str] = None
    error: Optional[PDFRenderXException] = None
    pages: int = 0

    @classmethod
    def succeeded(cls, output_path: str, pages: int = 0) -> "ConversionOutcome":
        return cls(success=True, output_path=output_path, pages=pages)

    @classmethod
    def failed(cls, error: PDFRenderXException) -> "ConversionOutcome":
        return cls(success=False, error=error)

    def __str__(self) -> str:
        """String representation of the outcome."""
        if self.success:
            return f"ConversionOutcome(success=True, output='{self.output_path}')"
        else:
            return f"ConversionOutcome(success=False, error='{self.error}')"
