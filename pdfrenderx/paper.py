"""Paper sizes and the print settings handed to the rendering engine."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Tuple

from .exceptions import ConfigurationError
from .types import ConversionRequest, Margins


@dataclass(frozen=True)
class PaperSize:
    name: str
    width_mm: float
    height_mm: float


PAPER_SIZES: Dict[str, PaperSize] = {
    size.name: size
    for size in (
        PaperSize("a3", 297, 420),
        PaperSize("a4", 210, 297),
        PaperSize("a5", 148, 210),
        PaperSize("a6", 105, 148),
        PaperSize("b3", 353, 500),
        PaperSize("b4", 250, 353),
        PaperSize("b5", 176, 250),
        PaperSize("b6", 125, 176),
        PaperSize("letter", 215.9, 279.4),
        PaperSize("halfletter", 139.7, 215.9),
        PaperSize("quarterletter", 107.95, 139.7),
        PaperSize("legal", 215.9, 355.6),
        PaperSize("halflegal", 177.8, 215.9),
        PaperSize("device16x9", 100, 1600 / 9),
    )
}


def get_paper_size(name: str) -> PaperSize:
    """Look up a named paper size, ignoring case."""

    try:
        return PAPER_SIZES[name.strip().lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown paper size '{name}'. Known sizes: {', '.join(PAPER_SIZES)}. "
            "Consider using explicit page width and height instead."
        ) from None


@dataclass(frozen=True)
class PrintSettings:
    """
    Engine-neutral print settings.

    All lengths are millimetres. ``page_range`` is 1-based and inclusive;
    an end of ``None`` runs to the end of the document.
    """

    output_file: str
    width_mm: float
    height_mm: float
    margins: Margins = field(default_factory=Margins)
    landscape: bool = False
    page_range: Optional[Tuple[int, Optional[int]]] = None
    print_background: bool = True

    def for_page(self, page: int, output_file: str) -> "PrintSettings":
        """Return settings restricted to exactly ``page``, written to ``output_file``."""
        return replace(self, page_range=(page, page), output_file=output_file)


def build_print_settings(request: ConversionRequest, output_file: str) -> PrintSettings:
    """Map a :class:`ConversionRequest` onto :class:`PrintSettings`.

    Raises:
        ConfigurationError: For unknown named sizes or negative geometry.
    """

    if request.page_width_mm > 0 and request.page_height_mm > 0:
        width, height = request.page_width_mm, request.page_height_mm
    else:
        size = get_paper_size(request.page_size)
        width, height = size.width_mm, size.height_mm

    margins = request.margins
    if min(margins.top, margins.bottom, margins.left, margins.right) < 0:
        raise ConfigurationError(f"Margins must not be negative: {margins}")

    return PrintSettings(
        output_file=output_file,
        width_mm=width,
        height_mm=height,
        margins=margins,
        landscape=request.landscape,
        page_range=request.page_range(),
    )


__all__ = ["PaperSize", "PAPER_SIZES", "PrintSettings", "get_paper_size", "build_print_settings"]
