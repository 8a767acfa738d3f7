"""
pdfrenderx - Print HTML documents to PDF by driving a headless browser.

Large documents can be rendered one page at a time to keep memory use
bounded; the page files are then combined into a single PDF by
Ghostscript (or pypdf).

Quick Start:
    >>> from pdfrenderx import ConversionRequest, convert_document
    >>> request = ConversionRequest('book.html', 'book.pdf', reduce_memory_use=True)
    >>> outcome = convert_document(request)

Main Classes:
    - PageRenderScheduler: Drives a rendering engine print by print
    - EndOfDocumentDetector: Spots the end of a page-at-a-time render
    - PageMerger: Combines page files and cleans them up
    - ProgressReporter: Status and finished events for callers
    - PlaywrightGateway: Headless Chromium rendering engine

Exceptions:
    - PDFRenderXException: Base exception
    - RenderFailedError: The engine did not produce the expected file
    - OutputMoveFailedError: The output file is locked
    - MergeFailedError: Combining pages failed
    - ConfigurationError: Unknown paper size or invalid settings

For CLI usage, use the 'pdfrenderx' command after installation.
"""

# Core classes
from pdfrenderx.backends import PlaywrightGateway, RenderEngineGateway
from pdfrenderx.converter import convert, convert_document
from pdfrenderx.detector import EndOfDocumentDetector
from pdfrenderx.merger import PageMerger
from pdfrenderx.progress import ProgressReporter
from pdfrenderx.scheduler import PageRenderScheduler
from pdfrenderx.settings import RenderSettings

# Data types
from pdfrenderx.types import (
    ConversionOutcome,
    ConversionRequest,
    Margins,
    MergeJob,
    PageArtifact,
    RenderStatus,
)

# Exceptions
from pdfrenderx.exceptions import (
    PDFRenderXException,
    RenderFailedError,
    OutputMoveFailedError,
    MergeFailedError,
    ConfigurationError,
)

__version__ = "1.0.0"
__author__ = "pdfrenderx Contributors"
__license__ = "MIT"

__all__ = [
    # Main classes
    "PageRenderScheduler",
    "EndOfDocumentDetector",
    "PageMerger",
    "ProgressReporter",
    "PlaywrightGateway",
    "RenderEngineGateway",
    "RenderSettings",
    # Entry points
    "convert",
    "convert_document",
    # Data types
    "ConversionRequest",
    "ConversionOutcome",
    "Margins",
    "MergeJob",
    "PageArtifact",
    "RenderStatus",
    # Exceptions
    "PDFRenderXException",
    "RenderFailedError",
    "OutputMoveFailedError",
    "MergeFailedError",
    "ConfigurationError",
    # Version info
    "__version__",
]
