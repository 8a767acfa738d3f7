"""
Custom exceptions for pdfrenderx.

Every failure aborts the whole conversion. Nothing in this package
retries; recovery is left to the caller.
"""


class PDFRenderXException(Exception):
    """Base exception for all pdfrenderx errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown PDF rendering error occurred."


class RenderFailedError(PDFRenderXException):
    """Raised when the rendering engine did not produce the expected file."""

    @property
    def default_message(self) -> str:
        return "The rendering engine did not produce the expected document."


class OutputMoveFailedError(PDFRenderXException):
    """Raised when the finished PDF cannot be moved to its destination."""

    @property
    def default_message(self) -> str:
        return "The output file is locked by another process. Please try again."


class MergeFailedError(PDFRenderXException):
    """Raised when the page combiner fails or cannot be found."""

    def __init__(self, message: str = "", diagnostic: str = "") -> None:
        super().__init__(message)
        self.diagnostic = diagnostic

    @property
    def default_message(self) -> str:
        return "Combining pages into the final PDF failed."


class ConfigurationError(PDFRenderXException):
    """Raised when the requested page geometry cannot be honoured."""

    @property
    def default_message(self) -> str:
        return "Invalid conversion configuration."
