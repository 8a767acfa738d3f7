"""Rendering engine protocol consumed by the page scheduler."""

from __future__ import annotations

from typing import Protocol

from ..paper import PrintSettings

# Flag bit reported through ``on_state_change`` when a print operation stops.
STATE_STOP = 0x00000010


class ProgressListener(Protocol):
    """Receives callbacks from a running print operation."""

    def on_progress(self, current: int, maximum: int) -> None:
        """Report engine progress for the current print."""

    def on_state_change(self, flags: int) -> None:
        """Report state flags; ``STATE_STOP`` means the print has stopped."""


class RenderEngineGateway(Protocol):
    """Protocol for engines that can print a loaded document to PDF.

    Every method must be called on the thread that runs the engine's
    event loop. ``print`` returns immediately and reports completion
    through the listener; whether it succeeded is only known by looking
    for the output file.
    """

    def is_document_ready(self) -> bool:
        """Return ``True`` once the document has finished loading."""

    def configure_print(self, settings: PrintSettings) -> None:
        """Apply settings ahead of the next print."""

    def print(self, settings: PrintSettings, listener: ProgressListener) -> None:
        """Start printing with ``settings`` and report to ``listener``."""
