"""Rendering engine backends for pdfrenderx."""

from .base import STATE_STOP, ProgressListener, RenderEngineGateway
from .playwright_backend import PlaywrightGateway

__all__ = [
    "STATE_STOP",
    "ProgressListener",
    "RenderEngineGateway",
    "PlaywrightGateway",
]
