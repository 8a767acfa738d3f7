"""Page combiners for pdfrenderx."""

from __future__ import annotations

from ..settings import RenderSettings
from .base import Combiner
from .ghostscript import GhostscriptCombiner, build_ghostscript_command, find_ghostscript
from .pypdf_combiner import PypdfCombiner


def create_combiner(settings: RenderSettings) -> Combiner:
    """Return the combiner selected by ``settings.combiner``."""

    if settings.combiner == "pypdf":
        return PypdfCombiner()
    return GhostscriptCombiner(settings.ghostscript_path, timeout=settings.combiner_timeout)


__all__ = [
    "Combiner",
    "GhostscriptCombiner",
    "PypdfCombiner",
    "build_ghostscript_command",
    "create_combiner",
    "find_ghostscript",
]
