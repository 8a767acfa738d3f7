"""Runtime settings for pdfrenderx, overridable through ``PDFRENDERX_*`` variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .exceptions import ConfigurationError

COMBINERS = ("ghostscript", "pypdf")


@dataclass(frozen=True)
class RenderSettings:
    """
    Tuning knobs that are not part of a single conversion request.

    Attributes:
        ready_poll_interval: Seconds between "is the document loaded" checks
        complete_poll_interval: Seconds between "has the print finished" checks
        combiner_timeout: Seconds the combiner may run before it is killed
        combiner: Which combiner merges page artifacts ("ghostscript" or "pypdf")
        ghostscript_path: Explicit Ghostscript executable, skips discovery
        temp_dir: Directory for temporary and per-page files
    """
    ready_poll_interval: float = 0.1
    complete_poll_interval: float = 0.05
    combiner_timeout: float = 3600.0
    combiner: str = "ghostscript"
    ghostscript_path: Optional[str] = None
    temp_dir: Optional[str] = None

    def __post_init__(self) -> None:
        if self.combiner not in COMBINERS:
            raise ConfigurationError(
                f"Unknown combiner '{self.combiner}'. Expected one of: {', '.join(COMBINERS)}."
            )
        if self.ready_poll_interval <= 0 or self.complete_poll_interval <= 0:
            raise ConfigurationError("Poll intervals must be positive.")
        if self.combiner_timeout <= 0:
            raise ConfigurationError("Combiner timeout must be positive.")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides: object) -> "RenderSettings":
        """Build settings from ``environ`` (default ``os.environ``); ``overrides`` win."""

        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        try:
            if "PDFRENDERX_READY_POLL_INTERVAL" in env:
                values["ready_poll_interval"] = float(env["PDFRENDERX_READY_POLL_INTERVAL"])
            if "PDFRENDERX_COMPLETE_POLL_INTERVAL" in env:
                values["complete_poll_interval"] = float(env["PDFRENDERX_COMPLETE_POLL_INTERVAL"])
            if "PDFRENDERX_COMBINER_TIMEOUT" in env:
                values["combiner_timeout"] = float(env["PDFRENDERX_COMBINER_TIMEOUT"])
        except ValueError as exc:
            raise ConfigurationError(f"Invalid numeric setting: {exc}") from exc
        if env.get("PDFRENDERX_COMBINER"):
            values["combiner"] = env["PDFRENDERX_COMBINER"].strip().lower()
        if env.get("PDFRENDERX_GHOSTSCRIPT"):
            values["ghostscript_path"] = env["PDFRENDERX_GHOSTSCRIPT"]
        if env.get("PDFRENDERX_TEMP_DIR"):
            values["temp_dir"] = env["PDFRENDERX_TEMP_DIR"]
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)  # type: ignore[arg-type]


__all__ = ["RenderSettings", "COMBINERS"]
