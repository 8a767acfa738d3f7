from __future__ import annotations

import pytest

from pdfrenderx.exceptions import ConfigurationError
from pdfrenderx.settings import RenderSettings


def test_defaults() -> None:
    settings = RenderSettings()

    assert settings.ready_poll_interval == 0.1
    assert settings.complete_poll_interval == 0.05
    assert settings.combiner_timeout == 3600
    assert settings.combiner == "ghostscript"
    assert settings.ghostscript_path is None
    assert settings.temp_dir is None


def test_from_env_reads_variables() -> None:
    environ = {
        "PDFRENDERX_READY_POLL_INTERVAL": "0.5",
        "PDFRENDERX_COMPLETE_POLL_INTERVAL": "0.25",
        "PDFRENDERX_COMBINER_TIMEOUT": "60",
        "PDFRENDERX_COMBINER": " PyPDF ",
        "PDFRENDERX_GHOSTSCRIPT": "/opt/gs/bin/gs",
        "PDFRENDERX_TEMP_DIR": "/var/tmp/pdfrenderx",
    }

    settings = RenderSettings.from_env(environ)

    assert settings.ready_poll_interval == 0.5
    assert settings.complete_poll_interval == 0.25
    assert settings.combiner_timeout == 60
    assert settings.combiner == "pypdf"
    assert settings.ghostscript_path == "/opt/gs/bin/gs"
    assert settings.temp_dir == "/var/tmp/pdfrenderx"


def test_overrides_win_and_none_is_ignored() -> None:
    environ = {"PDFRENDERX_COMBINER": "pypdf", "PDFRENDERX_GHOSTSCRIPT": "/opt/gs"}

    settings = RenderSettings.from_env(environ, combiner="ghostscript", ghostscript_path=None)

    assert settings.combiner == "ghostscript"
    assert settings.ghostscript_path == "/opt/gs"


def test_empty_environment_gives_defaults() -> None:
    assert RenderSettings.from_env({}) == RenderSettings()


def test_bad_number_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError, match="Invalid numeric setting"):
        RenderSettings.from_env({"PDFRENDERX_COMBINER_TIMEOUT": "forever"})


@pytest.mark.parametrize(
    "kwargs",
    [
        {"combiner": "qpdf"},
        {"ready_poll_interval": 0},
        {"complete_poll_interval": -1},
        {"combiner_timeout": 0},
    ],
)
def test_invalid_values_are_rejected(kwargs) -> None:
    with pytest.raises(ConfigurationError):
        RenderSettings(**kwargs)
