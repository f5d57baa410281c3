#=============================================================================
# File        : tests/test_config.py
# Project     : activehandles v1.0
# Component   : Configuration and Renderer Test Suite
# Description : Env overrides, validation and source renderer selection
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Created     : 2025-09-02
#=============================================================================

import sys
from pathlib import Path

import pytest

# Add activehandles to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent))

from activehandles.config import ActiveHandlesConfig
from activehandles.render import highlight_source, plain_source

_ENV = (
    "ACTIVEHANDLES_HIGHLIGHT", "ACTIVEHANDLES_LINE_NUMBERS", "ACTIVEHANDLES_COLOR",
    "ACTIVEHANDLES_TIMERS", "ACTIVEHANDLES_SOCKETS", "ACTIVEHANDLES_ENDPOINTS",
    "ACTIVEHANDLES_SHIM_UNTIL", "NO_COLOR",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV:
        monkeypatch.delenv(name, raising=False)


class TestConfig:
    def test_defaults(self):
        config = ActiveHandlesConfig()
        assert config.highlight is True
        assert config.line_numbers is True
        assert config.color is None
        assert config.include_timers and config.include_sockets
        assert config.shim_until_version is None

    def test_from_env_overrides(self, monkeypatch):
        monkeypatch.setenv("ACTIVEHANDLES_HIGHLIGHT", "0")
        monkeypatch.setenv("ACTIVEHANDLES_SOCKETS", "no")
        monkeypatch.setenv("ACTIVEHANDLES_COLOR", "yes")
        monkeypatch.setenv("ACTIVEHANDLES_SHIM_UNTIL", "3.14.0")
        config = ActiveHandlesConfig.from_env()
        assert config.highlight is False
        assert config.include_sockets is False
        assert config.color is True
        assert config.shim_until_version == "3.14.0"

    def test_color_auto(self, monkeypatch):
        monkeypatch.setenv("ACTIVEHANDLES_COLOR", "auto")
        assert ActiveHandlesConfig.from_env().color is None

    def test_no_color_wins(self, monkeypatch):
        monkeypatch.setenv("ACTIVEHANDLES_COLOR", "1")
        monkeypatch.setenv("NO_COLOR", "")
        assert ActiveHandlesConfig.from_env().color is False

    def test_env_overlays_base(self):
        base = ActiveHandlesConfig(include_timers=False)
        assert ActiveHandlesConfig.from_env(base).include_timers is False

    @pytest.mark.parametrize("version", ["3.12", "latest", "3.12.0.1"])
    def test_invalid_shim_version_rejected(self, version):
        with pytest.raises(ValueError):
            ActiveHandlesConfig(shim_until_version=version)

    @pytest.mark.parametrize("value", ["3.12", "latest", "3.12.0.1"])
    def test_malformed_shim_version_env_is_ignored(self, monkeypatch, value):
        monkeypatch.setenv("ACTIVEHANDLES_SHIM_UNTIL", value)
        assert ActiveHandlesConfig.from_env().shim_until_version is None
        base = ActiveHandlesConfig(shim_until_version="3.13.0")
        assert ActiveHandlesConfig.from_env(base).shim_until_version == "3.13.0"

    def test_merge_is_immutable(self):
        config = ActiveHandlesConfig()
        merged = config.merge(highlight=False)
        assert config.highlight is True
        assert merged.highlight is False


class TestRenderer:
    def test_plain_renderer_when_highlight_disabled(self):
        assert ActiveHandlesConfig(highlight=False).renderer() is plain_source

    def test_highlight_renderer_adds_escapes(self):
        rendered = ActiveHandlesConfig().renderer()("def f():\n    return 1\n")
        assert "\x1b[" in rendered

    def test_line_numbers(self):
        assert "0001" in highlight_source("x = 1\n", line_numbers=True)
        assert "0001" not in highlight_source("x = 1\n", line_numbers=False)

    def test_highlight_tolerates_invalid_python(self):
        assert highlight_source("def (:", line_numbers=False)
