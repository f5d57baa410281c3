#=============================================================================
# File        : activehandles/config.py
# Project     : activehandles v1.0
# Component   : Configuration - Snapshot and Rendering Settings
# Description : Central configuration with validation and env overrides
#               • Source highlighting and line-number knobs
#               • Timer/socket enumeration switches
#               • Compatibility shim version gate
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, Dataclasses
# Standards   : PEP 8, Type Hints
# Created     : 2025-09-02
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: dataclasses, typing, os, logging, render
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, replace
from typing import Callable, Optional

_logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"^v?\d+\.\d+\.\d+$")

def _env_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None: return default
    return v.strip().lower() in {"1", "true", "yes", "on"}

def _env_optional_bool(name: str, default: Optional[bool]) -> Optional[bool]:
    v = os.getenv(name)
    if v is None or v.strip().lower() in {"", "auto"}:
        return default
    return v.strip().lower() in {"1", "true", "yes", "on"}

def _env_version(name: str, default: Optional[str]) -> Optional[str]:
    v = os.getenv(name)
    if v is None or not v.strip(): return default
    if not _VERSION_RE.match(v.strip()):
        _logger.debug(f"Ignoring {name}={v!r}: expected a version like '3.12.0'")
        return default
    return v.strip()


@dataclass(frozen=True)
class ActiveHandlesConfig:
    """
    activehandles runtime configuration.

    Defaults:
      - highlighted source with line numbers
      - colour decided by the output stream (None = auto)
      - timers and sockets both enumerated
      - compatibility shim installs on every interpreter version
    """
    highlight: bool = True
    line_numbers: bool = True
    color: Optional[bool] = None

    include_timers: bool = True
    include_sockets: bool = True
    socket_endpoints: bool = True   # psutil lookups for laddr/raddr

    # First interpreter version that no longer needs the call_later shim.
    # None means no such version exists yet.
    shim_until_version: Optional[str] = None

    def __post_init__(self):
        v = self.shim_until_version
        if v is not None:
            v = v.strip()
            if not _VERSION_RE.match(v):
                raise ValueError(f"shim_until_version must look like '3.12.0', got '{v}'")
            object.__setattr__(self, "shim_until_version", v)

    # --------- Factory helpers ---------

    @staticmethod
    def from_env(base: Optional["ActiveHandlesConfig"] = None) -> "ActiveHandlesConfig":
        """
        Build config from environment variables, overlaying a base config.
        Supported envs:
          ACTIVEHANDLES_HIGHLIGHT (0|1)
          ACTIVEHANDLES_LINE_NUMBERS (0|1)
          ACTIVEHANDLES_COLOR (0|1|auto)
          ACTIVEHANDLES_TIMERS (0|1)
          ACTIVEHANDLES_SOCKETS (0|1)
          ACTIVEHANDLES_ENDPOINTS (0|1)
          ACTIVEHANDLES_SHIM_UNTIL (e.g. 3.14.0)
          NO_COLOR (any value disables colour)
        """
        base = base or ActiveHandlesConfig()
        color = _env_optional_bool("ACTIVEHANDLES_COLOR", base.color)
        if os.getenv("NO_COLOR") is not None:
            color = False
        return replace(
            base,
            highlight=_env_bool("ACTIVEHANDLES_HIGHLIGHT", base.highlight),
            line_numbers=_env_bool("ACTIVEHANDLES_LINE_NUMBERS", base.line_numbers),
            color=color,
            include_timers=_env_bool("ACTIVEHANDLES_TIMERS", base.include_timers),
            include_sockets=_env_bool("ACTIVEHANDLES_SOCKETS", base.include_sockets),
            socket_endpoints=_env_bool("ACTIVEHANDLES_ENDPOINTS", base.socket_endpoints),
            shim_until_version=_env_version("ACTIVEHANDLES_SHIM_UNTIL", base.shim_until_version),
        )

    def merge(self, **overrides) -> "ActiveHandlesConfig":
        """Return a copy with provided fields overridden (immutably)."""
        return replace(self, **overrides)

    # --------- Convenience getters ---------

    def renderer(self) -> Callable[[str], str]:
        """Source renderer matching the highlight/line-number settings."""
        from .render import highlight_source, plain_source

        if not self.highlight:
            return plain_source
        line_numbers = self.line_numbers
        return lambda text: highlight_source(text, line_numbers=line_numbers)
