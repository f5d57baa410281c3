#=============================================================================
# File        : activehandles/core.py
# Project     : activehandles v1.0
# Component   : Core Engine - Handle Set Resolution and Public API
# Description : Point-in-time snapshot of what an event loop is waiting on
#               • Resolves every raw handle from a handle source
#               • Flattens results in source order
#               • Text report entry point
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, Asyncio
# Standards   : PEP 8, Type Hints
# Created     : 2025-09-02
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: asyncio, walker, printer, config, sources
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, List, Optional, Protocol, Sequence, TextIO

from .config import ActiveHandlesConfig
from .printer import print_handles
from .report import ResolvedHandle
from .sources.asyncio_source import AsyncioHandleSource
from .walker import resolve_handle

# Configure safe logging defaults
_logger = logging.getLogger(__name__)
_logger.setLevel(logging.WARNING)  # Only WARN/ERROR by default

# Add console handler only if none exists
if not _logger.handlers and not logging.getLogger().handlers:
    _console_handler = logging.StreamHandler()
    _console_handler.setLevel(logging.WARNING)
    _formatter = logging.Formatter('[activehandles] %(levelname)s: %(message)s')
    _console_handler.setFormatter(_formatter)
    _logger.addHandler(_console_handler)


class HandleSource(Protocol):
    """Anything that can list the wait handles currently alive."""

    def list_active_handles(self) -> Sequence[Any]:
        ...


def resolve_handles(handles: Sequence[Any],
                    renderer: Optional[Callable[[str], str]] = None) -> List[ResolvedHandle]:
    """
    Resolve a sequence of raw handle records.

    The same callable reached from two different records is reported twice;
    each record is a separate pending occurrence.
    """
    if not handles:
        return []

    resolved: List[ResolvedHandle] = []
    for handle in handles:
        try:
            resolved.extend(resolve_handle(handle, renderer=renderer))
        except Exception as e:
            _logger.debug(f"Skipping unresolvable handle {type(handle).__name__}: {e}")
    return resolved


def _current_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


def active_handles(loop: Optional[asyncio.AbstractEventLoop] = None,
                   config: Optional[ActiveHandlesConfig] = None,
                   source: Optional[HandleSource] = None) -> List[ResolvedHandle]:
    """
    Gather information about all currently active handles.

    Args:
        loop: event loop to inspect (the running loop by default)
        config: configuration, read from the environment by default
        source: handle source overriding the loop's

    Returns:
        Resolved handles; empty when there is no loop or nothing is pending
    """
    config = config or ActiveHandlesConfig.from_env()

    if source is None:
        loop = loop or _current_loop()
        if loop is None or loop.is_closed():
            return []
        source = AsyncioHandleSource(loop, config)

    handles = source.list_active_handles()
    if not handles:
        return []
    return resolve_handles(handles, renderer=config.renderer())


def print_active_handles(loop: Optional[asyncio.AbstractEventLoop] = None,
                         config: Optional[ActiveHandlesConfig] = None,
                         file: Optional[TextIO] = None,
                         source: Optional[HandleSource] = None) -> None:
    """Call :func:`active_handles` and print the report to stdout (or ``file``)."""
    config = config or ActiveHandlesConfig.from_env()
    handles = active_handles(loop, config=config, source=source)
    print_handles(handles, file=file, color=config.color)
