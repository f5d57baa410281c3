#=============================================================================
# File        : activehandles/walker.py
# Project     : activehandles v1.0
# Component   : Handle Classifier & Walker
# Description : Finds the callbacks embedded in one raw handle record
#               • Walks timer lists with a cycle guard
#               • Repeat/wrapped/timeout callback precedence
#               • Socket slot classification (listener/connection)
#               • Per-record deduplication by callable identity
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+
# Standards   : PEP 8, Type Hints
# Created     : 2025-09-02
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: probe, identity, report
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, List, Optional, Set

from . import probe
from .identity import function_info
from .report import HandleKind, ResolvedHandle

_logger = logging.getLogger(__name__)

_SLOT_KINDS = {
    probe.CONNECTION_SLOT: HandleKind.NET_LISTENER,
    probe.READ_SLOT: HandleKind.NET_CONNECTION,
}


def iter_timer_chain(handle: Any) -> Iterator[Any]:
    """
    Yield the nodes linked from ``handle`` through ``_idle_next``.

    Timer lists are circular, so the walk ends at the first node seen twice.
    """
    visited: Set[int] = set()
    node = probe.get_field(handle, probe.NEXT_FIELD)
    while node is not None and id(node) not in visited:
        visited.add(id(node))
        yield node
        node = probe.get_field(node, probe.NEXT_FIELD)


def _interval_ms(node: Any) -> Optional[int]:
    value = probe.get_field(node, probe.INTERVAL_FIELD)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


class _HandleResolution:
    """Resolution state for a single raw handle."""

    def __init__(self, handle: Any, renderer: Optional[Callable[[str], str]]):
        self.handle = handle
        self.renderer = renderer
        self.resolved: List[ResolvedHandle] = []
        self._seen: List[Any] = []

    def add(self, fn: Callable[..., Any], record: Any) -> Optional[ResolvedHandle]:
        if any(probe.same_callable(fn, seen) for seen in self._seen):
            return None
        self._seen.append(fn)

        info = function_info(fn, record, renderer=self.renderer)
        self.resolved.append(info)
        return info

    def walk_timers(self) -> None:
        for node in iter_timer_chain(self.handle):
            repeat = probe.get_callable_field(node, probe.REPEAT_FIELD)
            wrapped = probe.get_callable_field(node, probe.WRAPPED_FIELD)
            if repeat is None and wrapped is None and not probe.has_field(node, probe.TIMEOUT_FIELD):
                continue

            repeating = repeat is not None or wrapped is not None
            # repeat wins: some loops keep the user's interval callback there
            if repeat is not None:
                fn = repeat
            elif wrapped is not None:
                fn = wrapped
            else:
                fn = probe.get_callable_field(node, probe.TIMEOUT_FIELD)
            if fn is None:
                _logger.debug(f"Skipping timer node without a callable callback: {type(node).__name__}")
                continue

            info = self.add(fn, node)
            if info is None:
                continue
            info.kind = HandleKind.REPEATING_TIMER if repeating else HandleKind.ONE_SHOT_TIMER
            info.interval_ms = _interval_ms(node)

    def walk_socket(self) -> None:
        record = probe.get_field(self.handle, probe.SOCKET_FIELD)
        if record is None:
            return
        fd = probe.get_file_descriptor(record)
        endpoint = probe.get_field(record, probe.ENDPOINT_FIELD)

        for key, value in probe.iter_fields(record):
            if not callable(value):
                continue
            info = self.add(value, record)
            if info is None or fd is None:
                continue
            info.file_descriptor = fd
            info.kind = _SLOT_KINDS.get(key, HandleKind.UNKNOWN)
            if isinstance(endpoint, str):
                info.endpoint = endpoint


def resolve_handle(handle: Any, renderer: Optional[Callable[[str], str]] = None) -> List[ResolvedHandle]:
    """
    Resolve every callback reachable from one raw handle record.

    Args:
        handle: raw record from a handle source
        renderer: source renderer passed to the identity resolver

    Returns:
        Resolved callbacks in discovery order, each callable at most once
    """
    resolution = _HandleResolution(handle, renderer)
    resolution.walk_timers()
    resolution.walk_socket()
    return resolution.resolved
