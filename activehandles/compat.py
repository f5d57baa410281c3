#=============================================================================
# File        : activehandles/compat.py
# Project     : activehandles v1.0
# Component   : Compatibility Shim - call_later Timer Stamping
# Description : Widens visibility into asyncio timer handles
#               • Records the requested delay of call_later timers
#               • Detects self-rescheduling (repeating) callbacks
#               • Version-gated, install-once monkey patch
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, Asyncio, Weak References
# Standards   : PEP 8, Type Hints, Safe Monkey Patching
# Created     : 2025-09-02
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: asyncio, weakref, threading, platform, config
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import asyncio
import functools
import inspect
import logging
import platform
import sys
import threading
import weakref
from typing import Any, Callable, Dict, NamedTuple, Optional

from .config import ActiveHandlesConfig

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

# Global shim state
_shim_installed = False
_original_call_later = None
_stamp_lock = threading.RLock()
_timer_stamps: Dict[int, 'TimerStamp'] = {}


class TimerStamp(NamedTuple):
    """What call_later knew about a timer that the TimerHandle forgets."""
    ref: Callable[[], Any]       # weakref to the TimerHandle
    delay_ms: int
    repeat_callback: Optional[Callable[..., Any]] = None


def version_at_least(version: str, minimum: str) -> bool:
    """
    Compare dotted ``major.minor.patch`` versions.

    Anything that is not three numeric parts compares as too old, since we
    cannot be sure.
    """
    def parse(v: str):
        parts = v.strip().lstrip('v').split('.')
        if len(parts) != 3 or not all(p.isdigit() for p in parts):
            return None
        return tuple(int(p) for p in parts)

    have, want = parse(version), parse(minimum)
    if have is None or want is None:
        return False
    return have >= want


def _runtime_version() -> str:
    return platform.python_version()


def _code_of(callback: Any) -> Any:
    target = callback
    while isinstance(target, functools.partial):
        target = target.func
    if inspect.ismethod(target):
        target = target.__func__
    return getattr(target, '__code__', None)


def _forget_stamp(handle_id: int) -> None:
    """Remove stamp from registry (called by weakref.finalize)."""
    with _stamp_lock:
        _timer_stamps.pop(handle_id, None)


def _stamp(handle: Any, delay: float, callback: Any, caller_code: Any) -> None:
    code = _code_of(callback)
    repeat = callback if code is not None and code is caller_code else None
    try:
        delay_ms = int(round(float(delay) * 1000))
    except (TypeError, ValueError):
        delay_ms = 0

    try:
        ref = weakref.ref(handle)
    except TypeError:
        return
    handle_id = id(handle)
    with _stamp_lock:
        _timer_stamps[handle_id] = TimerStamp(ref, delay_ms, repeat)
    weakref.finalize(handle, _forget_stamp, handle_id)


def lookup_timer_stamp(handle: Any) -> Optional[TimerStamp]:
    """Stamp recorded for ``handle`` by the shim, if any."""
    with _stamp_lock:
        stamp = _timer_stamps.get(id(handle))
    if stamp is None or stamp.ref() is not handle:
        return None
    return stamp


def is_shim_installed() -> bool:
    return _shim_installed


def install_compat_shim(config: Optional[ActiveHandlesConfig] = None) -> None:
    """
    Patch ``asyncio.BaseEventLoop.call_later`` to stamp the timers it creates.

    CPython's TimerHandle only keeps the absolute deadline, so neither the
    requested delay nor whether the callback reschedules itself survives.
    Call once at startup, before the timers of interest are created. A no-op
    when ``config.shim_until_version`` is set and the interpreter is at least
    that version, and when the shim is already installed.
    """
    global _shim_installed, _original_call_later

    config = config or ActiveHandlesConfig.from_env()

    if _shim_installed:
        _logger.warning("Compatibility shim already installed")
        return

    until = config.shim_until_version
    if until is not None and version_at_least(_runtime_version(), until):
        _logger.info(f"Compatibility shim not needed on Python {_runtime_version()}")
        return

    try:
        _original_call_later = asyncio.BaseEventLoop.call_later
    except AttributeError as e:
        _logger.error(f"Failed to access asyncio functions for patching: {e}")
        return

    original = _original_call_later

    def stamped_call_later(self, delay, callback, *args, context=None):
        """Replacement for loop.call_later() that stamps the handle."""
        if context is not None:
            handle = original(self, delay, callback, *args, context=context)
        else:
            handle = original(self, delay, callback, *args)

        try:
            _stamp(handle, delay, callback, sys._getframe(1).f_code)
        except Exception as e:
            _logger.debug(f"Timer stamping failed: {e}")
        return handle

    asyncio.BaseEventLoop.call_later = stamped_call_later
    _shim_installed = True
    _logger.info("Compatibility shim installed")


def uninstall_compat_shim() -> None:
    """Restore the original call_later and forget all stamps."""
    global _shim_installed, _original_call_later

    if not _shim_installed:
        return

    if _original_call_later:
        asyncio.BaseEventLoop.call_later = _original_call_later
    _original_call_later = None
    _shim_installed = False

    with _stamp_lock:
        _timer_stamps.clear()

    _logger.info("Compatibility shim uninstalled")
