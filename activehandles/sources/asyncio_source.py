#=============================================================================
# File        : activehandles/sources/asyncio_source.py
# Project     : activehandles v1.0
# Component   : Asyncio Handle Source - Live Loop Enumeration
# Description : Lists the wait handles keeping an asyncio event loop busy
#               • Scheduled TimerHandles grouped into per-interval timer lists
#               • Selector registrations as socket records
#               • Socket endpoints from psutil (best effort)
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, Asyncio, psutil
# Standards   : PEP 8, Type Hints
# Created     : 2025-09-02
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: asyncio, psutil, compat, config, records
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

import psutil

from .. import probe
from ..compat import lookup_timer_stamp
from ..config import ActiveHandlesConfig
from .records import SocketRecord, SocketWrap, TimerEntry, TimerList

_logger = logging.getLogger(__name__)


def _format_addr(addr: Any) -> str:
    if not addr:
        return "-"
    if isinstance(addr, tuple) and len(addr) >= 2:
        return f"{addr[0]}:{addr[1]}"
    return str(addr)


def socket_endpoints() -> Dict[int, str]:
    """Map of fd -> "laddr -> raddr" for this process's inet/unix sockets."""
    endpoints: Dict[int, str] = {}
    try:
        process = psutil.Process()
        getter = getattr(process, 'net_connections', None) or process.connections
        connections = getter(kind='all')
    except (psutil.Error, OSError) as e:
        _logger.debug(f"Socket endpoint lookup failed: {e}")
        return endpoints

    for conn in connections:
        fd = getattr(conn, 'fd', -1)
        if fd is None or fd < 0:
            continue
        endpoints[fd] = f"{_format_addr(conn.laddr)} -> {_format_addr(conn.raddr)}"
    return endpoints


class AsyncioHandleSource:
    """
    Handle source for a selector-based asyncio event loop.

    Reads the loop's private scheduling state (``_scheduled``, ``_selector``,
    ``_ssock``); anything missing on a given loop implementation yields no
    records for that part.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop,
                 config: Optional[ActiveHandlesConfig] = None):
        self.loop = loop
        self.config = config or ActiveHandlesConfig()

    def list_active_handles(self) -> List[Any]:
        handles: List[Any] = []
        if self.config.include_timers:
            handles.extend(self.timer_lists())
        if self.config.include_sockets:
            handles.extend(self.socket_handles())
        return handles

    # --------- Timers ---------

    def timer_lists(self) -> List[TimerList]:
        """
        One single-entry circular timer list per pending TimerHandle.

        Every scheduled timer is its own raw handle, so a callback scheduled
        N times shows up N times in the report. The interval is the delay
        recorded by the compatibility shim, or None for unstamped timers.
        """
        scheduled = getattr(self.loop, '_scheduled', None)
        if scheduled is None:
            _logger.debug(f"{type(self.loop).__name__} exposes no scheduled timers")
            return []

        lists: List[TimerList] = []
        for timer in sorted(scheduled, key=lambda t: t.when()):
            if timer.cancelled():
                continue
            callback = getattr(timer, '_callback', None)
            if callback is None:
                continue

            stamp = lookup_timer_stamp(timer)
            msecs = stamp.delay_ms if stamp is not None else None
            repeat = stamp.repeat_callback if stamp is not None else None

            timer_list = TimerList(msecs)
            timer_list.append(TimerEntry(timer, callback, msecs, repeat))
            lists.append(timer_list)

        return lists

    # --------- Sockets ---------

    def _self_pipe_fd(self) -> Optional[int]:
        ssock = getattr(self.loop, '_ssock', None)
        try:
            return ssock.fileno() if ssock is not None else None
        except OSError:
            return None

    @staticmethod
    def _reader_slot(record: SocketRecord, reader: asyncio.Handle) -> None:
        callback = getattr(reader, '_callback', None)
        if callback is None:
            return
        args = getattr(reader, '_args', None) or ()
        name = getattr(callback, '__name__', '')

        if name == '_accept_connection' and args and callable(args[0]):
            setattr(record, probe.CONNECTION_SLOT, args[0])
            return

        if name == '_read_ready':
            protocol = getattr(getattr(callback, '__self__', None), '_protocol', None)
            data_received = getattr(protocol, 'data_received', None)
            if callable(data_received):
                setattr(record, probe.READ_SLOT, data_received)
                return

        setattr(record, probe.READ_SLOT, callback)

    def socket_handles(self) -> List[SocketWrap]:
        selector = getattr(self.loop, '_selector', None)
        if selector is None:
            _logger.debug(f"{type(self.loop).__name__} has no selector; skipping sockets")
            return []
        try:
            keys = list(selector.get_map().values())
        except (AttributeError, RuntimeError) as e:
            _logger.debug(f"Selector map unavailable: {e}")
            return []

        self_pipe = self._self_pipe_fd()
        endpoints = socket_endpoints() if self.config.socket_endpoints else {}

        wraps = []
        for key in sorted(keys, key=lambda k: k.fd):
            if key.fd == self_pipe:
                continue
            data = key.data if isinstance(key.data, tuple) and len(key.data) == 2 else (None, None)
            reader, writer = data

            record = SocketRecord(key.fd, endpoints.get(key.fd))
            if reader is not None and not reader.cancelled():
                self._reader_slot(record, reader)
            if writer is not None and not writer.cancelled():
                callback = getattr(writer, '_callback', None)
                if callback is not None:
                    setattr(record, probe.WRITE_SLOT, callback)

            wraps.append(SocketWrap(record, key.fileobj))
        return wraps
