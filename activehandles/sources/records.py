"""
Raw handle records built by the handle sources.

Timers live in circular lists: the list object is the raw handle and its
entries hang off ``_idle_next``, the last entry linking back to the list. Socket registrations are wrapped so the socket
record sits under ``_handle``.
"""

from __future__ import annotations

from typing import Any, Optional


class TimerList:
    """Sentinel of a circular timer list; carries no timer fields itself."""

    def __init__(self, msecs: Optional[int]):
        self.msecs = msecs
        self._idle_next = self
        self._idle_prev = self

    def append(self, entry: 'TimerEntry') -> None:
        last = self._idle_prev
        entry._idle_prev = last
        entry._idle_next = self
        last._idle_next = entry
        self._idle_prev = entry

    def __iter__(self):
        node = self._idle_next
        while node is not self:
            yield node
            node = node._idle_next

    def __repr__(self) -> str:
        return f"TimerList(msecs={self.msecs})"


class TimerEntry:
    """
    One pending timer.

    ``_wrapped_callback`` is only set for timers known to repeat; its
    absence is meaningful to the walker.
    """

    def __init__(self, timer: Any, callback: Any, msecs: Optional[int],
                 repeat_callback: Optional[Any] = None):
        self.timer = timer
        self._idle_next: Any = None
        self._idle_prev: Any = None
        self._idle_timeout = msecs
        self._on_timeout = callback
        if repeat_callback is not None:
            self._wrapped_callback = repeat_callback

    def __repr__(self) -> str:
        return f"TimerEntry(msecs={self._idle_timeout}, timer={self.timer!r})"


class SocketRecord:
    """Selector registration for one file descriptor; callbacks live in named slots."""

    def __init__(self, fd: int, endpoint: Optional[str] = None):
        self.fd = fd
        if endpoint:
            self.endpoint = endpoint

    def __repr__(self) -> str:
        return f"SocketRecord(fd={self.fd})"


class SocketWrap:
    def __init__(self, record: SocketRecord, fileobj: Any = None):
        self._handle = record
        self.fileobj = fileobj

    def __repr__(self) -> str:
        return f"SocketWrap({self._handle!r})"
