#=============================================================================
# File        : activehandles/sources/__init__.py
# Project     : activehandles v1.0
# Component   : Sources Package - Handle Source Exports
# Description : Package initialization for live handle sources
#               • Asyncio event loop source
#               • Raw record types produced by sources
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+
# Created     : 2025-09-02
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: asyncio_source, records
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from .asyncio_source import AsyncioHandleSource, socket_endpoints
from .records import SocketRecord, SocketWrap, TimerEntry, TimerList

__all__ = [
    "AsyncioHandleSource",
    "socket_endpoints",
    "SocketRecord",
    "SocketWrap",
    "TimerEntry",
    "TimerList",
]
