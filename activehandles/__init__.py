#=============================================================================
# File        : activehandles/__init__.py
# Project     : activehandles v1.0
# Component   : Package Initialization
# Description : Snapshot of the wait handles keeping an event loop alive
#               • Timer and socket callback resolution
#               • Callback names, definition sites and highlighted source
#               • Optional call_later shim for repeating timers
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, AsyncIO, Pygments, psutil
# Standards   : PEP 8, Type Hints, Dataclasses
# Created     : 2025-09-02
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: pygments, psutil
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. Released under MIT License.
#=============================================================================

"""
activehandles - what is my event loop still waiting on?

Quick Start:
    import activehandles

    # optional, before creating timers: record delays and repeating callbacks
    activehandles.install_compat_shim()

    async def main():
        ...
        activehandles.print_active_handles()
"""

from .core import (
    active_handles,
    print_active_handles,
    resolve_handles,
)

from .compat import (
    install_compat_shim,
    uninstall_compat_shim,
)

from .config import ActiveHandlesConfig

from .report import (
    ResolvedHandle,
    FunctionLocation,
    HandleKind,
    UNKNOWN_FUNCTION_NAME,
)

__version__ = "1.0.0"
__author__ = "Kyle Clouthier"
__license__ = "MIT"

__all__ = [
    # Core functions
    "active_handles",
    "print_active_handles",
    "resolve_handles",

    # Compatibility shim
    "install_compat_shim",
    "uninstall_compat_shim",

    # Configuration
    "ActiveHandlesConfig",

    # Reporting
    "ResolvedHandle",
    "FunctionLocation",
    "HandleKind",
    "UNKNOWN_FUNCTION_NAME",

    # Metadata
    "__version__",
    "__author__",
    "__license__",
]
