#=============================================================================
# File        : activehandles/printer.py
# Project     : activehandles v1.0
# Component   : Report Printer
# Description : Text report for resolved handles
#               • One block per handle: name, location, kind, fd
#               • Repeated locations print an occurrence count
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+
# Standards   : PEP 8, Type Hints
# Created     : 2025-09-02
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: render, report
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import sys
from typing import Dict, List, Optional, Sequence, TextIO

from .render import bright_black, green
from .report import ResolvedHandle


def format_handles(handles: Sequence[ResolvedHandle], color: bool = False) -> List[str]:
    """Format one text block per handle, in order."""
    blocks = []
    printed: Dict[str, int] = {}

    for h in handles:
        loc_string = h.location_string
        count = printed.get(loc_string, 0)

        if count:
            body = f"Count: {count + 1}. Source printed above"
        else:
            body = h.rendered_source

        name = f"{h.name}:"
        loc = loc_string
        if color:
            name = green(name)
            loc = bright_black(loc)

        kind = h.kind.value if h.kind else "unknown type"
        fd_string = f", fd = {h.file_descriptor}" if h.file_descriptor is not None else ""

        blocks.append(f"\n{name} {loc} ({kind}{fd_string})\n{body}")
        printed[loc_string] = count + 1

    return blocks


def print_handles(handles: Sequence[ResolvedHandle], file: Optional[TextIO] = None,
                  color: Optional[bool] = None) -> None:
    """Write the report for ``handles`` to ``file`` (stdout by default)."""
    stream = file if file is not None else sys.stdout
    if color is None:
        isatty = getattr(stream, 'isatty', None)
        color = bool(isatty and isatty())

    for block in format_handles(handles, color=color):
        print(block, file=stream)
