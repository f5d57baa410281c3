#=============================================================================
# File        : activehandles/report.py
# Project     : activehandles v1.0
# Component   : Report - Resolved Handle Data Structures
# Description : Data structures for resolved wait handles
#               • HandleKind enum for timer/socket classification
#               • FunctionLocation with one-based line numbers
#               • ResolvedHandle with JSON-safe serialization
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, Dataclasses, Enum
# Standards   : PEP 8, Type Hints
# Created     : 2025-09-02
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: dataclasses, enum, typing
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional

UNKNOWN_FUNCTION_NAME = "__unknown_function_name__"


class HandleKind(Enum):
    """Kinds of pending wait handles."""
    REPEATING_TIMER = "repeating-timer"
    ONE_SHOT_TIMER = "one-shot-timer"
    NET_LISTENER = "net-listener"
    NET_CONNECTION = "net-connection"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class FunctionLocation:
    """Where a callback was defined. ``line`` is one-based, ``column`` zero-based."""
    file: str
    line: int
    column: int
    inferred_name: Optional[str] = None

    def __post_init__(self):
        if self.line < 1:
            raise ValueError(f"line must be one-based, got {self.line}")

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'file': self.file,
            'line': self.line,
            'column': self.column,
            'inferred_name': self.inferred_name,
        }


@dataclass
class ResolvedHandle:
    """
    One callback that a pending handle will run.

    Identity fields (``name``, ``source``, ``location``) come from the
    function identity resolver; the walker fills in ``kind`` and the
    kind-specific metadata afterwards.
    """
    fn: Callable[..., Any]
    name: str
    source: str
    rendered_source: str
    location: Optional[FunctionLocation] = None
    anonymous: bool = False

    kind: Optional[HandleKind] = None
    interval_ms: Optional[int] = None
    file_descriptor: Optional[int] = None
    endpoint: Optional[str] = None

    # Raw record the callable was discovered on
    handle: Any = field(default=None, repr=False, compare=False)

    @property
    def location_string(self) -> str:
        return str(self.location) if self.location else "Unknown location"

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe view; the callable and raw record are left out."""
        return {
            'name': self.name,
            'kind': self.kind.value if self.kind else None,
            'location': self.location.to_dict() if self.location else None,
            'interval_ms': self.interval_ms,
            'file_descriptor': self.file_descriptor,
            'endpoint': self.endpoint,
            'anonymous': self.anonymous,
            'source': self.source,
        }
