"""
Capability probe over raw handle records.

Raw records come from a handle source and their shape depends on the loop
implementation. Everything that reads a record field goes through here, so
the walker only deals with field names. Records may be plain objects or
mappings.
"""

from __future__ import annotations

import inspect
from typing import Any, Callable, Iterator, Mapping, Optional, Tuple

# Timer list fields
NEXT_FIELD = "_idle_next"
REPEAT_FIELD = "_repeat"
WRAPPED_FIELD = "_wrapped_callback"
TIMEOUT_FIELD = "_on_timeout"
INTERVAL_FIELD = "_idle_timeout"

# Socket fields
SOCKET_FIELD = "_handle"
FD_FIELD = "fd"
ENDPOINT_FIELD = "endpoint"
CONNECTION_SLOT = "onconnection"
READ_SLOT = "onread"
WRITE_SLOT = "onwrite"

_MISSING = object()


def has_field(record: Any, name: str) -> bool:
    """True if the record itself carries ``name`` (inherited class attributes do not count)."""
    if record is None:
        return False
    if isinstance(record, Mapping):
        return name in record
    try:
        return name in vars(record)
    except TypeError:
        # __slots__ records
        return get_field(record, name, _MISSING) is not _MISSING


def get_field(record: Any, name: str, default: Any = None) -> Any:
    if record is None:
        return default
    if isinstance(record, Mapping):
        return record.get(name, default)
    try:
        return getattr(record, name, default)
    except Exception:
        return default


def get_callable_field(record: Any, name: str) -> Optional[Callable[..., Any]]:
    value = get_field(record, name)
    return value if callable(value) else None


def iter_fields(record: Any) -> Iterator[Tuple[str, Any]]:
    """Yield (name, value) pairs in declaration order. Unknown shapes yield nothing."""
    if record is None:
        return
    if isinstance(record, Mapping):
        items = list(record.items())
    else:
        try:
            items = list(vars(record).items())
        except TypeError:
            names = []
            for klass in type(record).__mro__:
                names.extend(getattr(klass, '__slots__', ()))
            items = [(n, get_field(record, n, _MISSING)) for n in names]
            items = [(n, v) for n, v in items if v is not _MISSING]
    for name, value in items:
        if isinstance(name, str):
            yield name, value


def get_file_descriptor(record: Any) -> Optional[int]:
    fd = get_field(record, FD_FIELD)
    if isinstance(fd, bool) or not isinstance(fd, int) or fd < 0:
        return None
    return fd


def same_callable(a: Any, b: Any) -> bool:
    """
    Identity comparison for callables.

    Bound methods are recreated on every attribute access, so two bound
    methods are the same callable when they bind the same function to the
    same object.
    """
    if a is b:
        return True
    if inspect.ismethod(a) and inspect.ismethod(b):
        return a.__self__ is b.__self__ and a.__func__ is b.__func__
    return False
