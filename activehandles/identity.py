#=============================================================================
# File        : activehandles/identity.py
# Project     : activehandles v1.0
# Component   : Function Identity Resolver
# Description : Turns a callback into a presentable identity
#               • Declared or inferred name (lambdas get the name they are bound to)
#               • Source text and highlighted rendering with fallback
#               • Definition location with one-based line numbers
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, inspect, ast
# Standards   : PEP 8, Type Hints
# Created     : 2025-09-02
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: ast, inspect, functools, textwrap, render, report
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import ast
import functools
import inspect
import logging
import textwrap
from typing import Any, Callable, Dict, List, NamedTuple, Optional

from .render import highlight_source
from .report import UNKNOWN_FUNCTION_NAME, FunctionLocation, ResolvedHandle

_logger = logging.getLogger(__name__)

_LAMBDA_NAME = "<lambda>"


class RawLocation(NamedTuple):
    """Location as reported by ``inspect.findsource``: ``line`` is zero-based."""
    file: str
    line: int
    column: int
    inferred_name: Optional[str] = None
    segment: Optional[str] = None


def reflect_target(fn: Any) -> Any:
    """
    Object to reflect on for naming and source lookup.

    Partials and decorators are unwrapped, bound methods give their function
    and callable instances give their class.
    """
    target = fn
    for _ in range(32):
        if isinstance(target, functools.partial):
            target = target.func
            continue
        if inspect.ismethod(target):
            target = target.__func__
            continue
        try:
            unwrapped = inspect.unwrap(target)
        except ValueError:
            unwrapped = target
        if unwrapped is target:
            break
        target = unwrapped

    if callable(target) and not (inspect.isroutine(target) or inspect.isclass(target)):
        target = type(target)
    return target


def _declared_name(target: Any) -> Optional[str]:
    name = getattr(target, '__name__', None)
    if not isinstance(name, str) or not name or name == _LAMBDA_NAME:
        return None
    qualname = getattr(target, '__qualname__', None)
    return qualname if isinstance(qualname, str) and qualname else name


def _is_anonymous(target: Any) -> bool:
    return _declared_name(target) is None


def _parents(tree: ast.AST) -> Dict[ast.AST, ast.AST]:
    parents = {}
    for node in ast.walk(tree):
        for child in ast.iter_child_nodes(node):
            parents[child] = node
    return parents


def _pick_lambda(candidates: List[ast.Lambda], code: Any) -> Optional[ast.Lambda]:
    if len(candidates) < 2:
        return candidates[0] if candidates else None

    positions = getattr(code, 'co_positions', None)
    if positions is not None:
        for _, _, col, _ in positions():
            if col is None:
                continue
            containing = [n for n in candidates
                          if n.col_offset <= col < (n.end_col_offset or col + 1)]
            if containing:
                return max(containing, key=lambda n: n.col_offset)
    return candidates[0]


def _binding_name(node: ast.AST, parent: Optional[ast.AST]) -> Optional[str]:
    """Name a lambda is bound to by its immediate context, if any."""
    def target_name(target: ast.AST) -> Optional[str]:
        if isinstance(target, ast.Name):
            return target.id
        if isinstance(target, ast.Attribute):
            return target.attr
        if isinstance(target, ast.Subscript):
            key = target.slice
            if isinstance(key, ast.Constant) and isinstance(key.value, str):
                return key.value
        return None

    if isinstance(parent, ast.Assign) and parent.value is node and parent.targets:
        return target_name(parent.targets[0])
    if isinstance(parent, (ast.AnnAssign, ast.NamedExpr)) and parent.value is node:
        return target_name(parent.target)
    if isinstance(parent, ast.keyword):
        return parent.arg
    if isinstance(parent, ast.Dict):
        for key, value in zip(parent.keys, parent.values):
            if value is node and isinstance(key, ast.Constant) and isinstance(key.value, str):
                return key.value
    return None


def _locate_lambda(lines: List[str], lnum: int, code: Any):
    text = ''.join(lines)
    try:
        tree = ast.parse(text)
    except (SyntaxError, ValueError):
        return None, None, None
    candidates = [n for n in ast.walk(tree)
                  if isinstance(n, ast.Lambda) and n.lineno == lnum + 1]
    node = _pick_lambda(candidates, code)
    if node is None:
        return None, None, None
    parent = _parents(tree).get(node)
    return node, _binding_name(node, parent), ast.get_source_segment(text, node)


def locate_function(target: Any) -> Optional[RawLocation]:
    """Definition site of ``target`` or None when the source is unavailable."""
    try:
        file = inspect.getsourcefile(target) or inspect.getfile(target)
        lines, lnum = inspect.findsource(target)
    except (OSError, TypeError):
        return None
    if not file or lnum < 0:
        return None

    line_text = lines[lnum] if lnum < len(lines) else ''
    column = len(line_text) - len(line_text.lstrip())
    inferred_name = None
    segment = None

    if getattr(target, '__name__', None) == _LAMBDA_NAME:
        node, inferred_name, segment = _locate_lambda(lines, lnum, getattr(target, '__code__', None))
        if node is not None:
            column = node.col_offset

    return RawLocation(file, lnum, column, inferred_name, segment)


def _source_text(target: Any, fn: Any) -> str:
    try:
        return textwrap.dedent(inspect.getsource(target)).rstrip("\n")
    except (OSError, TypeError):
        return repr(fn)


def render_or_fallback(text: str, renderer: Callable[[str], str], fallback: str) -> str:
    """Rendering is best effort: any failure or empty output yields ``fallback``."""
    try:
        rendered = renderer(text)
    except Exception as e:
        _logger.debug(f"Source rendering failed, using raw source: {e}")
        return fallback
    return rendered if rendered else fallback


def function_info(fn: Callable[..., Any], handle: Any = None,
                  renderer: Optional[Callable[[str], str]] = None) -> ResolvedHandle:
    """
    Resolve the name, source and location of ``fn``.

    Args:
        fn: the callback a handle will run
        handle: raw record ``fn`` was found on, kept for the caller
        renderer: source renderer, Pygments highlighting by default

    Returns:
        ResolvedHandle without kind metadata
    """
    renderer = renderer or highlight_source
    target = reflect_target(fn)

    raw = locate_function(target)
    location = None
    if raw is not None:
        # findsource reports zero-based lines
        location = FunctionLocation(raw.file, raw.line + 1, raw.column, raw.inferred_name)

    anonymous = _is_anonymous(target)
    if anonymous:
        name = raw.inferred_name if raw and raw.inferred_name else UNKNOWN_FUNCTION_NAME
        source = raw.segment if raw and raw.segment else _source_text(target, fn).strip()
        # a bare lambda is an expression; binding it makes a parsable statement
        rendered = render_or_fallback(f"{name} = {source}", renderer, source)
    else:
        name = _declared_name(target)
        source = _source_text(target, fn)
        rendered = render_or_fallback(source, renderer, source)

    return ResolvedHandle(
        fn=fn,
        name=name,
        source=source,
        rendered_source=rendered,
        location=location,
        anonymous=anonymous,
        handle=handle,
    )
