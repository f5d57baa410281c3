#=============================================================================
# File        : activehandles/render.py
# Project     : activehandles v1.0
# Component   : Source Renderer - Syntax Highlighting and Terminal Colour
# Description : Pygments-backed rendering of callback source text
#               • Python highlighting with optional line numbers
#               • ANSI colouring for report headers
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, Pygments
# Standards   : PEP 8, Type Hints
# Created     : 2025-09-02
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: pygments
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

from pygments import highlight
from pygments.console import colorize
from pygments.formatters import TerminalFormatter
from pygments.lexers import PythonLexer

_LEXER = PythonLexer(stripnl=False, ensurenl=False)


def highlight_source(text: str, line_numbers: bool = True) -> str:
    """
    Highlight Python source for terminal output.

    Raises whatever Pygments raises; callers decide on the fallback.
    """
    formatter = TerminalFormatter(linenos=line_numbers)
    return highlight(text, _LEXER, formatter).rstrip("\n")


def plain_source(text: str) -> str:
    return text


def green(text: str) -> str:
    return colorize("green", text)


def bright_black(text: str) -> str:
    return colorize("brightblack", text)
