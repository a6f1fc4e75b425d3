"""Terminal renderer that rewrites a single status line per chunk.

WHY: The CLI reader needs the simplest possible display: one line that
always shows the current chunk and its position, without scrolling the
terminal by one line per word.

HOW: Every event rewrites the current line with a carriage return and
an erase-line escape, followed by "[i/N] text". Math spans are
"typeset" by dropping their $ / $$ delimiters and replacing a handful of
common TeX commands with Unicode symbols.

RULES:
- Output format: "\\r\\x1b[2K[i/N] text", flushed immediately
- Unbalanced "$" after stripping spans → TypesetError (raw text shown)
- Unknown TeX commands are left as written
- escape() returns the raw text (no markup in a terminal)
- finish() ends the line so the shell prompt starts on a fresh one
"""

from __future__ import annotations

import re
import sys
from typing import Dict, Optional, TextIO

from rsvp_reader.core.ir import DisplayEvent
from rsvp_reader.renderers.base import BaseRenderer, TypesetError

_CLEAR_LINE = "\r\x1b[2K"

_MATH_SPAN_RE = re.compile(r"\$\$(.+?)\$\$|\$(.+?)\$")

_TEX_COMMAND_RE = re.compile(r"\\([A-Za-z]+)")

_TEX_SYMBOLS: Dict[str, str] = {
    "alpha": "α",
    "beta": "β",
    "gamma": "γ",
    "delta": "δ",
    "lambda": "λ",
    "mu": "μ",
    "pi": "π",
    "sigma": "σ",
    "theta": "θ",
    "cdot": "·",
    "times": "×",
    "le": "≤",
    "leq": "≤",
    "ge": "≥",
    "geq": "≥",
    "neq": "≠",
    "infty": "∞",
    "sum": "∑",
    "sqrt": "√",
    "to": "→",
}


def _replace_commands(math: str) -> str:
    return _TEX_COMMAND_RE.sub(
        lambda m: _TEX_SYMBOLS.get(m.group(1), m.group(0)), math
    )


def typeset_math(text: str) -> str:
    """Render $...$ and $$...$$ spans as plain Unicode text.

    Raises:
        TypesetError: if a "$" is left over after replacing the spans.
    """
    typeset = _MATH_SPAN_RE.sub(
        lambda m: _replace_commands(m.group(1) or m.group(2)), text
    )
    if "$" in typeset:
        raise TypesetError("Unbalanced math delimiter in {!r}".format(text))
    return typeset


class PlainTextRenderer(BaseRenderer):
    """Renderer for an ANSI terminal."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream if stream is not None else sys.stdout

    @property
    def name(self) -> str:
        return "Plain Text"

    def typeset(self, text: str) -> str:
        return typeset_math(text)

    def escape(self, text: str) -> str:
        return text

    def show(self, content: str, event: DisplayEvent) -> None:
        self._stream.write("{}[{}/{}] {}".format(
            _CLEAR_LINE, event.current_ordinal, event.total, content,
        ))
        self._stream.flush()

    def clear(self, event: DisplayEvent) -> None:
        self._stream.write(_CLEAR_LINE)
        self._stream.flush()

    def finish(self) -> None:
        self._stream.write("\n")
        self._stream.flush()
