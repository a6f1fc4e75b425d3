"""Renderer registry — pluggable display-event consumers.

WHY: The CLI picks a renderer by name, and new outputs (another
terminal style, a different widget) should not require touching the
player. A central dict keeps that to one import and one line.

HOW: RENDERERS maps string keys to renderer *classes* (not instances).
Callers instantiate as needed: ``renderer = RENDERERS["plain_text"]()``.
The tkinter label renderer lives in rsvp_reader.gui because it needs a
widget.

RULES:
- Keys are snake_case identifiers (used in CLI flags)
- Every renderer listed here must be importable without a display
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rsvp_reader.renderers.plain_text import PlainTextRenderer

if TYPE_CHECKING:
    from rsvp_reader.renderers.base import BaseRenderer

RENDERERS: dict[str, type[BaseRenderer]] = {
    "plain_text": PlainTextRenderer,
}
