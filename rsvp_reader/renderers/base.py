"""Abstract base renderer with the math-typesetting fallback contract.

WHY: The player only emits display events; something has to turn them
into pixels or terminal output. Chunks containing "$" hold math that a
renderer may typeset, and typesetting can fail on malformed input. That
failure must never reach the player, so the fallback lives here once
instead of in every renderer.

HOW: BaseRenderer is an ABC with a ``name``, ``show()`` and ``clear()``.
``render()`` is the single entry point: empty text clears, plain text is
shown as is, and math text goes through ``typeset()``. Any exception
from ``typeset()`` is logged and the raw text is shown through
``escape()`` instead.

RULES:
- render() never raises because of typesetting, and never retries
- Subclasses MUST implement ``name``, ``show()`` and ``clear()``
- typeset() defaults to identity; escape() defaults to html.escape
- To add a renderer: subclass BaseRenderer, register in renderers/__init__.py
"""

from __future__ import annotations

import html
import logging
from abc import ABC, abstractmethod

from rsvp_reader.core.ir import DisplayEvent

logger = logging.getLogger(__name__)


class TypesetError(ValueError):
    """Raised by a renderer that cannot typeset a math chunk."""


class BaseRenderer(ABC):
    """Abstract base for all display-event consumers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable renderer name, e.g. 'Plain Text'."""

    @abstractmethod
    def show(self, content: str, event: DisplayEvent) -> None:
        """Display prepared content for the given event."""

    @abstractmethod
    def clear(self, event: DisplayEvent) -> None:
        """Blank the display (idle or empty sequence)."""

    def typeset(self, text: str) -> str:
        return text

    def escape(self, text: str) -> str:
        return html.escape(text)

    def render(self, event: DisplayEvent) -> None:
        """Display one event, falling back to raw text if typesetting fails.

        Args:
            event: The display event emitted by the player.
        """
        text = event.display_text
        if not text:
            self.clear(event)
            return
        if not event.has_math:
            self.show(text, event)
            return

        try:
            content = self.typeset(text)
        except Exception:
            logger.warning("Typesetting failed for %r; showing raw text", text, exc_info=True)
            content = self.escape(text)
        self.show(content, event)
