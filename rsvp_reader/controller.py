"""Reader controller — translates UI intents into player operations.

WHY: Buttons, keys, checkboxes and the progress slider all want to poke
the player, and several of them also change preferences. Putting that
translation in one toolkit-free class keeps the GUI a thin wiring layer
and makes every gesture testable without a display.

HOW: ReaderController owns a Player, the current text, the preference
record and its store. It loads preferences once at construction, starts
the player at the stored speed, and persists every preference change
(including accepted rate changes reported by the player).

RULES:
- Text edits re-segment immediately and reset the cursor
- "Read!" re-segments if the text changed since the last start, rewinds
  a finished text, enters the reading view and plays
- Play/pause and step-back keys only act while in the reading view
- A running player is paused for a scrub gesture and resumed after it
- Rejected rates leave everything unchanged; submit_rate() returns the
  value the UI should show
- Preference write failures are logged by the store and otherwise ignored
"""

from __future__ import annotations

import logging
from typing import Optional

from rsvp_reader.config import SPEED_STEP, STEP_BACK_CHUNKS
from rsvp_reader.core.ir import PlayerMode
from rsvp_reader.core.player import DisplayListener, Player, ProgressListener
from rsvp_reader.core.scheduler import Scheduler
from rsvp_reader.core.segmenter import segment
from rsvp_reader.preferences import Preferences, PreferenceStore

logger = logging.getLogger(__name__)


class ReaderController:
    """UI-framework-agnostic adapter around a Player and a PreferenceStore."""

    def __init__(
        self,
        scheduler: Scheduler,
        store: PreferenceStore,
        on_display: Optional[DisplayListener] = None,
        on_progress: Optional[ProgressListener] = None,
    ) -> None:
        self._store = store
        self.prefs: Preferences = store.load()
        self.player = Player(
            scheduler,
            rate_wpm=self.prefs.speed,
            on_display=on_display,
            on_progress=on_progress,
            on_rate_changed=self._persist_speed,
        )
        self.text = ""
        self.prepared = False
        self.reading_view = False
        self._resume_after_scrub = False

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def set_text(self, text: str) -> None:
        """The input text changed: re-segment and start over."""
        self.text = text
        self._prepare()
        self.prepared = False

    def _prepare(self) -> None:
        self.player.load(segment(self.text, self.prefs.merge))

    def start_reading(self) -> bool:
        """Enter the reading view and play.

        Returns:
            False if there is no text to read.
        """
        if not self.prepared:
            if not self.text.strip():
                return False
            self._prepare()
            self.prepared = True

        if self.player.finished:
            self.player.rewind()

        self.reading_view = True
        return self.player.play()

    def new_text(self) -> None:
        """Leave the reading view and clear the display."""
        self.reading_view = False
        self._resume_after_scrub = False
        self.player.reset()
        self.prepared = False

    # ------------------------------------------------------------------
    # Play / pause
    # ------------------------------------------------------------------

    def press_start(self) -> bool:
        """The Read!/Pause button."""
        if self.player.is_running:
            self.player.pause()
            return True
        return self.start_reading()

    def toggle_play(self) -> None:
        """The play/pause key; ignored outside the reading view."""
        if not self.reading_view:
            return
        if self.player.is_running:
            self.player.pause()
        else:
            self.player.play()

    # ------------------------------------------------------------------
    # Rate
    # ------------------------------------------------------------------

    def change_rate(self, delta: int = SPEED_STEP) -> bool:
        return self.player.set_rate(self.player.rate_wpm + delta)

    def submit_rate(self, raw: str) -> int:
        """Apply a typed rate.

        Returns:
            The rate the UI should display: the new one if accepted,
            otherwise the last valid one.
        """
        try:
            rate = int(str(raw).strip())
        except ValueError:
            logger.debug("Ignoring non-numeric rate %r", raw)
            return self.player.rate_wpm
        self.player.set_rate(rate)
        return self.player.rate_wpm

    def _persist_speed(self, rate: int) -> None:
        self.prefs.speed = rate
        self._store.save(self.prefs)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def step_back(self, n: int = STEP_BACK_CHUNKS) -> None:
        if not self.reading_view:
            return
        self.player.step_back(n)

    def begin_scrub(self) -> None:
        """The slider was grabbed: pause a running player for the gesture."""
        if self.player.mode is PlayerMode.RUNNING:
            self.player.pause()
            self._resume_after_scrub = True

    def preview_scrub(self, ordinal: int) -> None:
        self.player.preview(ordinal)

    def end_scrub(self, ordinal: int) -> None:
        """The slider was released at a 1-based position."""
        self.player.seek(ordinal)
        if self._resume_after_scrub:
            self._resume_after_scrub = False
            self.player.play()

    # ------------------------------------------------------------------
    # Preferences
    # ------------------------------------------------------------------

    def set_merge(self, enabled: bool) -> None:
        self.prefs.merge = bool(enabled)
        self._store.save(self.prefs)
        self._prepare()

    def set_night(self, enabled: bool) -> None:
        self.prefs.night = bool(enabled)
        self._store.save(self.prefs)
