"""Playback state machine: timing, pause/resume, seek, rate changes, lookback.

WHY: Reading pace is the whole product. The player owns the chunk
sequence, the cursor and the one live timer, and it is the only place
where a tick, a rate change or a scrub can move the cursor. Keeping it
free of any UI toolkit lets the GUI, the terminal and tests drive the
same object.

HOW: A Player instance holds the sequence, a cursor (index of the *next*
chunk), a PlayerMode and a rate. Ticks come from a Scheduler one-shot
that the player re-arms after every tick; every re-arm goes through
_reschedule(), which cancels the pending handle before scheduling a new
one. After a sentence-ending chunk the next tick is delayed by an extra
half interval in that same single reschedule. Display events and
progress updates are pushed to plain callables.

RULES:
- 0 <= cursor <= len(sequence) at all times
- mode == RUNNING  <=>  exactly one tick is scheduled
- interval_ms = 60000 / rate_wpm; sentence ends wait interval_ms * 1.5
- set_rate() accepts ints in (0, 2000]; anything else leaves state alone
- seek() and step_back() clamp instead of failing
- tick() is not reentrant; a tick requested from inside a listener is
  ignored
- Rendering outcomes never feed back into the player
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional

from rsvp_reader.config import (
    DEFAULT_SPEED,
    MAX_SPEED,
    MS_PER_MINUTE,
    SENTENCE_PAUSE_FACTOR,
    STEP_BACK_CHUNKS,
)
from rsvp_reader.core.ir import (
    Chunk,
    ChunkSequence,
    DisplayEvent,
    PlayerMode,
    ProgressUpdate,
)
from rsvp_reader.core.scheduler import Scheduler

logger = logging.getLogger(__name__)

DisplayListener = Callable[[DisplayEvent], None]
ProgressListener = Callable[[ProgressUpdate], None]
RateListener = Callable[[int], None]


def is_valid_rate(rate: Any) -> bool:
    """True for an int rate in (0, MAX_SPEED]; bools are not rates."""
    if isinstance(rate, bool) or not isinstance(rate, int):
        return False
    return 0 < rate <= MAX_SPEED


class Player:
    """Timer-driven RSVP playback controller.

    WHY: Chunk list, cursor and timer handle change together. Holding
    them in one object with a single reschedule path rules out a second
    live timer (e.g. one started for a sentence pause) and lets tests
    call tick() directly.

    HOW: Listeners are optional attributes and may be swapped after
    construction. on_rate_changed receives every accepted rate so the
    caller can persist it.

    RULES:
    - load() resets cursor and mode and cancels the timer
    - play() on a finished or empty sequence rewinds and stays IDLE
    - pause() never moves the cursor
    - step_back() keeps a running player running, re-arming once; it
      reads as PAUSED to listeners while it shows the new chunk
    """

    def __init__(
        self,
        scheduler: Scheduler,
        rate_wpm: int = DEFAULT_SPEED,
        on_display: Optional[DisplayListener] = None,
        on_progress: Optional[ProgressListener] = None,
        on_rate_changed: Optional[RateListener] = None,
    ) -> None:
        if not is_valid_rate(rate_wpm):
            raise ValueError("Invalid reading rate: {!r}".format(rate_wpm))
        self._scheduler = scheduler
        self._sequence: ChunkSequence = ()
        self._cursor = 0
        self._mode = PlayerMode.IDLE
        self._rate_wpm = rate_wpm
        self._handle: Any = None
        self._in_tick = False
        self._resume_pending = False

        self.on_display = on_display
        self.on_progress = on_progress
        self.on_rate_changed = on_rate_changed

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def sequence(self) -> ChunkSequence:
        return self._sequence

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def mode(self) -> PlayerMode:
        return self._mode

    @property
    def rate_wpm(self) -> int:
        return self._rate_wpm

    @property
    def interval_ms(self) -> float:
        return MS_PER_MINUTE / self._rate_wpm

    @property
    def total(self) -> int:
        return len(self._sequence)

    @property
    def finished(self) -> bool:
        return self._cursor >= len(self._sequence)

    @property
    def is_running(self) -> bool:
        return self._mode is PlayerMode.RUNNING

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def load(self, sequence: Iterable[Chunk]) -> None:
        """Replace the sequence wholesale and return to IDLE at the start."""
        self._cancel_timer()
        self._sequence = tuple(sequence)
        self._cursor = 0
        self._mode = PlayerMode.IDLE
        logger.debug("Loaded %d chunks", len(self._sequence))
        self._emit_progress(0)

    def play(self) -> bool:
        """Start ticking from the current cursor.

        Returns:
            True if the player is now running, False if there was
            nothing left to play (cursor rewound, mode IDLE).
        """
        if self.finished:
            self._cancel_timer()
            self._mode = PlayerMode.IDLE
            self._cursor = 0
            self._emit_progress(0)
            return False

        self._mode = PlayerMode.RUNNING
        self._reschedule(self.interval_ms)
        logger.debug("Playing from %d at %d wpm", self._cursor, self._rate_wpm)
        return True

    def pause(self) -> None:
        self._cancel_timer()
        self._resume_pending = False
        self._mode = PlayerMode.PAUSED
        logger.debug("Paused at %d", self._cursor)

    def tick(self) -> None:
        """Show the chunk under the cursor and advance.

        When the cursor is already past the last chunk, the timer is
        cancelled, the player goes IDLE and the last chunk is shown again
        with the final count.
        """
        if self._in_tick:
            return
        self._in_tick = True
        try:
            total = len(self._sequence)
            if self._cursor >= total:
                self._cancel_timer()
                self._mode = PlayerMode.IDLE
                last_text = self._sequence[-1].text if total else ""
                self._emit(DisplayEvent(last_text, total, total))
                logger.debug("Finished %d chunks", total)
                return

            chunk = self._sequence[self._cursor]
            self._cursor += 1
            self._emit(DisplayEvent(chunk.text, self._cursor, total))

            # listeners may have paused us
            if self._mode is PlayerMode.RUNNING:
                delay = self.interval_ms
                if chunk.sentence_end:
                    delay += self.interval_ms * SENTENCE_PAUSE_FACTOR
                self._reschedule(delay)
        finally:
            self._in_tick = False

    def set_rate(self, rate_wpm: Any) -> bool:
        """Change the reading rate.

        Returns:
            False (state unchanged) if the rate is rejected, else True.
        """
        if not is_valid_rate(rate_wpm):
            logger.debug("Rejected reading rate %r", rate_wpm)
            return False

        self._rate_wpm = rate_wpm
        if self._mode is PlayerMode.RUNNING:
            self._reschedule(self.interval_ms)
        if self.on_rate_changed is not None:
            self.on_rate_changed(rate_wpm)
        return True

    def seek(self, target: int) -> None:
        """Move the cursor to target (clamped) and show the chunk before it."""
        total = len(self._sequence)
        target = max(0, min(int(target), total))
        self._cursor = target
        if total:
            shown = self._sequence[max(0, target - 1)]
            self._emit(DisplayEvent(shown.text, target, total))
        else:
            self._emit(DisplayEvent.empty())

    def step_back(self, n: int = STEP_BACK_CHUNKS) -> None:
        """Rewind n chunks and show the chunk that will be read next."""
        was_running = self._mode is PlayerMode.RUNNING
        if was_running:
            self._cancel_timer()
            self._mode = PlayerMode.PAUSED
            self._resume_pending = True

        self._cursor = max(0, self._cursor - max(0, int(n)))
        total = len(self._sequence)
        if self._cursor < total:
            shown = self._sequence[self._cursor]
            self._emit(DisplayEvent(shown.text, self._cursor + 1, total))
        else:
            self._emit(DisplayEvent.empty(total))

        # a listener may have paused, replayed or reloaded meanwhile
        if was_running:
            if self._resume_pending and self._mode is PlayerMode.PAUSED:
                self._mode = PlayerMode.RUNNING
                self._reschedule(self.interval_ms)
            self._resume_pending = False

    def rewind(self) -> None:
        self._cursor = 0
        self._emit_progress(0)

    def reset(self) -> None:
        """Stop, rewind and clear the display, keeping the sequence."""
        self._cancel_timer()
        self._cursor = 0
        self._mode = PlayerMode.IDLE
        self._emit(DisplayEvent.empty(len(self._sequence)))

    def preview(self, ordinal: int) -> None:
        """Show the chunk at a 1-based position without moving the cursor."""
        total = len(self._sequence)
        if 1 <= ordinal <= total:
            self._emit(DisplayEvent(self._sequence[ordinal - 1].text, ordinal, total))

    # ------------------------------------------------------------------
    # Timer
    # ------------------------------------------------------------------

    def _reschedule(self, delay_ms: float) -> None:
        self._cancel_timer()
        self._handle = self._scheduler.call_later(delay_ms, self._on_timer)

    def _cancel_timer(self) -> None:
        if self._handle is not None:
            self._scheduler.cancel(self._handle)
            self._handle = None

    def _on_timer(self) -> None:
        self._handle = None
        self.tick()

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def _emit(self, event: DisplayEvent) -> None:
        if self.on_display is not None:
            self.on_display(event)
        self._emit_progress(event.current_ordinal)

    def _emit_progress(self, current: int) -> None:
        if self.on_progress is not None:
            self.on_progress(ProgressUpdate(current=current, total=len(self._sequence)))
