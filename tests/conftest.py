"""Shared test fixtures for the rsvp_reader test suite.

WHY: Player, controller and CLI tests all need a timer they can drive
by hand and a way to capture the events the player emits. Centralizing
those helpers keeps every test deterministic and free of real sleeps.

HOW: FakeScheduler implements the Scheduler contract on a manual clock:
advance(ms) fires every callback that falls due, in order, including
callbacks scheduled by earlier callbacks. EventRecorder collects display
events and progress updates. The store fixture points a PreferenceStore
at a temp file.

RULES:
- No test sleeps; time only moves through FakeScheduler.advance()
- FakeScheduler.delays records every requested delay, in order
"""

from __future__ import annotations

import itertools
from typing import Any, Callable, Dict, List, Tuple

import pytest

from rsvp_reader.core.ir import Chunk, DisplayEvent, ProgressUpdate
from rsvp_reader.core.scheduler import Scheduler
from rsvp_reader.preferences import PreferenceStore


class FakeScheduler(Scheduler):
    """Manual-clock scheduler for tests."""

    def __init__(self) -> None:
        self.now = 0.0
        self.delays: List[float] = []
        self._pending: Dict[int, Tuple[float, Callable[[], None]]] = {}
        self._ids = itertools.count(1)

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> int:
        handle = next(self._ids)
        self._pending[handle] = (self.now + delay_ms, callback)
        self.delays.append(delay_ms)
        return handle

    def cancel(self, handle: Any) -> None:
        self._pending.pop(handle, None)

    @property
    def live(self) -> int:
        return len(self._pending)

    def next_delay(self) -> float:
        due = min(d for d, _ in self._pending.values())
        return due - self.now

    def advance(self, ms: float) -> None:
        """Move the clock forward, firing callbacks as they fall due."""
        target = self.now + ms
        while self._pending:
            handle, (due, callback) = min(
                self._pending.items(), key=lambda item: (item[1][0], item[0])
            )
            if due > target:
                break
            del self._pending[handle]
            self.now = due
            callback()
        self.now = target

    def fire_next(self) -> None:
        self.advance(self.next_delay())


class EventRecorder:
    """Collects display events and progress updates from a player."""

    def __init__(self) -> None:
        self.displays: List[DisplayEvent] = []
        self.progress: List[ProgressUpdate] = []

    def on_display(self, event: DisplayEvent) -> None:
        self.displays.append(event)

    def on_progress(self, update: ProgressUpdate) -> None:
        self.progress.append(update)

    @property
    def texts(self) -> List[str]:
        return [e.display_text for e in self.displays]

    @property
    def last(self) -> DisplayEvent:
        return self.displays[-1]


def _make_chunks(*texts: str) -> Tuple[Chunk, ...]:
    """Build chunks, marking sentence ends by a trailing period."""
    return tuple(Chunk(text=t, sentence_end=t.endswith(".")) for t in texts)


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def make_scheduler():
    """Factory for tests that need more than one independent clock."""
    return FakeScheduler


@pytest.fixture
def recorder():
    return EventRecorder()


@pytest.fixture
def make_chunks():
    """Factory: make_chunks("a", "b.") → chunks with sentence ends by period."""
    return _make_chunks


@pytest.fixture
def store(tmp_path):
    return PreferenceStore(tmp_path / "prefs.json")
