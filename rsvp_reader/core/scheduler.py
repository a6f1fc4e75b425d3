"""One-shot timer abstraction for the playback state machine.

WHY: The player must be drivable by the tkinter event loop in the GUI,
by a plain sleep loop in the terminal, and by a fake clock in tests.
Hiding the timer behind a two-method interface keeps the player free of
any particular event loop.

HOW: Scheduler is an ABC with call_later() and cancel(). Repeating
behaviour is built by the player re-arming a one-shot after every tick,
so there is never more than one pending callback per player.
  BlockingScheduler — heap of due callbacks run by a single-threaded loop
  TkScheduler (rsvp_reader.gui) — widget.after / widget.after_cancel

RULES:
- call_later() returns an opaque handle
- cancel() on a fired, cancelled or unknown handle is a no-op
- Callbacks never run concurrently with each other
"""

from __future__ import annotations

import heapq
import itertools
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Tuple


class Scheduler(ABC):
    """Abstract one-shot timer source."""

    @abstractmethod
    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> Any:
        """Run callback once after delay_ms milliseconds; return a handle."""

    @abstractmethod
    def cancel(self, handle: Any) -> None:
        """Cancel a pending callback. Unknown handles are ignored."""


class BlockingScheduler(Scheduler):
    """Single-threaded scheduler that sleeps until the next callback is due.

    WHY: The terminal reader has no event loop of its own. This class is
    the smallest loop that satisfies the Scheduler contract without
    threads, so ticks can never overlap.

    HOW: Pending callbacks live in a heap ordered by due time and a
    sequence number. cancel() removes the handle from the live set; the
    loop skips entries that are no longer live. run() returns once
    nothing is pending.

    RULES:
    - clock() returns seconds; sleep(seconds) blocks
    - Callbacks scheduled with equal due times fire in scheduling order
    - stop() drops every pending callback and makes run() return
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._clock = clock
        self._sleep = sleep
        self._heap: List[Tuple[float, int]] = []
        self._live: Dict[int, Callable[[], None]] = {}
        self._ids = itertools.count(1)

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> int:
        handle = next(self._ids)
        due = self._clock() + max(0.0, delay_ms) / 1000.0
        heapq.heappush(self._heap, (due, handle))
        self._live[handle] = callback
        return handle

    def cancel(self, handle: Any) -> None:
        self._live.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._live)

    def stop(self) -> None:
        self._live.clear()
        self._heap.clear()

    def run(self) -> None:
        """Fire callbacks in due order until none are pending."""
        while True:
            callback = self._next_due()
            if callback is None:
                return
            callback()

    def _next_due(self) -> Optional[Callable[[], None]]:
        while self._heap:
            due, handle = self._heap[0]
            if handle not in self._live:
                heapq.heappop(self._heap)
                continue
            wait = due - self._clock()
            if wait > 0:
                self._sleep(wait)
                # the head may have been cancelled while asleep
                continue
            heapq.heappop(self._heap)
            return self._live.pop(handle)
        return None
