"""Intermediate representation dataclasses for chunks and playback events.

WHY: The segmenter, the player and the renderers need one shared,
well-typed vocabulary. Chunks flow from the segmenter to the player;
display events and progress updates flow from the player to whatever
draws them. Keeping these in one module decouples the three.

HOW: Frozen dataclasses for the values that cross component boundaries,
plus the PlayerMode enum for the playback state machine:
  Chunk          — one display unit (word group or math span)
  DisplayEvent   — what the renderer should show right now
  ProgressUpdate — position for a progress indicator
  PlayerMode     — IDLE, RUNNING, PAUSED

RULES:
- All dataclasses are frozen; a chunk sequence is a tuple
- DisplayEvent.current_ordinal is 1-based, 0 when idle or empty
- A display event containing "$" asks the renderer to typeset math
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Chunk:
    """A single display unit produced by the segmenter.

    RULES:
    - text: non-empty after stripping; may hold a $...$ or $$...$$ span
    - sentence_end: True if the chunk (after merging) ends with "."
    """

    text: str
    sentence_end: bool = False

    @property
    def is_math(self) -> bool:
        return self.text.startswith("$")


ChunkSequence = Tuple[Chunk, ...]


@dataclass(frozen=True)
class DisplayEvent:
    """What the renderer should show.

    Attributes:
        display_text: The chunk text, or "" to clear the display.
        current_ordinal: 1-based position of the shown chunk, 0 when idle.
        total: Number of chunks in the loaded sequence.
    """

    display_text: str
    current_ordinal: int
    total: int

    @property
    def has_math(self) -> bool:
        return "$" in self.display_text

    @classmethod
    def empty(cls, total: int = 0) -> "DisplayEvent":
        return cls(display_text="", current_ordinal=0, total=total)


@dataclass(frozen=True)
class ProgressUpdate:
    current: int
    total: int


class PlayerMode(str, enum.Enum):
    """Playback states.

    WHY: Tick scheduling depends on whether the player is running; an
    enum makes the transitions explicit and prints cleanly in logs.

    RULES:
    - idle: nothing scheduled, fresh or finished sequence
    - running: exactly one tick is scheduled
    - paused: stopped by the user or by a scrub, cursor kept
    """

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
