"""RSVP Reader — rapid serial visual presentation speed-reading engine.

WHY: Reading word by word at a fixed point removes eye movement, so a
reader can take in text faster than by scanning lines. The engine turns
free-form text into short display units and reveals them one at a time
at a configurable words-per-minute rate.

HOW: Two-stage core — segment (text → immutable chunk sequence) and play
(timer-driven state machine emitting display events). Preferences,
renderers, the reader controller, the CLI and the tkinter GUI are thin
layers around that core.

RULES:
- The segmenter is a pure function; it keeps no state between calls
- The player owns its cursor, mode and timer handle; there are no
  module-level singletons
- Renderers never influence playback: a failed typeset is a display
  concern only
"""

__version__ = "0.1.0"
