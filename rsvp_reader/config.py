"""Configuration constants, preference defaults, and .env loading.

WHY: Centralizes the reading-rate limits, navigation steps, and file
locations so they are easy to find and override. The numbers here are
shared by the player, the controller, the GUI and the CLI.

HOW: python-dotenv loads the .env file on import. Constants are plain
module-level values. preferences_path() resolves the preference file
location at call time so tests and the CLI can point it elsewhere.

RULES:
- Rates are integers in words per minute, valid range MIN_SPEED..MAX_SPEED
- DEFAULT_PREFERENCES is the record used when nothing valid is stored
- RSVP_PREFS_PATH overrides the preference file location
- RSVP_LOG_LEVEL overrides the CLI log level
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

from dotenv import load_dotenv

# Load .env from the project root (where the app is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Reading rate
# ---------------------------------------------------------------------------

DEFAULT_SPEED = 200
MIN_SPEED = 1
MAX_SPEED = 2000

SPEED_STEP = 25
"""Rate change applied by the faster/slower keys."""

MS_PER_MINUTE = 60000

SENTENCE_PAUSE_FACTOR = 0.5
"""Extra delay after a sentence-ending chunk, as a fraction of the interval."""

STEP_BACK_CHUNKS = 10
"""How far the "back" key rewinds, in chunks."""

# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------

DEFAULT_PREFERENCES: Dict[str, Any] = {
    "speed": DEFAULT_SPEED,
    "night": False,
    "merge": True,
}

_DEFAULT_PREFS_PATH = Path.home() / ".rsvp_reader" / "prefs.json"

LOG_LEVEL = os.getenv("RSVP_LOG_LEVEL", "").strip().upper()


def preferences_path() -> Path:
    """Return the preference file location.

    RULES:
    - RSVP_PREFS_PATH wins when set and non-empty
    - Otherwise ~/.rsvp_reader/prefs.json
    """
    override = os.getenv("RSVP_PREFS_PATH", "").strip()
    if override:
        return Path(override).expanduser()
    return _DEFAULT_PREFS_PATH
