"""User preference record and its JSON file store.

WHY: Reading speed, night mode and the merge toggle should survive a
restart. Storage problems must never stop someone from reading, so a
broken or missing file quietly falls back to defaults and a failed
write only gets logged.

HOW: Preferences is a small dataclass. PreferenceStore reads and writes
one flat JSON object, validating it against preferences_schema.json
with jsonschema before trusting it. The whole object is written on
every save.

RULES:
- Keys: speed (int 1..2000), night (bool), merge (bool); all required
- Missing file → defaults, silently
- Unreadable file, invalid JSON or schema violation → defaults + warning
- save() never raises; it returns False and logs on OSError
- No partial updates, no versioning
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema

from rsvp_reader.config import DEFAULT_PREFERENCES

logger = logging.getLogger(__name__)

_SCHEMA_PATH = Path(__file__).resolve().parent / "preferences_schema.json"

_CACHED_SCHEMA: Optional[dict] = None


def _get_schema() -> dict:
    """Load and cache the preference JSON schema."""
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        with open(_SCHEMA_PATH, encoding="utf-8") as f:
            _CACHED_SCHEMA = json.load(f)
    return _CACHED_SCHEMA


@dataclass
class Preferences:
    """The persisted preference record.

    RULES:
    - speed: words per minute
    - night: display theme flag, passed through untouched by the core
    - merge: enables short-word merging in the segmenter
    """

    speed: int = DEFAULT_PREFERENCES["speed"]
    night: bool = DEFAULT_PREFERENCES["night"]
    merge: bool = DEFAULT_PREFERENCES["merge"]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Preferences":
        """Build a record from a dict that has already passed validation."""
        # the schema's "integer" also admits 200.0
        return cls(speed=int(data["speed"]), night=data["night"], merge=data["merge"])


def validate_preferences(data: Any) -> None:
    """Raise jsonschema.ValidationError if data is not a valid record."""
    jsonschema.validate(instance=data, schema=_get_schema())


class PreferenceStore:
    """Flat JSON file holding one Preferences record.

    WHY: The reader only ever needs "load once at startup" and "write it
    all back after a change". A class keeps the path in one place and
    lets tests point the store at a temp directory.

    HOW: load() reads and validates; save() serialises the whole record.
    Both swallow and log storage errors so callers never need a try.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> Preferences:
        """Read the stored record, or defaults if there is nothing usable."""
        if not self.path.is_file():
            return Preferences()

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            validate_preferences(data)
        except (OSError, ValueError) as exc:
            logger.warning("Could not load preferences from %s: %s", self.path, exc)
            return Preferences()
        except jsonschema.ValidationError as exc:
            logger.warning("Ignoring invalid preferences in %s: %s", self.path, exc.message)
            return Preferences()

        return Preferences.from_dict(data)

    def save(self, prefs: Preferences) -> bool:
        """Write the whole record. Returns False if the write failed."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(prefs.to_dict()), encoding="utf-8")
        except OSError:
            logger.warning("Could not save preferences to %s", self.path, exc_info=True)
            return False
        return True
