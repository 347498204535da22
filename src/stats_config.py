"""
Shared settings. Read once at import; environment variables override the defaults.

  ANKISTATS_TIMEZONE       zone used for day boundaries (default America/Chicago)
  ANKISTATS_ROLLOVER_HOUR  local hour at which a new day starts (default 4)
  ANKI_DATABASE_PATH       collection used when the CLI is given no path
"""
from __future__ import annotations

import os

TIMEZONE: str = os.environ.get("ANKISTATS_TIMEZONE", "America/Chicago")

# Days start at 4 AM instead of midnight; late-night review counts for the previous day
ROLLOVER_HOUR: int = int(os.environ.get("ANKISTATS_ROLLOVER_HOUR", "4"))

DEFAULT_COLLECTION_PATH: str | None = os.environ.get("ANKI_DATABASE_PATH") or None

# Anki joins nested deck names with the unit separator: "Bible::Verses" is stored as "Bible\x1fVerses"
DECK_NAME = "Bible\x1fVerses"
NOTE_TYPE_NAME = "Bible Verse"

# Anki's own threshold for a "mature" card
MATURE_INTERVAL_DAYS = 21
