"""
Tracker core: water events, incidents, streak and high score.

Rules
-----
- The store is passed in explicitly; nothing here touches a global.
- Stored values are plain strings under four fixed keys (layout below).
- Missing or malformed values read as absent/default and never raise.
- The streak is a view: recomputed from the last incident on every read.
- The high score only moves up, and only on a strictly greater streak.

Public API
----------
Tracker(store, display_tz="UTC")
  .record_water(now)                 -> None
  .record_incident(now)              -> None
  .current_streak_days(now)          -> int | None
  .refresh_high_score(streak)        -> int
  .refresh(now)                      -> DisplayModel
  .last_water() / .last_incident()   -> int | None
  .water_history()                   -> list[int]
  .high_score()                      -> int
"""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Optional

from dogcare.services.store import KeyValueStore
from dogcare.services.timefmt import MS_PER_DAY, format_datetime, resolve_zone

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Persisted key layout
# ---------------------------------------------------------------------------

WATER_KEY = "dogcare_lastWaterTimestamp"
INCIDENT_KEY = "dogcare_lastIncidentTimestamp"
WATER_HISTORY_KEY = "dogcare_waterHistory"
HIGH_SCORE_KEY = "dogcare_highScore"

NO_WATER_TEXT = "No record yet"
NO_INCIDENT_TEXT = "No incident"


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------

@dataclass
class DisplayModel:
    """Everything the display sink needs after one refresh."""
    now: int
    last_water: Optional[int]
    last_water_text: str
    streak_days: Optional[int]
    streak_text: str
    high_score: int
    water_history: list[int]
    water_history_text: list[str]


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------

# ASCII digits with an optional leading minus; nothing else int() would take.
_DECIMAL_RE = re.compile(r"-?[0-9]+")


def _parse_int(raw: Optional[str], key: str) -> Optional[int]:
    if raw is None or raw == "":
        return None
    text = raw.strip()
    if not _DECIMAL_RE.fullmatch(text):
        logger.warning("Ignoring malformed value for %s: %r", key, raw)
        return None
    return int(text)


def _parse_history(raw: Optional[str]) -> list[int]:
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except (ValueError, TypeError):
        logger.warning("Ignoring malformed water history: %r", raw)
        return []
    if not isinstance(parsed, list):
        logger.warning("Water history is not a list: %r", raw)
        return []

    history: list[int] = []
    for item in parsed:
        if isinstance(item, bool):
            continue
        if isinstance(item, int):
            history.append(item)
        elif isinstance(item, float) and item.is_integer():
            history.append(int(item))
    if len(history) != len(parsed):
        logger.warning(
            "Dropped %d non-integer water history entries", len(parsed) - len(history)
        )
    return history


def _dump_history(history: list[int]) -> str:
    return json.dumps(history, separators=(",", ":"))


# ---------------------------------------------------------------------------
# Core
# ---------------------------------------------------------------------------

class Tracker:
    def __init__(self, store: KeyValueStore, display_tz: str = "UTC"):
        resolve_zone(display_tz)
        self.store = store
        self.display_tz = display_tz

    # --- reads ---

    def last_water(self) -> Optional[int]:
        return _parse_int(self.store.get(WATER_KEY), WATER_KEY)

    def last_incident(self) -> Optional[int]:
        return _parse_int(self.store.get(INCIDENT_KEY), INCIDENT_KEY)

    def water_history(self) -> list[int]:
        return _parse_history(self.store.get(WATER_HISTORY_KEY))

    def high_score(self) -> int:
        value = _parse_int(self.store.get(HIGH_SCORE_KEY), HIGH_SCORE_KEY)
        return value if value is not None else 0

    # --- writes ---

    def record_water(self, now: int) -> None:
        self.store.set(WATER_KEY, str(now))
        history = self.water_history()
        history.insert(0, now)
        self.store.set(WATER_HISTORY_KEY, _dump_history(history))
        logger.info("Water recorded at %d (history size %d)", now, len(history))

    def record_incident(self, now: int) -> None:
        self.store.set(INCIDENT_KEY, str(now))
        logger.info("Incident recorded at %d", now)

    # --- streak & high score ---

    def current_streak_days(self, now: int) -> Optional[int]:
        """Whole days since the last incident, or None if there never was one."""
        incident = self.last_incident()
        if incident is None:
            return None
        delta = now - incident
        if delta < 0:
            # Incident stamped after `now` (clock moved backwards).
            logger.warning(
                "Last incident %d is after now %d; clamping streak to 0", incident, now
            )
            return 0
        return delta // MS_PER_DAY

    def refresh_high_score(self, current_streak: int) -> int:
        high = self.high_score()
        if current_streak > high:
            self.store.set(HIGH_SCORE_KEY, str(current_streak))
            logger.info("New high score: %d days (was %d)", current_streak, high)
            return current_streak
        return high

    def refresh(self, now: int) -> DisplayModel:
        """
        Recompute the display. Bumps the high score when a streak exists;
        never touches the timestamps or the history.
        """
        last_water = self.last_water()
        streak = self.current_streak_days(now)
        if streak is not None:
            high = self.refresh_high_score(streak)
        else:
            high = self.high_score()
        history = self.water_history()

        return DisplayModel(
            now=now,
            last_water=last_water,
            last_water_text=(
                format_datetime(last_water, self.display_tz)
                if last_water is not None else NO_WATER_TEXT
            ),
            streak_days=streak,
            streak_text=str(streak) if streak is not None else NO_INCIDENT_TEXT,
            high_score=high,
            water_history=history,
            water_history_text=[format_datetime(ts, self.display_tz) for ts in history],
        )
