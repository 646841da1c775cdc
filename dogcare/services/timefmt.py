"""
Clock and human-readable timestamp helpers.

Timestamps everywhere are integer milliseconds since the Unix epoch.
"""
from __future__ import annotations

from datetime import date, datetime, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo

MS_PER_DAY = 86_400_000


def now_ms() -> int:
    return int(datetime.now(tz=timezone.utc).timestamp() * 1000)


def to_datetime(ms: int, tz: str = "UTC") -> datetime:
    return datetime.fromtimestamp(ms / 1000, tz=_zone(tz))


def format_datetime(ms: int, tz: str = "UTC") -> str:
    """Medium date, short time: 'Oct 19, 2026, 3:04 PM'."""
    try:
        dt = to_datetime(ms, tz)
    except (OverflowError, OSError, ValueError):
        return str(ms)
    hour = dt.hour % 12 or 12
    return f"{dt:%b} {dt.day}, {dt.year}, {hour}:{dt:%M} {dt:%p}"


def utc_date(ms: int) -> date:
    return to_datetime(ms, "UTC").date()


def resolve_zone(name: str):
    """Raises ZoneInfoNotFoundError for an unknown zone name."""
    return _zone(name)


@lru_cache(maxsize=16)
def _zone(name: str):
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)
