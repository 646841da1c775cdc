"""
Tracker request / response schemas.

Record:   POST /tracker/water, /tracker/incident  → RecordEventRequest → DisplayResponse
Display:  GET  /tracker/display                    → DisplayResponse
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RecordEventRequest(BaseModel):
    """A water or incident event. Omit `now` to stamp it with the server clock."""
    now: Optional[int] = Field(
        default=None,
        ge=0,
        description="Event time in milliseconds since the Unix epoch.",
        examples=[1792411200000],
    )


class DisplayResponse(BaseModel):
    """Refreshed display after reading (and possibly bumping the high score)."""
    model_config = ConfigDict(from_attributes=True)

    now: int = Field(description="Evaluation time, ms since epoch.")
    last_water: Optional[int] = Field(
        default=None, description="Last water timestamp, ms since epoch."
    )
    last_water_text: str = Field(
        description='Human-readable last water time, or "No record yet".'
    )
    streak_days: Optional[int] = Field(
        default=None,
        description="Whole days since the last incident. Null if none recorded.",
    )
    streak_text: str = Field(description='Streak as text, or "No incident".')
    high_score: int = Field(description="Best streak ever observed, in days.")
    water_history: list[int] = Field(description="Water timestamps, most-recent-first.")
    water_history_text: list[str] = Field(
        description="Human-readable water history, same order."
    )
