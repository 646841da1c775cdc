"""
Tracker router.

POST /tracker/water        record a water event
POST /tracker/incident     record an incident (resets the streak)
GET  /tracker/display      refreshed display model
GET  /tracker/export       CSV download of all records
"""
from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from dogcare.core.config import settings
from dogcare.db.base import get_db
from dogcare.schemas.common import ErrorResponse, ValidationErrorResponse
from dogcare.schemas.tracker import DisplayResponse, RecordEventRequest
from dogcare.services.export import EXPORT_MIME_TYPE, build_export, export_filename
from dogcare.services.store import SqlKeyValueStore
from dogcare.services.timefmt import now_ms
from dogcare.services.tracker import DisplayModel, Tracker

router = APIRouter(prefix="/tracker", tags=["tracker"])

_ERRORS = {
    422: {"model": ValidationErrorResponse, "description": "Invalid timestamp."},
    503: {"model": ErrorResponse, "description": "State store unreachable."},
}


# ---------------------------------------------------------------------------
# Dependencies & serialization
# ---------------------------------------------------------------------------

def get_tracker(db: Session = Depends(get_db)) -> Tracker:
    return Tracker(SqlKeyValueStore(db), display_tz=settings.DISPLAY_TIMEZONE)


def _display_to_response(d: DisplayModel) -> DisplayResponse:
    return DisplayResponse.model_validate(d)


NowParam = Annotated[Optional[int], Query(
    ge=0,
    description="Evaluation time in ms since epoch. Defaults to the server clock.",
    examples=[1792411200000],
)]


# ---------------------------------------------------------------------------
# POST /tracker/water, /tracker/incident
# ---------------------------------------------------------------------------

@router.post(
    "/water",
    response_model=DisplayResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record that water was given",
    responses=_ERRORS,
)
def record_water(
    payload: Optional[RecordEventRequest] = None,
    tracker: Tracker = Depends(get_tracker),
):
    """
    Stamp the last water time and prepend it to the water history.
    Returns the refreshed display.
    """
    now = payload.now if payload and payload.now is not None else now_ms()
    tracker.record_water(now)
    return _display_to_response(tracker.refresh(now))


@router.post(
    "/incident",
    response_model=DisplayResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record an incident",
    responses=_ERRORS,
)
def record_incident(
    payload: Optional[RecordEventRequest] = None,
    tracker: Tracker = Depends(get_tracker),
):
    """
    Overwrite the last incident time. The streak reads 0 right after;
    the high score is kept.
    """
    now = payload.now if payload and payload.now is not None else now_ms()
    tracker.record_incident(now)
    return _display_to_response(tracker.refresh(now))


# ---------------------------------------------------------------------------
# GET /tracker/display
# ---------------------------------------------------------------------------

@router.get(
    "/display",
    response_model=DisplayResponse,
    summary="Current display: last water, streak, high score, history",
    responses=_ERRORS,
)
def display(
    now: NowParam = None,
    tracker: Tracker = Depends(get_tracker),
):
    """
    Recompute the streak from the last incident and raise the high score
    if the streak beats it. Safe to poll: repeated calls with the same
    streak write nothing.
    """
    return _display_to_response(tracker.refresh(now if now is not None else now_ms()))


# ---------------------------------------------------------------------------
# GET /tracker/export
# ---------------------------------------------------------------------------

@router.get(
    "/export",
    summary="Download all records as CSV",
    response_class=Response,
    responses={
        200: {"content": {EXPORT_MIME_TYPE: {}}, "description": "CSV attachment."},
        **_ERRORS,
    },
)
def export_records(
    now: NowParam = None,
    tracker: Tracker = Depends(get_tracker),
):
    """
    ### Columns
    | Record Type | Timestamp | Date/Time |
    |---|---|---|
    | `Water` (one per history entry) | ms | formatted |
    | `Last Incident` (if any) | ms | formatted |
    | `High Score (days)` | empty | days |
    """
    moment = now if now is not None else now_ms()
    filename = export_filename(moment)
    return Response(
        content=build_export(tracker),
        media_type=EXPORT_MIME_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
