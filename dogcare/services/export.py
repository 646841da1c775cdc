"""
CSV export of everything the tracker has stored.

Layout
------
  "Record Type","Timestamp","Date/Time"
  "Water",<ms>,<text>            one per history entry, most-recent-first
  "Last Incident",<ms>,<text>    only if an incident exists
  "High Score (days)","",<n>     always last

All fields quoted, embedded quotes doubled.
"""
from __future__ import annotations

import csv
import io

from dogcare.services.timefmt import format_datetime, utc_date
from dogcare.services.tracker import Tracker

EXPORT_HEADER = ("Record Type", "Timestamp", "Date/Time")
EXPORT_MIME_TYPE = "text/csv"


def build_export_rows(tracker: Tracker) -> list[tuple[str, str, str]]:
    tz = tracker.display_tz
    rows: list[tuple[str, str, str]] = [EXPORT_HEADER]

    for ts in tracker.water_history():
        rows.append(("Water", str(ts), format_datetime(ts, tz)))

    incident = tracker.last_incident()
    if incident is not None:
        rows.append(("Last Incident", str(incident), format_datetime(incident, tz)))

    rows.append(("High Score (days)", "", str(tracker.high_score())))
    return rows


def build_export(tracker: Tracker) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(build_export_rows(tracker))
    return buf.getvalue()


def export_filename(now: int) -> str:
    return f"dogcare_records_{utc_date(now).isoformat()}.csv"
