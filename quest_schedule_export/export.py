"""
Assemble compiled class events into an iCalendar document and write it out.
"""
from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

import icalendar
import pytz

from .models import CompiledEvent, ExportOptions

PRODID = "-//Quest Schedule Export//EN"


def _event_component(event: CompiledEvent, stamp: datetime) -> icalendar.Event:
    tz = pytz.timezone(event.tzid)

    component = icalendar.Event()
    component.add("uid", event.uid)
    component.add("dtstamp", stamp)
    component.add("dtstart", tz.localize(event.start))
    component.add("dtend", tz.localize(event.end))
    component.add(
        "rrule",
        icalendar.vRecur({"freq": "weekly", "until": event.until, "byday": list(event.weekdays)}),
    )
    if event.exdate is not None:
        component.add("exdate", tz.localize(event.exdate))
    component.add("summary", event.summary)
    component.add("description", event.description)
    component.add("location", event.location)
    component.add("sequence", 0)
    component.add("status", "CONFIRMED")
    component.add("transp", "OPAQUE")
    return component


def build_calendar(
    events: Iterable[CompiledEvent],
    options: ExportOptions | None = None,
    stamp: datetime | None = None,
) -> icalendar.Calendar:
    """Wrap events, in the given order, in a VCALENDAR for Apple/Google/Outlook."""
    options = options or ExportOptions()
    stamp = stamp or datetime.now(timezone.utc)

    cal = icalendar.Calendar()
    cal.add("prodid", PRODID)
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("method", "PUBLISH")
    cal.add("x-wr-calname", options.calendar_name)
    cal.add("x-wr-timezone", options.timezone)

    for event in events:
        cal.add_component(_event_component(event, stamp))
    return cal


def schedule_filename(student_name: str | None) -> str:
    """'Jane Q Student' → 'jane-q-student-uw-class-schedule.ics'."""
    name = re.sub(r"\s+", "-", (student_name or "").strip().lower())
    if not name:
        return "uw-class-schedule.ics"
    return f"{name}-uw-class-schedule.ics"


def write_ics(document: str, out_path: str | Path) -> Path:
    out_path = Path(out_path)
    out_path.write_text(document, encoding="utf-8", newline="")
    return out_path


def export_ics(
    events: Iterable[CompiledEvent],
    out_path: str | Path,
    options: ExportOptions | None = None,
) -> Path:
    """Export events straight to an .ics file."""
    document = build_calendar(events, options).to_ical().decode("utf-8")
    return write_ics(document, out_path)
