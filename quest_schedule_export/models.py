"""
Data carried between the page parser, the compiler and the exporter.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Tuple

import pytz

from .schedule_codes import format_timestamp

DEFAULT_TIMEZONE = "America/Toronto"
DEFAULT_CALENDAR_NAME = "UWQuest Export"
DEFAULT_DATE_FORMAT = "%m/%d/%Y"

ANCHOR_STRATEGIES = ("advance", "exclude")


@dataclass(frozen=True)
class RawScheduleRow:
    """One meeting row exactly as rendered on the class schedule page."""

    days_times: str = ""
    start_end_date: str = ""
    room: str = ""
    instructor: str = ""
    course_code: str = ""
    course_name: str = ""
    section: str = ""
    component: str = ""
    class_number: str = ""


@dataclass(frozen=True)
class ExportOptions:
    """Settings for one export run: class time zone, calendar name, date format, anchor strategy."""

    timezone: str = DEFAULT_TIMEZONE
    calendar_name: str = DEFAULT_CALENDAR_NAME
    date_format: str = DEFAULT_DATE_FORMAT
    anchor: str = "advance"

    def __post_init__(self) -> None:
        if self.anchor not in ANCHOR_STRATEGIES:
            raise ValueError(
                f"Unknown anchor strategy: {self.anchor}. Use one of {', '.join(ANCHOR_STRATEGIES)}."
            )
        try:
            pytz.timezone(self.timezone)
        except pytz.UnknownTimeZoneError:
            raise ValueError(f"Unknown time zone: {self.timezone}") from None


@dataclass(frozen=True)
class RecurrenceWindow:
    """
    Where a weekly recurrence starts and stops.

    ``anchor`` is the DTSTART date. ``until`` is the date the UNTIL instant
    is built on, always one day after the last teaching day. ``excluded`` is
    set only when the anchor was stepped back and must be cancelled by EXDATE.
    """

    anchor: date
    weekdays: Tuple[str, ...]
    until: date
    excluded: Optional[date] = None


@dataclass(frozen=True)
class CompiledEvent:
    """One weekly-recurring class meeting, ready to be written as a VEVENT."""

    uid: str
    summary: str
    description: str
    location: str
    start: datetime
    end: datetime
    tzid: str
    weekdays: Tuple[str, ...]
    until: datetime
    exdate: Optional[datetime] = None

    @property
    def start_stamp(self) -> str:
        return format_timestamp(self.start.date(), self.start.time())

    @property
    def end_stamp(self) -> str:
        return format_timestamp(self.end.date(), self.end.time())

    @property
    def until_stamp(self) -> str:
        return format_timestamp(self.until.date(), self.until.time()) + "Z"


@dataclass(frozen=True)
class ScheduleExport:
    """A finished export run: the compiled events and the calendar text."""

    events: List[CompiledEvent]
    document: str
    skipped: int = 0


@dataclass(frozen=True)
class NoQualifyingRows:
    """An export run that produced no events. No calendar should be delivered."""

    rows_seen: int
    skipped: int = 0
    message: str = field(
        default=(
            "Unable to create a schedule. No days or times were found on this page. "
            "Please make sure to be in List View."
        )
    )
