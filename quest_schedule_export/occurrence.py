"""
Where a weekly class recurrence starts and where it stops.

The term's first day is often not a meeting day (a TTh class in a term
that starts on a Monday), so DTSTART has to be moved onto a real meeting.
UNTIL can only be given in UTC. The boundary is the day after the last
teaching day; UNTIL is one second before that day starts in the class
time zone, so every meeting on the last day is kept and nothing after it.
"""
from __future__ import annotations

from datetime import date, timedelta
from typing import Sequence

from .errors import EmptyWeekdaySet, MalformedScheduleRow
from .models import RecurrenceWindow
from .schedule_codes import weekday_token


def first_occurrence(start: date, weekdays: Sequence[str]) -> date:
    """Return the first date on or after ``start`` that falls on one of ``weekdays``."""
    if not weekdays:
        raise EmptyWeekdaySet("Cannot anchor a recurrence with no weekdays")
    current = start
    for _ in range(7):
        if weekday_token(current) in weekdays:
            return current
        current += timedelta(days=1)
    raise EmptyWeekdaySet(f"No valid weekday tokens in {list(weekdays)!r}")


def recurrence_boundary(end: date) -> date:
    return end + timedelta(days=1)


def resolve_window(
    start: date,
    end: date,
    weekdays: Sequence[str],
    strategy: str = "advance",
) -> RecurrenceWindow:
    """
    Build the recurrence window for a term running ``start`` .. ``end``.

    :param strategy: ``"advance"`` moves DTSTART forward to the first real
        meeting. ``"exclude"`` steps DTSTART back one day and cancels that
        instance with EXDATE, leaving the RRULE to find the first meeting.

    Raises MalformedScheduleRow when no day in the range is a meeting day.
    """
    first = first_occurrence(start, weekdays)
    if first > end:
        raise MalformedScheduleRow(
            f"No {','.join(weekdays)} meeting between {start.isoformat()} and {end.isoformat()}"
        )
    until = recurrence_boundary(end)
    if strategy == "advance":
        return RecurrenceWindow(
            anchor=first,
            weekdays=tuple(weekdays),
            until=until,
        )
    if strategy == "exclude":
        anchor = start - timedelta(days=1)
        return RecurrenceWindow(
            anchor=anchor,
            weekdays=tuple(weekdays),
            until=until,
            excluded=anchor,
        )
    raise ValueError(f"Unknown anchor strategy: {strategy}")
