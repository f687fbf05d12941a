"""
Compile class schedule rows into weekly-recurring calendar events.
"""
from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, time, timedelta
from typing import Callable, Iterable, List, Optional, Union

import pytz

from .errors import EmptyWeekdaySet, MalformedScheduleRow
from .export import build_calendar
from .models import (
    CompiledEvent,
    ExportOptions,
    NoQualifyingRows,
    RawScheduleRow,
    ScheduleExport,
)
from .occurrence import resolve_window
from .schedule_codes import (
    TIME_PATTERN,
    decode_weekdays,
    format_timestamp,
    parse_clock_time,
    parse_date_range,
)

logger = logging.getLogger(__name__)

UID_DOMAIN = "quest-schedule-export"


def _default_uid(start_stamp: str) -> str:
    return f"{start_stamp}-{uuid.uuid4().hex}@{UID_DOMAIN}"


def _until_instant(boundary: date, tzid: str) -> datetime:
    """Last second before ``boundary`` starts in ``tzid``, as a UTC datetime."""
    tz = pytz.timezone(tzid)
    midnight = tz.localize(datetime.combine(boundary, time.min))
    return (midnight - timedelta(seconds=1)).astimezone(pytz.utc)


def _summary(row: RawScheduleRow) -> str:
    return f"{row.course_code}-{row.section} ({row.component})"


def _description(row: RawScheduleRow) -> str:
    return f"{row.class_number}-{row.course_name} - {row.instructor}"


def compile_row(
    row: RawScheduleRow,
    options: ExportOptions | None = None,
    uid_factory: Optional[Callable[[str], str]] = None,
) -> CompiledEvent | None:
    """
    Compile one schedule row into an event.

    Returns None when the row has no meeting time (e.g. "TBA" or an online
    section). Raises MalformedScheduleRow when times are present but the
    weekday code, the times or the date range cannot be read.
    """
    options = options or ExportOptions()
    days_times = row.days_times or ""

    times = TIME_PATTERN.findall(days_times)
    if not times:
        return None
    if len(times) < 2:
        raise MalformedScheduleRow(f"Expected a start and end time in {days_times!r}")

    first_time = TIME_PATTERN.search(days_times)
    code = days_times[: first_time.start()].strip()
    weekdays = decode_weekdays(code)
    if not weekdays:
        raise EmptyWeekdaySet(f"No weekday code before the meeting time in {days_times!r}")

    start_time = parse_clock_time(times[0])
    end_time = parse_clock_time(times[1])
    if end_time <= start_time:
        raise MalformedScheduleRow(f"Meeting ends before it starts: {days_times!r}")

    first_day, last_day = parse_date_range(row.start_end_date, options.date_format)
    window = resolve_window(first_day, last_day, weekdays, options.anchor)

    start = datetime.combine(window.anchor, start_time)
    end = datetime.combine(window.anchor, end_time)
    until = _until_instant(window.until, options.timezone)
    exdate = datetime.combine(window.excluded, start_time) if window.excluded else None

    make_uid = uid_factory or _default_uid
    return CompiledEvent(
        uid=make_uid(format_timestamp(window.anchor, start_time)),
        summary=_summary(row),
        description=_description(row),
        location=row.room,
        start=start,
        end=end,
        tzid=options.timezone,
        weekdays=window.weekdays,
        until=until,
        exdate=exdate,
    )


def compile_schedule(
    rows: Iterable[RawScheduleRow],
    options: ExportOptions | None = None,
    uid_factory: Optional[Callable[[str], str]] = None,
) -> Union[ScheduleExport, NoQualifyingRows]:
    """
    Run one export over all rows, in page order.

    Malformed rows are logged and skipped. When nothing qualifies the result
    is NoQualifyingRows, never an empty calendar.
    """
    options = options or ExportOptions()
    events: List[CompiledEvent] = []
    rows_seen = 0
    skipped = 0

    for row in rows:
        rows_seen += 1
        try:
            event = compile_row(row, options, uid_factory)
        except MalformedScheduleRow as e:
            skipped += 1
            logger.warning("Skipping %s %s (%s): %s", row.course_code, row.section, row.component, e)
            continue
        if event is None:
            logger.debug("No meeting time for %s %s: %r", row.course_code, row.section, row.days_times)
            continue
        events.append(event)

    if not events:
        logger.info("No qualifying rows among %d row(s)", rows_seen)
        return NoQualifyingRows(rows_seen=rows_seen, skipped=skipped)

    logger.info("Compiled %d event(s) from %d row(s), %d skipped", len(events), rows_seen, skipped)
    document = build_calendar(events, options).to_ical().decode("utf-8")
    return ScheduleExport(events=events, document=document, skipped=skipped)
