"""
Decode the compact text PeopleSoft uses for class meetings.

- Days/Times column: "MWF 1:00PM - 1:50PM", "TTh 10:00AM - 11:20AM", "TBA"
- Start/End Date column: "01/05/2015 - 04/10/2015"

Weekday codes are single letters except Thursday ("Th") and Sunday ("Su"),
so "T", "S" are ambiguous on their own and are resolved by lookahead.
"""
from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import List, Tuple

from .errors import MalformedScheduleRow


# ──────────────────────────────────────────────────────────────────
#  Weekday codes
# ──────────────────────────────────────────────────────────────────

WEEKDAY_TOKENS = ("SU", "MO", "TU", "WE", "TH", "FR", "SA")

# Evaluated independently against the whole code string, in emission order.
_WEEKDAY_RULES: Tuple[Tuple[str, re.Pattern], ...] = (
    ("SU", re.compile(r"S(?!a)")),
    ("MO", re.compile(r"M")),
    ("TU", re.compile(r"T(?!h)")),
    ("WE", re.compile(r"W")),
    ("TH", re.compile(r"Th")),
    ("FR", re.compile(r"F")),
    ("SA", re.compile(r"S(?!u)")),
)


def decode_weekdays(code: str) -> Tuple[str, ...]:
    """Decode 'MTWThF' → ('MO', 'TU', 'WE', 'TH', 'FR'). Unknown text → ()."""
    code = (code or "").strip()
    return tuple(token for token, pattern in _WEEKDAY_RULES if pattern.search(code))


def weekday_token(d: date) -> str:
    """Return the RRULE weekday token for a date, e.g. date(2015, 1, 5) → 'MO'."""
    # WEEKDAY_TOKENS starts on Sunday, date.weekday() on Monday
    return WEEKDAY_TOKENS[(d.weekday() + 1) % 7]


# ──────────────────────────────────────────────────────────────────
#  Clock times
# ──────────────────────────────────────────────────────────────────

_CLOCK_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])?\s*$")

# Used by the compiler to find meeting times inside the Days/Times column
TIME_PATTERN = re.compile(r"\d{1,2}:\d{2}(?:\s*[AaPp][Mm])?")


def parse_clock_time(text: str) -> time:
    """
    Parse '4:30PM', '10:05 am' or a bare 24-hour '16:30' into a time.

    12:xxPM stays at noon, 12:xxAM becomes 00:xx.
    """
    m = _CLOCK_RE.match(text or "")
    if not m:
        raise MalformedScheduleRow(f"Unrecognised clock time: {text!r}")
    hour, minute, marker = int(m.group(1)), int(m.group(2)), m.group(3)
    if marker:
        if not 1 <= hour <= 12:
            raise MalformedScheduleRow(f"Hour out of range for 12-hour time: {text!r}")
        marker = marker.upper()
        if marker == "AM" and hour == 12:
            hour = 0
        elif marker == "PM" and hour != 12:
            hour += 12
    if hour > 23 or minute > 59:
        raise MalformedScheduleRow(f"Clock time out of range: {text!r}")
    return time(hour, minute)


def format_clock_time(text: str) -> str:
    """'4:30PM' → '163000'."""
    return parse_clock_time(text).strftime("%H%M%S")


# ──────────────────────────────────────────────────────────────────
#  Calendar dates
# ──────────────────────────────────────────────────────────────────

_DATE_TOKEN_RE = re.compile(r"\d{1,4}[/.\-]\d{1,2}[/.\-]\d{1,4}")


def format_date(d: date) -> str:
    """date(2015, 1, 22) → '20150122'."""
    return f"{d.year:04d}{d.month:02d}{d.day:02d}"


def format_timestamp(d: date, t: time | str) -> str:
    """Combine a date with a time (or an HHMMSS token) → '20150122T163000'."""
    token = t.strftime("%H%M%S") if isinstance(t, time) else t
    return f"{format_date(d)}T{token}"


def _normalize_separators(token: str, date_format: str) -> str:
    # Accept 01-05-2015 / 01.05.2015 when the format says 01/05/2015
    sep = next((c for c in date_format if c in "/.-"), None)
    if sep is None:
        return token
    return re.sub(r"[/.\-]", sep, token)


def parse_date_range(text: str, date_format: str = "%m/%d/%Y") -> Tuple[date, date]:
    """
    Parse a Start/End Date cell such as '01/05/2015 - 04/10/2015'.

    A single date is a one-day meeting (start == end).
    """
    tokens: List[str] = _DATE_TOKEN_RE.findall(text or "")
    if not tokens:
        raise MalformedScheduleRow(f"No dates found in {text!r}")
    try:
        dates = [
            datetime.strptime(_normalize_separators(tok, date_format), date_format).date()
            for tok in tokens[:2]
        ]
    except ValueError as e:
        raise MalformedScheduleRow(f"Cannot parse dates in {text!r} as {date_format}: {e}") from None
    start = dates[0]
    end = dates[1] if len(dates) > 1 else start
    if end < start:
        raise MalformedScheduleRow(f"End date before start date in {text!r}")
    return start, end
