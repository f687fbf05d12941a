"""Tests for schedule_codes.py – weekday codes, clock times, dates."""
import pytest
from datetime import date, time

from quest_schedule_export.errors import MalformedScheduleRow
from quest_schedule_export.schedule_codes import (
    decode_weekdays,
    format_clock_time,
    format_date,
    format_timestamp,
    parse_clock_time,
    parse_date_range,
    weekday_token,
)


# ── Weekday codes ───────────────────────────────────────────────

class TestDecodeWeekdays:
    def test_weekdays(self):
        assert decode_weekdays("MTWThF") == ("MO", "TU", "WE", "TH", "FR")

    def test_tuesday_thursday(self):
        assert decode_weekdays("TTh") == ("TU", "TH")
        assert decode_weekdays("Th") == ("TH",)
        assert decode_weekdays("T") == ("TU",)

    def test_weekend_order_independent(self):
        assert decode_weekdays("SSu") == ("SU", "SA")
        assert decode_weekdays("SuS") == ("SU", "SA")

    def test_sunday_and_saturday_spelled_out(self):
        assert decode_weekdays("Su") == ("SU",)
        assert decode_weekdays("Sa") == ("SA",)
        assert decode_weekdays("SaSu") == ("SU", "SA")

    def test_canonical_order(self):
        assert decode_weekdays("FWM") == ("MO", "WE", "FR")

    def test_duplicates_collapse(self):
        assert decode_weekdays("MM") == ("MO",)

    def test_empty(self):
        assert decode_weekdays("") == ()
        assert decode_weekdays("   ") == ()
        assert decode_weekdays("xyz") == ()


class TestWeekdayToken:
    def test_known_dates(self):
        assert weekday_token(date(2015, 1, 4)) == "SU"
        assert weekday_token(date(2015, 1, 5)) == "MO"
        assert weekday_token(date(2015, 1, 10)) == "SA"


# ── Clock times ─────────────────────────────────────────────────

class TestClockTime:
    def test_pm(self):
        assert format_clock_time("4:30PM") == "163000"
        assert format_clock_time("11:59PM") == "235900"

    def test_am(self):
        assert format_clock_time("9:05AM") == "090500"
        assert format_clock_time("10:05AM") == "100500"

    def test_noon(self):
        assert format_clock_time("12:00PM") == "120000"
        assert format_clock_time("12:30PM") == "123000"

    def test_midnight(self):
        assert format_clock_time("12:00AM") == "000000"
        assert format_clock_time("12:45AM") == "004500"

    def test_lowercase_and_space(self):
        assert format_clock_time("1:20 pm") == "132000"

    def test_bare_24h(self):
        assert format_clock_time("16:30") == "163000"
        assert format_clock_time("8:00") == "080000"

    def test_parse_returns_time(self):
        assert parse_clock_time("1:50PM") == time(13, 50)

    @pytest.mark.parametrize("text", ["", "TBA", "24:00", "9:75", "13:00PM", "0:30AM"])
    def test_invalid(self, text):
        with pytest.raises(MalformedScheduleRow):
            parse_clock_time(text)


# ── Dates ───────────────────────────────────────────────────────

class TestFormatDate:
    def test_padding(self):
        assert format_date(date(2015, 1, 22)) == "20150122"
        assert format_date(date(2015, 11, 3)) == "20151103"

    def test_timestamp(self):
        assert format_timestamp(date(2015, 1, 22), "163000") == "20150122T163000"
        assert format_timestamp(date(2015, 1, 22), time(16, 30)) == "20150122T163000"


class TestParseDateRange:
    def test_month_first(self):
        assert parse_date_range("01/05/2015 - 04/10/2015") == (date(2015, 1, 5), date(2015, 4, 10))

    def test_day_first(self):
        assert parse_date_range("05/01/2015 - 10/04/2015", "%d/%m/%Y") == (
            date(2015, 1, 5),
            date(2015, 4, 10),
        )

    def test_single_day(self):
        assert parse_date_range("02/14/2015 - 02/14/2015") == (date(2015, 2, 14), date(2015, 2, 14))
        assert parse_date_range("02/14/2015") == (date(2015, 2, 14), date(2015, 2, 14))

    def test_other_separators(self):
        assert parse_date_range("01-05-2015 - 04-10-2015") == (date(2015, 1, 5), date(2015, 4, 10))

    def test_iso_format(self):
        assert parse_date_range("2015-01-05 - 2015-04-10", "%Y-%m-%d") == (
            date(2015, 1, 5),
            date(2015, 4, 10),
        )

    def test_no_dates(self):
        with pytest.raises(MalformedScheduleRow, match="No dates"):
            parse_date_range("TBA")

    def test_wrong_format(self):
        with pytest.raises(MalformedScheduleRow, match="Cannot parse"):
            parse_date_range("13/25/2015 - 04/10/2015")

    def test_reversed(self):
        with pytest.raises(MalformedScheduleRow, match="before start"):
            parse_date_range("04/10/2015 - 01/05/2015")
