"""Tests for occurrence.py – first meeting and UNTIL boundary."""
import itertools
import pytest
from datetime import date, timedelta

from quest_schedule_export.errors import EmptyWeekdaySet, MalformedScheduleRow
from quest_schedule_export.occurrence import (
    first_occurrence,
    recurrence_boundary,
    resolve_window,
)
from quest_schedule_export.schedule_codes import WEEKDAY_TOKENS, weekday_token


class TestFirstOccurrence:
    def test_start_is_meeting_day(self):
        # 2015-01-05 is a Monday
        assert first_occurrence(date(2015, 1, 5), ("MO", "WE", "FR")) == date(2015, 1, 5)

    def test_advances_to_next_meeting(self):
        assert first_occurrence(date(2015, 1, 5), ("TU", "TH")) == date(2015, 1, 6)
        assert first_occurrence(date(2015, 1, 5), ("SU",)) == date(2015, 1, 11)

    def test_crosses_year(self):
        # 2015-12-31 is a Thursday
        assert first_occurrence(date(2015, 12, 31), ("MO",)) == date(2016, 1, 4)

    def test_empty_set_rejected(self):
        with pytest.raises(EmptyWeekdaySet):
            first_occurrence(date(2015, 1, 5), ())

    def test_unknown_tokens_rejected(self):
        with pytest.raises(EmptyWeekdaySet):
            first_occurrence(date(2015, 1, 5), ("XX",))

    def test_membership_and_minimality(self):
        start_dates = [date(2015, 1, 1) + timedelta(days=i) for i in range(7)]
        for size in (1, 2, 3):
            for weekdays in itertools.combinations(WEEKDAY_TOKENS, size):
                for start in start_dates:
                    result = first_occurrence(start, weekdays)
                    assert weekday_token(result) in weekdays
                    assert start <= result < start + timedelta(days=7)
                    d = start
                    while d < result:
                        assert weekday_token(d) not in weekdays
                        d += timedelta(days=1)


class TestRecurrenceBoundary:
    def test_plain(self):
        assert recurrence_boundary(date(2015, 4, 10)) == date(2015, 4, 11)

    def test_month_rollover(self):
        assert recurrence_boundary(date(2015, 1, 31)) == date(2015, 2, 1)
        assert recurrence_boundary(date(2016, 2, 28)) == date(2016, 2, 29)

    def test_year_rollover(self):
        assert recurrence_boundary(date(2015, 12, 31)) == date(2016, 1, 1)


class TestResolveWindow:
    def test_advance(self):
        window = resolve_window(date(2015, 1, 5), date(2015, 4, 10), ("TU", "TH"))
        assert window.anchor == date(2015, 1, 6)
        assert window.until == date(2015, 4, 11)
        assert window.weekdays == ("TU", "TH")
        assert window.excluded is None

    def test_exclude(self):
        window = resolve_window(date(2015, 1, 5), date(2015, 4, 10), ("TU", "TH"), "exclude")
        assert window.anchor == date(2015, 1, 4)
        assert window.excluded == date(2015, 1, 4)
        assert window.until == date(2015, 4, 11)

    @pytest.mark.parametrize("strategy", ["advance", "exclude"])
    def test_no_meeting_in_range(self, strategy):
        # 2015-02-14 .. 2015-02-15 is a weekend
        with pytest.raises(MalformedScheduleRow, match="No MO,WE meeting"):
            resolve_window(date(2015, 2, 14), date(2015, 2, 15), ("MO", "WE"), strategy)

    def test_last_day_is_only_meeting(self):
        window = resolve_window(date(2015, 2, 14), date(2015, 2, 16), ("MO",))
        assert window.anchor == date(2015, 2, 16)
        assert window.until == date(2015, 2, 17)

    def test_empty_weekdays(self):
        with pytest.raises(EmptyWeekdaySet):
            resolve_window(date(2015, 1, 5), date(2015, 4, 10), (), "exclude")

    def test_unknown_strategy(self):
        with pytest.raises(ValueError, match="Unknown anchor strategy"):
            resolve_window(date(2015, 1, 5), date(2015, 4, 10), ("MO",), "backwards")
