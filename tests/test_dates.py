"""Tests for calendar date / date-time conversion."""

from datetime import date, datetime, timedelta, timezone

from biodata.dates import to_date, to_datetime


class TestToDatetime:
    def test_midnight(self):
        assert to_datetime(date(2020, 2, 29)) == datetime(2020, 2, 29, 0, 0)

    def test_none_stays_none(self):
        assert to_datetime(None) is None

    def test_datetime_input_is_truncated(self):
        assert to_datetime(datetime(2021, 7, 4, 15, 30)) == datetime(2021, 7, 4)


class TestToDate:
    def test_naive_datetime(self):
        assert to_date(datetime(2010, 1, 31, 23, 59)) == date(2010, 1, 31)

    def test_aware_datetime_read_in_utc(self):
        # 01:00 at UTC+2 is still the previous day in UTC
        value = datetime(2010, 2, 1, 1, 0, tzinfo=timezone(timedelta(hours=2)))
        assert to_date(value) == date(2010, 1, 31)

    def test_plain_date_passes_through(self):
        assert to_date(date(1999, 12, 31)) == date(1999, 12, 31)

    def test_none_stays_none(self):
        assert to_date(None) is None

    def test_round_trip_keeps_calendar_date(self):
        original = datetime(1985, 5, 15, 9, 45)
        assert to_datetime(to_date(original)).date() == original.date()
