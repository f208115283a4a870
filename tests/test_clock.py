"""Tests for company-timezone date helpers."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from menuboard.core.clock import (
    as_aware,
    date_string,
    days_from,
    end_of_day,
    far_future,
    local_date,
    parse_instant,
    parse_local_date,
    start_of_day,
    weekday_name,
)

MT = ZoneInfo("America/Denver")


class TestLocalDate:
    def test_utc_evening_is_previous_local_day(self):
        # 02:00 UTC on June 5 is 20:00 MT on June 4
        instant = datetime(2025, 6, 5, 2, 0, tzinfo=timezone.utc)
        assert local_date(instant, MT) == date(2025, 6, 4)
        assert date_string(instant, MT) == "2025-06-04"

    def test_naive_is_company_local(self):
        assert local_date(datetime(2025, 6, 4, 23, 30), MT) == date(2025, 6, 4)


class TestDayBounds:
    def test_start_and_end(self):
        start = start_of_day(date(2025, 6, 4), MT)
        end = end_of_day(date(2025, 6, 4), MT)
        assert start == datetime(2025, 6, 4, 0, 0, tzinfo=MT)
        assert end.date() == date(2025, 6, 4)
        assert (end.hour, end.minute, end.second) == (23, 59, 59)

    def test_weekday_name(self):
        assert weekday_name(date(2025, 6, 4)) == "Wednesday"

    def test_days_from(self):
        assert days_from(date(2025, 6, 30), 3) == [date(2025, 6, 30), date(2025, 7, 1), date(2025, 7, 2)]


class TestParseLocalDate:
    def test_plain_date(self):
        assert parse_local_date("2025-06-04") == date(2025, 6, 4)

    def test_utc_midnight_is_not_shifted(self):
        assert parse_local_date("2025-06-04T00:00:00.000Z") == date(2025, 6, 4)

    def test_date_objects(self):
        assert parse_local_date(date(2025, 6, 4)) == date(2025, 6, 4)
        assert parse_local_date(datetime(2025, 6, 4, 18, 0)) == date(2025, 6, 4)

    def test_malformed(self):
        assert parse_local_date(None) is None
        assert parse_local_date("June 4") is None
        assert parse_local_date("2025-13-40") is None


class TestParseInstant:
    def test_zulu(self):
        assert parse_instant("2025-06-04T18:00:00Z", MT) == datetime(2025, 6, 4, 12, 0, tzinfo=MT)

    def test_offset(self):
        parsed = parse_instant("2025-06-04T12:00:00-06:00", MT)
        assert parsed == datetime(2025, 6, 4, 12, 0, tzinfo=MT)

    def test_naive(self):
        parsed = parse_instant("2025-06-04T12:00:00", MT)
        assert parsed.tzinfo is MT

    def test_malformed(self):
        assert parse_instant("", MT) is None
        assert parse_instant("tomorrow", MT) is None
        assert parse_instant(None, MT) is None


class TestFarFuture:
    def test_hundred_years(self):
        now = datetime(2025, 6, 4, 12, 0, tzinfo=MT)
        assert far_future(now) == datetime(2125, 6, 4, 12, 0, tzinfo=MT)

    def test_leap_day(self):
        now = datetime(2024, 2, 29, 12, 0, tzinfo=MT)
        assert far_future(now, 1) == datetime(2025, 2, 28, 12, 0, tzinfo=MT)

    def test_clamped_at_end_of_calendar(self):
        now = datetime(9950, 6, 4, 12, 0, tzinfo=MT)
        assert far_future(now) == datetime.max.replace(tzinfo=MT)
        assert far_future(now, 49) == datetime(9999, 6, 4, 12, 0, tzinfo=MT)


class TestAsAware:
    def test_naive_gets_zone(self):
        assert as_aware(datetime(2025, 6, 4, 12, 0), MT).tzinfo is MT

    def test_aware_unchanged(self):
        instant = datetime(2025, 6, 4, 12, 0, tzinfo=timezone.utc)
        assert as_aware(instant, MT) is instant
