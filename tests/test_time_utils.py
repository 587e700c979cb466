from __future__ import annotations

from datetime import date, datetime, time, timezone

import pytest

from booking_core.application.utils.time_utils import (
    as_utc,
    business_day_window,
    business_today,
    day_of_week,
    format_time_12h,
    parse_time_of_day,
    to_business_instant,
)


def test_day_of_week_starts_on_sunday():
    assert day_of_week(date(2026, 3, 1)) == 0  # Sunday
    assert day_of_week(date(2026, 3, 2)) == 1  # Monday
    assert day_of_week(date(2026, 3, 7)) == 6  # Saturday


def test_twelve_hour_formatting():
    assert format_time_12h(time(0, 0)) == "12:00 AM"
    assert format_time_12h(time(9, 30)) == "9:30 AM"
    assert format_time_12h(time(12, 0)) == "12:00 PM"
    assert format_time_12h(time(14, 5)) == "2:05 PM"


def test_parse_time_of_day():
    assert parse_time_of_day("09:05") == time(9, 5)
    for bad in ("24:00", "9", "10:60", ""):
        with pytest.raises(ValueError):
            parse_time_of_day(bad)


def test_business_day_window_regular_day(tz):
    start, end = business_day_window(date(2026, 3, 2), tz)
    assert start == datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc)
    assert end == datetime(2026, 3, 3, 8, 0, tzinfo=timezone.utc)


def test_business_day_window_spring_forward_is_23_hours(tz):
    start, end = business_day_window(date(2026, 3, 8), tz)
    assert start == datetime(2026, 3, 8, 8, 0, tzinfo=timezone.utc)
    assert end == datetime(2026, 3, 9, 7, 0, tzinfo=timezone.utc)


def test_business_today_uses_business_timezone(tz):
    # 03:00 UTC on the 3rd is still the evening of the 2nd in Los Angeles
    now = datetime(2026, 3, 3, 3, 0, tzinfo=timezone.utc)
    assert business_today(now, tz) == date(2026, 3, 2)


def test_naive_instants_read_as_utc(tz):
    assert as_utc(datetime(2026, 3, 2, 18, 0)) == datetime(2026, 3, 2, 18, 0, tzinfo=timezone.utc)
    assert to_business_instant(date(2026, 3, 2), time(10, 0), tz) == datetime(2026, 3, 2, 18, 0, tzinfo=timezone.utc)
