from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

_TIME_24H = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")


def day_of_week(value: date) -> int:
    """Weekday in the stored-data convention: 0 = Sunday ... 6 = Saturday."""
    return (value.weekday() + 1) % 7


def parse_time_of_day(text: str) -> time:
    """Parse "HH:MM" (24-hour). Raises ValueError on anything else."""
    match = _TIME_24H.match(text or "")
    if not match:
        raise ValueError(f"Invalid time of day: {text!r}")
    hour, minute = int(match.group(1)), int(match.group(2))
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"Invalid time of day: {text!r}")
    return time(hour, minute)


def format_time_12h(value: time) -> str:
    """time(14, 0) -> "2:00 PM"."""
    hour12 = value.hour % 12 or 12
    am_pm = "AM" if value.hour < 12 else "PM"
    return f"{hour12}:{value.minute:02d} {am_pm}"


def minutes_since_midnight(value: time) -> int:
    return value.hour * 60 + value.minute


def time_from_minutes(minutes: int) -> time:
    return time(minutes // 60, minutes % 60)


def as_utc(value: datetime) -> datetime:
    """Aware instant in UTC. Naive values are stored UTC and read as such."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_business_instant(day: date, at: time, tz: ZoneInfo) -> datetime:
    """UTC instant of a wall-clock date+time in the business timezone."""
    return datetime.combine(day, at, tzinfo=tz).astimezone(timezone.utc)


def business_day_window(day: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """[local midnight, next local midnight) of `day`, as UTC instants."""
    start = to_business_instant(day, time.min, tz)
    end = to_business_instant(day + timedelta(days=1), time.min, tz)
    return start, end


def to_business_local(instant: datetime, tz: ZoneInfo) -> datetime:
    return as_utc(instant).astimezone(tz)


def business_today(now: datetime, tz: ZoneInfo) -> date:
    return to_business_local(now, tz).date()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
