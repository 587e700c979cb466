from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from booking_core.domain.entities.appointment import Appointment, AppointmentStatus
from booking_core.domain.entities.availability_range import AvailabilityRange
from booking_core.infrastructure.store.memory_store import MemoryBookingRepository

LA = ZoneInfo("America/Los_Angeles")

# 2026-03-02 is a Monday, before the US DST switch on 2026-03-08 (LA = UTC-8)
MONDAY = date(2026, 3, 2)
TUESDAY = date(2026, 3, 3)
WEDNESDAY = date(2026, 3, 4)
PROVIDER = "barber_1"


@pytest.fixture
def tz() -> ZoneInfo:
    return LA


@pytest.fixture
def local_instant():
    """UTC instant for a wall-clock time in the business timezone."""

    def _local_instant(day: date, hour: int, minute: int = 0) -> datetime:
        return datetime.combine(day, time(hour, minute), tzinfo=LA).astimezone(timezone.utc)

    return _local_instant


@pytest.fixture
def make_appointment(local_instant):
    counter = {"n": 0}

    def _make_appointment(
        day: date,
        hour: int,
        minute: int = 0,
        status: AppointmentStatus = AppointmentStatus.BOOKED,
        provider_id: str = PROVIDER,
        client_id: str = "client_1",
        kind: str | None = None,
        price_cents: int | None = None,
    ) -> Appointment:
        counter["n"] += 1
        start = local_instant(day, hour, minute)
        return Appointment(
            id=f"appt_{counter['n']}",
            client_id=client_id,
            provider_id=provider_id,
            start_instant=start,
            end_instant=start + timedelta(minutes=30),
            status=status,
            kind=kind,
            price_cents=price_cents,
        )

    return _make_appointment


@pytest.fixture
def weekly_ranges() -> list[AvailabilityRange]:
    """Mon/Wed/Fri 10:00-12:00 only."""
    return [AvailabilityRange(PROVIDER, weekday, time(10, 0), time(12, 0)) for weekday in (1, 3, 5)]


@pytest.fixture
def repository(weekly_ranges) -> MemoryBookingRepository:
    return MemoryBookingRepository(ranges=weekly_ranges)
