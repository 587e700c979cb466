from __future__ import annotations

import logging
from collections.abc import Collection
from datetime import date, time
from zoneinfo import ZoneInfo

from booking_core.application.exceptions import DataIntegrityError, ProviderNotBookableError
from booking_core.application.ports.booking_repository import BookingRepositoryPort
from booking_core.application.use_cases.conflict_resolver import exclude_conflicts, held_slots
from booking_core.application.use_cases.slot_generator import generate_slots
from booking_core.application.utils.time_utils import DAY_NAMES, business_day_window, day_of_week
from booking_core.domain.entities.appointment import Appointment
from booking_core.domain.entities.slot import SlotStatus


class DailyAvailabilityEngine:
    """
    Bookable slots for one provider on one business day.

    Every call reads ranges and appointments fresh from the repository.
    """

    def __init__(
        self,
        repository: BookingRepositoryPort,
        timezone: ZoneInfo,
        slot_duration_minutes: int = 30,
        bookable_provider_ids: Collection[str] | None = None,
    ) -> None:
        if slot_duration_minutes <= 0:
            raise ValueError("slot_duration_minutes must be positive")
        self._repository = repository
        self._timezone = timezone
        self._slot_duration_minutes = slot_duration_minutes
        self._bookable_provider_ids = frozenset(bookable_provider_ids or ())
        self._logger = logging.getLogger(__name__)

    @property
    def timezone(self) -> ZoneInfo:
        return self._timezone

    def ensure_bookable(self, provider_id: str) -> None:
        if self._bookable_provider_ids and provider_id not in self._bookable_provider_ids:
            raise ProviderNotBookableError(f"Provider {provider_id} is not bookable")

    def available_slots(self, provider_id: str, day: date) -> list[time]:
        self.ensure_bookable(provider_id)
        candidates = self._candidate_slots(provider_id, day)
        if not candidates:
            return []

        appointments = self._appointments_on(provider_id, day)
        available = exclude_conflicts(candidates, appointments, self._timezone, target_date=day)
        available.sort()

        self._logger.debug(
            "Available slots computed",
            extra={
                "provider_id": provider_id,
                "date": day.isoformat(),
                "candidates": len(candidates),
                "available": len(available),
            },
        )
        return available

    def slot_board(self, provider_id: str, day: date) -> list[SlotStatus]:
        """Every candidate slot of the day, with booked ones marked unavailable."""
        self.ensure_bookable(provider_id)
        candidates = self._candidate_slots(provider_id, day)
        if not candidates:
            return []

        appointments = self._appointments_on(provider_id, day)
        taken = held_slots(candidates, appointments, self._timezone, target_date=day)
        return [SlotStatus(time=slot, available=slot not in taken) for slot in sorted(candidates)]

    def _candidate_slots(self, provider_id: str, day: date) -> list[time]:
        weekday = day_of_week(day)
        ranges = self._repository.get_availability_ranges(provider_id, weekday)
        if not ranges:
            self._logger.debug(
                "No availability ranges",
                extra={"provider_id": provider_id, "date": day.isoformat(), "day_name": DAY_NAMES[weekday]},
            )
            return []

        candidates: set[time] = set()
        for availability_range in ranges:
            if not availability_range.is_well_formed:
                raise DataIntegrityError(
                    f"Malformed availability range {availability_range.label()} "
                    f"for provider {provider_id} on day {availability_range.day_of_week}"
                )
            candidates.update(generate_slots(availability_range, self._slot_duration_minutes))
        return sorted(candidates)

    def _appointments_on(self, provider_id: str, day: date) -> list[Appointment]:
        start_utc, end_utc = business_day_window(day, self._timezone)
        appointments = self._repository.get_active_appointments(provider_id, start_utc, end_utc)
        return [appointment for appointment in appointments if appointment.is_active]
