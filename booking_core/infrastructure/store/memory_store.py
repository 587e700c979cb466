from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime

from booking_core.application.exceptions import SlotTaken
from booking_core.application.ports.booking_repository import BookingRepositoryPort
from booking_core.application.utils.time_utils import as_utc
from booking_core.domain.entities.appointment import Appointment, AppointmentStatus
from booking_core.domain.entities.availability_range import AvailabilityRange
from booking_core.domain.entities.subscription import Subscription


class MemoryBookingRepository(BookingRepositoryPort):
    def __init__(
        self,
        ranges: list[AvailabilityRange] | None = None,
        appointments: list[Appointment] | None = None,
        subscriptions: list[Subscription] | None = None,
    ) -> None:
        self._ranges: list[AvailabilityRange] = list(ranges or [])
        # loaded as stored; uniqueness is enforced on new commits
        self._appointments: dict[str, Appointment] = {a.id: a for a in appointments or []}
        self._subscriptions: list[Subscription] = list(subscriptions or [])
        self._lock = threading.Lock()

    def get_availability_ranges(self, provider_id: str, day_of_week: int) -> list[AvailabilityRange]:
        matching = [r for r in self._ranges if r.provider_id == provider_id and r.day_of_week == day_of_week]
        return sorted(matching, key=lambda r: r.start_time)

    def get_active_appointments(self, provider_id: str, start_utc: datetime, end_utc: datetime) -> list[Appointment]:
        start_utc, end_utc = as_utc(start_utc), as_utc(end_utc)
        matching = [
            a
            for a in self._appointments.values()
            if a.provider_id == provider_id and a.is_active and start_utc <= as_utc(a.start_instant) < end_utc
        ]
        return sorted(matching, key=lambda a: as_utc(a.start_instant))

    def get_appointments_for_client(self, client_id: str) -> list[Appointment]:
        matching = [a for a in self._appointments.values() if a.client_id == client_id]
        return sorted(matching, key=lambda a: as_utc(a.start_instant))

    def get_subscriptions_for_user(self, user_id: str) -> list[Subscription]:
        return [s for s in self._subscriptions if s.user_id == user_id]

    def add_appointment(self, appointment: Appointment) -> Appointment:
        """
        Commit an appointment. At most one active appointment may hold a
        (provider, start instant) pair; a second one raises SlotTaken.
        """
        with self._lock:
            if appointment.is_active and self._holder_of(appointment) is not None:
                raise SlotTaken(appointment.provider_id, as_utc(appointment.start_instant))
            self._appointments[appointment.id] = appointment
            return appointment

    def cancel_appointment(self, appointment_id: str) -> bool:
        with self._lock:
            appointment = self._appointments.get(appointment_id)
            if appointment is None or appointment.is_canceled:
                return False
            self._appointments[appointment_id] = replace(appointment, status=AppointmentStatus.CANCELED)
            return True

    def _holder_of(self, appointment: Appointment) -> Appointment | None:
        start = as_utc(appointment.start_instant)
        for existing in self._appointments.values():
            if (
                existing.id != appointment.id
                and existing.is_active
                and existing.provider_id == appointment.provider_id
                and as_utc(existing.start_instant) == start
            ):
                return existing
        return None
