from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from booking_core.domain.entities.appointment import Appointment
from booking_core.domain.entities.availability_range import AvailabilityRange
from booking_core.domain.entities.subscription import Subscription


class BookingRepositoryPort(ABC):
    @abstractmethod
    def get_availability_ranges(self, provider_id: str, day_of_week: int) -> list[AvailabilityRange]:
        """Recurring weekly ranges for a provider on a weekday (0 = Sunday)."""
        raise NotImplementedError

    @abstractmethod
    def get_active_appointments(self, provider_id: str, start_utc: datetime, end_utc: datetime) -> list[Appointment]:
        """Non-canceled appointments with start_utc <= start_instant < end_utc."""
        raise NotImplementedError

    @abstractmethod
    def get_appointments_for_client(self, client_id: str) -> list[Appointment]:
        """All appointments of a client, canceled ones included."""
        raise NotImplementedError

    @abstractmethod
    def get_subscriptions_for_user(self, user_id: str) -> list[Subscription]:
        raise NotImplementedError
