from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class AppointmentStatus(str, Enum):
    BOOKED = "BOOKED"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    NO_SHOW = "NO_SHOW"
    CANCELED = "CANCELED"


class AppointmentKind(str, Enum):
    TRIAL_FREE = "TRIAL_FREE"
    DISCOUNT_SECOND = "DISCOUNT_SECOND"
    STANDARD = "STANDARD"
    ONE_OFF = "ONE_OFF"
    MEMBERSHIP_INCLUDED = "MEMBERSHIP_INCLUDED"


@dataclass(frozen=True)
class Appointment:
    id: str
    client_id: str
    provider_id: str
    start_instant: datetime  # UTC
    end_instant: datetime  # UTC
    status: AppointmentStatus = AppointmentStatus.BOOKED
    kind: str | None = None  # AppointmentKind value, or a legacy string from storage
    price_cents: int | None = None

    @property
    def is_canceled(self) -> bool:
        return self.status == AppointmentStatus.CANCELED

    @property
    def is_active(self) -> bool:
        """Anything but CANCELED holds its slot."""
        return not self.is_canceled

    @property
    def is_completed(self) -> bool:
        return self.status == AppointmentStatus.COMPLETED
