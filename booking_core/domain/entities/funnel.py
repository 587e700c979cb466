from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from booking_core.domain.entities.appointment import Appointment
from booking_core.domain.entities.subscription import Subscription


class FunnelStage(str, Enum):
    NEW = "NEW"
    FREE_USED = "FREE_USED"
    SECOND_WINDOW = "SECOND_WINDOW"
    SECOND_USED = "SECOND_USED"
    MEMBER = "MEMBER"


@dataclass(frozen=True)
class FunnelResult:
    stage: FunnelStage
    window_expires_at: datetime | None = None
    # UI gating, independent of stage: booked or completed, not canceled
    has_uncancelled_trial_free: bool = False
    has_uncancelled_discount_second: bool = False
    has_active_membership: bool = False
    has_subscription_trial: bool = False
    trial_free_appointment: Appointment | None = None  # most recent completed
    discount_second_appointment: Appointment | None = None  # most recent completed
    active_subscription: Subscription | None = None
