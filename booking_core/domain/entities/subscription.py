from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class SubscriptionStatus(str, Enum):
    ACTIVE = "ACTIVE"
    TRIAL = "TRIAL"
    CANCELED = "CANCELED"
    PAST_DUE = "PAST_DUE"


MEMBER_STATUSES = frozenset({SubscriptionStatus.ACTIVE, SubscriptionStatus.TRIAL})


@dataclass(frozen=True)
class Subscription:
    user_id: str
    status: SubscriptionStatus
    start_date: datetime
    renews_at: datetime
    plan_name: str | None = None

    @property
    def grants_membership(self) -> bool:
        return self.status in MEMBER_STATUSES
