from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class BookingOfferKind(str, Enum):
    FIRST_FREE = "FIRST_FREE"
    SECOND_DISCOUNT = "SECOND_DISCOUNT"
    MEMBERSHIP_INCLUDED = "MEMBERSHIP_INCLUDED"
    ONE_OFF = "ONE_OFF"


@dataclass(frozen=True)
class BookingOffer:
    kind: BookingOfferKind
    discount_cents: int | None = None
    deadline: datetime | None = None
    plan_name: str | None = None
    remaining_cuts_this_period: int | None = None
