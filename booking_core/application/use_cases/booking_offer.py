from __future__ import annotations

from datetime import datetime

from booking_core.application.utils.time_utils import as_utc
from booking_core.domain.entities.booking_offer import BookingOffer, BookingOfferKind
from booking_core.domain.entities.funnel import FunnelResult

SECOND_CUT_PRICE_CENTS = 1000
DEFAULT_PLAN_NAME = "Standard"


def resolve_booking_offer(
    funnel: FunnelResult,
    now: datetime,
    second_cut_price_cents: int = SECOND_CUT_PRICE_CENTS,
) -> BookingOffer:
    """Pricing flow for the client's next booking, derived from their funnel facts."""
    if funnel.has_active_membership:
        subscription = funnel.active_subscription
        plan_name = (subscription.plan_name if subscription else None) or DEFAULT_PLAN_NAME
        return BookingOffer(
            kind=BookingOfferKind.MEMBERSHIP_INCLUDED,
            plan_name=plan_name,
            # usage per period is not tracked yet
            remaining_cuts_this_period=1,
        )

    if (
        funnel.has_uncancelled_trial_free
        and not funnel.has_uncancelled_discount_second
        and funnel.trial_free_appointment is not None
        and funnel.window_expires_at is not None
        and as_utc(now) < funnel.window_expires_at
    ):
        return BookingOffer(
            kind=BookingOfferKind.SECOND_DISCOUNT,
            discount_cents=second_cut_price_cents,
            deadline=funnel.window_expires_at,
        )

    if not funnel.has_uncancelled_trial_free:
        return BookingOffer(kind=BookingOfferKind.FIRST_FREE)

    return BookingOffer(kind=BookingOfferKind.ONE_OFF)
