import datetime as dt

from pydantic import BaseModel, Field

from booking_core.application.utils.time_utils import format_time_12h
from booking_core.domain.entities.booking_offer import BookingOffer
from booking_core.domain.entities.funnel import FunnelResult, FunnelStage
from booking_core.domain.entities.slot import Opening, SlotStatus


class SlotSchema(BaseModel):
    time: str  # "HH:MM", business timezone
    label: str  # "9:30 AM"
    available: bool = True


class AvailabilityResponseSchema(BaseModel):
    provider_id: str
    date: dt.date
    timezone: str
    slots: list[SlotSchema] = Field(default_factory=list)
    total_slots: int = 0


class OpeningSchema(BaseModel):
    date: dt.date
    time: str
    label: str
    starts_at: dt.datetime


class OpeningsResponseSchema(BaseModel):
    provider_id: str
    openings: list[OpeningSchema] = Field(default_factory=list)


class SubscriptionSchema(BaseModel):
    status: str
    plan_name: str | None = None
    renews_at: dt.datetime


class FunnelResponseSchema(BaseModel):
    client_id: str
    stage: FunnelStage
    window_expires_at: dt.datetime | None = None
    has_uncancelled_trial_free: bool
    has_uncancelled_discount_second: bool
    has_active_membership: bool
    has_subscription_trial: bool
    active_subscription: SubscriptionSchema | None = None


class BookingOfferResponseSchema(BaseModel):
    client_id: str
    kind: str
    discount_cents: int | None = None
    deadline: dt.datetime | None = None
    plan_name: str | None = None
    remaining_cuts_this_period: int | None = None


def slot_schema(status: SlotStatus) -> SlotSchema:
    return SlotSchema(
        time=status.time.strftime("%H:%M"),
        label=format_time_12h(status.time),
        available=status.available,
    )


def opening_schema(opening: Opening) -> OpeningSchema:
    return OpeningSchema(
        date=opening.date,
        time=opening.time.strftime("%H:%M"),
        label=format_time_12h(opening.time),
        starts_at=opening.starts_at,
    )


def funnel_schema(client_id: str, result: FunnelResult) -> FunnelResponseSchema:
    subscription = result.active_subscription
    return FunnelResponseSchema(
        client_id=client_id,
        stage=result.stage,
        window_expires_at=result.window_expires_at,
        has_uncancelled_trial_free=result.has_uncancelled_trial_free,
        has_uncancelled_discount_second=result.has_uncancelled_discount_second,
        has_active_membership=result.has_active_membership,
        has_subscription_trial=result.has_subscription_trial,
        active_subscription=(
            SubscriptionSchema(
                status=subscription.status.value,
                plan_name=subscription.plan_name,
                renews_at=subscription.renews_at,
            )
            if subscription else None
        ),
    )


def booking_offer_schema(client_id: str, offer: BookingOffer) -> BookingOfferResponseSchema:
    return BookingOfferResponseSchema(
        client_id=client_id,
        kind=offer.kind.value,
        discount_cents=offer.discount_cents,
        deadline=offer.deadline,
        plan_name=offer.plan_name,
        remaining_cuts_this_period=offer.remaining_cuts_this_period,
    )
