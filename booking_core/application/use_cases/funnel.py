"""
Promotional funnel: free trial cut -> discounted second cut -> membership.

The stage is recomputed from current appointments and subscriptions on every
request; nothing here is persisted.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime, timedelta

from booking_core.application.ports.booking_repository import BookingRepositoryPort
from booking_core.application.use_cases.booking_offer import SECOND_CUT_PRICE_CENTS, resolve_booking_offer
from booking_core.application.utils.time_utils import as_utc, utc_now
from booking_core.domain.entities.appointment import Appointment, AppointmentKind
from booking_core.domain.entities.booking_offer import BookingOffer
from booking_core.domain.entities.funnel import FunnelResult, FunnelStage
from booking_core.domain.entities.subscription import Subscription, SubscriptionStatus
from booking_core.domain.policies.trial_detection import LegacyPriceHeuristicPolicy, TrialDetectionPolicy

SECOND_WINDOW_DAYS = 10


def _most_recent(appointments: Iterable[Appointment]) -> Appointment | None:
    # ties broken by id so equal inputs always pick the same record
    ordered = sorted(appointments, key=lambda a: (as_utc(a.start_instant), a.id), reverse=True)
    return ordered[0] if ordered else None


def _is_discount_second(appointment: Appointment) -> bool:
    return appointment.kind == AppointmentKind.DISCOUNT_SECOND and not appointment.is_canceled


def compute_stage(
    appointments: Sequence[Appointment],
    subscriptions: Sequence[Subscription],
    now: datetime,
    policy: TrialDetectionPolicy | None = None,
    window_days: int = SECOND_WINDOW_DAYS,
) -> FunnelResult:
    policy = policy or LegacyPriceHeuristicPolicy()
    now = as_utc(now)

    member_subscriptions = [s for s in subscriptions if s.grants_membership]
    has_active_membership = bool(member_subscriptions)
    has_subscription_trial = any(s.status == SubscriptionStatus.TRIAL for s in member_subscriptions)
    active_subscription = (
        max(member_subscriptions, key=lambda s: as_utc(s.renews_at)) if member_subscriptions else None
    )

    has_uncancelled_trial_free = any(policy.is_trial_free(a) for a in appointments)
    has_uncancelled_discount_second = any(_is_discount_second(a) for a in appointments)

    completed = [a for a in appointments if a.is_completed]
    trial_free = _most_recent(a for a in completed if policy.is_trial_free(a))
    discount_second = _most_recent(a for a in completed if _is_discount_second(a))

    window_expires_at: datetime | None = None
    if has_active_membership:
        stage = FunnelStage.MEMBER
    elif trial_free is None:
        stage = FunnelStage.NEW
    elif discount_second is not None:
        stage = FunnelStage.SECOND_USED
    else:
        window_expires_at = as_utc(trial_free.start_instant) + timedelta(days=window_days)
        stage = FunnelStage.SECOND_WINDOW if now < window_expires_at else FunnelStage.FREE_USED

    return FunnelResult(
        stage=stage,
        window_expires_at=window_expires_at,
        has_uncancelled_trial_free=has_uncancelled_trial_free,
        has_uncancelled_discount_second=has_uncancelled_discount_second,
        has_active_membership=has_active_membership,
        has_subscription_trial=has_subscription_trial,
        trial_free_appointment=trial_free,
        discount_second_appointment=discount_second,
        active_subscription=active_subscription,
    )


class FunnelService:
    def __init__(
        self,
        repository: BookingRepositoryPort,
        policy: TrialDetectionPolicy | None = None,
        window_days: int = SECOND_WINDOW_DAYS,
        second_cut_price_cents: int = SECOND_CUT_PRICE_CENTS,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._repository = repository
        self._policy = policy or LegacyPriceHeuristicPolicy()
        self._window_days = window_days
        self._second_cut_price_cents = second_cut_price_cents
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    def compute_funnel_stage(self, client_id: str) -> FunnelResult:
        return self._compute(client_id, self._clock())

    def booking_offer(self, client_id: str) -> BookingOffer:
        now = self._clock()
        funnel = self._compute(client_id, now)
        return resolve_booking_offer(funnel, now, self._second_cut_price_cents)

    def _compute(self, client_id: str, now: datetime) -> FunnelResult:
        appointments = self._repository.get_appointments_for_client(client_id)
        subscriptions = self._repository.get_subscriptions_for_user(client_id)
        result = compute_stage(
            appointments,
            subscriptions,
            now=now,
            policy=self._policy,
            window_days=self._window_days,
        )
        self._logger.info(
            "Funnel stage computed",
            extra={"client_id": client_id, "stage": result.stage.value, "policy": self._policy.name},
        )
        return result
