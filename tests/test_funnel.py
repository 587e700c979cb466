from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from booking_core.application.use_cases.funnel import FunnelService, compute_stage
from booking_core.domain.entities.appointment import Appointment, AppointmentKind, AppointmentStatus
from booking_core.domain.entities.funnel import FunnelStage
from booking_core.domain.entities.subscription import Subscription, SubscriptionStatus
from booking_core.domain.policies.trial_detection import (
    ExplicitKindPolicy,
    LegacyPriceHeuristicPolicy,
    get_trial_detection_policy,
)
from booking_core.infrastructure.store.memory_store import MemoryBookingRepository

NOW = datetime(2026, 3, 20, 18, 0, tzinfo=timezone.utc)
CLIENT = "client_1"


def appointment(
    appointment_id: str,
    days_ago: float,
    kind: str | None,
    status: AppointmentStatus = AppointmentStatus.COMPLETED,
    price_cents: int | None = None,
) -> Appointment:
    start = NOW - timedelta(days=days_ago)
    return Appointment(
        id=appointment_id,
        client_id=CLIENT,
        provider_id="barber_1",
        start_instant=start,
        end_instant=start + timedelta(minutes=30),
        status=status,
        kind=kind,
        price_cents=price_cents,
    )


def subscription(status: SubscriptionStatus, renews_in_days: int = 20, plan_name: str | None = "Standard") -> Subscription:
    return Subscription(
        user_id=CLIENT,
        status=status,
        start_date=NOW - timedelta(days=10),
        renews_at=NOW + timedelta(days=renews_in_days),
        plan_name=plan_name,
    )


TRIAL = AppointmentKind.TRIAL_FREE.value
SECOND = AppointmentKind.DISCOUNT_SECOND.value


def test_scenario_a_no_history_is_new():
    result = compute_stage([], [], NOW)
    assert result.stage == FunnelStage.NEW
    assert result.window_expires_at is None
    assert result.has_uncancelled_trial_free is False
    assert result.has_uncancelled_discount_second is False


def test_scenario_b_recent_trial_opens_second_window():
    """A completed trial five days ago leaves five days to book the discounted cut."""
    trial = appointment("a1", days_ago=5, kind=TRIAL, price_cents=0)
    result = compute_stage([trial], [], NOW)

    assert result.stage == FunnelStage.SECOND_WINDOW
    assert result.window_expires_at == trial.start_instant + timedelta(days=10)
    assert result.window_expires_at == NOW + timedelta(days=5)
    assert result.trial_free_appointment == trial


def test_scenario_c_expired_window_is_free_used():
    trial = appointment("a1", days_ago=15, kind=TRIAL, price_cents=0)
    result = compute_stage([trial], [], NOW)

    assert result.stage == FunnelStage.FREE_USED
    assert result.window_expires_at == trial.start_instant + timedelta(days=10)


def test_window_expiry_instant_itself_is_free_used():
    trial = appointment("a1", days_ago=10, kind=TRIAL)
    assert compute_stage([trial], [], NOW).stage == FunnelStage.FREE_USED


def test_scenario_d_membership_wins():
    """Membership outranks every appointment-derived stage."""
    trial = appointment("a1", days_ago=5, kind=TRIAL, price_cents=0)
    result = compute_stage([trial], [subscription(SubscriptionStatus.TRIAL)], NOW)

    assert result.stage == FunnelStage.MEMBER
    assert result.window_expires_at is None
    assert result.has_active_membership is True
    assert result.has_subscription_trial is True


def test_canceled_subscription_is_not_membership():
    result = compute_stage([], [subscription(SubscriptionStatus.CANCELED)], NOW)
    assert result.stage == FunnelStage.NEW
    assert result.has_active_membership is False
    assert result.active_subscription is None


def test_active_subscription_is_latest_renewal():
    later = subscription(SubscriptionStatus.ACTIVE, renews_in_days=30, plan_name="Premium")
    earlier = subscription(SubscriptionStatus.TRIAL, renews_in_days=5, plan_name="Standard")
    result = compute_stage([], [earlier, later], NOW)
    assert result.active_subscription == later


def test_completed_second_cut_is_second_used():
    trial = appointment("a1", days_ago=8, kind=TRIAL)
    second = appointment("a2", days_ago=2, kind=SECOND, price_cents=1000)
    result = compute_stage([trial, second], [], NOW)

    assert result.stage == FunnelStage.SECOND_USED
    assert result.window_expires_at is None
    assert result.discount_second_appointment == second


def test_booked_second_cut_keeps_window_open():
    trial = appointment("a1", days_ago=3, kind=TRIAL)
    second = appointment("a2", days_ago=-2, kind=SECOND, status=AppointmentStatus.BOOKED)
    result = compute_stage([trial, second], [], NOW)

    assert result.stage == FunnelStage.SECOND_WINDOW
    assert result.has_uncancelled_discount_second is True


def test_only_completed_trial_advances_the_funnel():
    booked = appointment("a1", days_ago=-1, kind=TRIAL, status=AppointmentStatus.BOOKED)
    no_show = appointment("a2", days_ago=3, kind=TRIAL, status=AppointmentStatus.NO_SHOW)
    result = compute_stage([booked, no_show], [], NOW)

    assert result.stage == FunnelStage.NEW
    assert result.has_uncancelled_trial_free is True


def test_other_paid_activity_without_trial_is_new():
    standard = appointment("a1", days_ago=4, kind=AppointmentKind.STANDARD.value, price_cents=4500)
    assert compute_stage([standard], [], NOW).stage == FunnelStage.NEW


def test_window_runs_from_most_recent_completed_trial():
    older = appointment("a1", days_ago=30, kind=TRIAL)
    newer = appointment("a2", days_ago=4, kind=TRIAL)
    result = compute_stage([newer, older], [], NOW)

    assert result.stage == FunnelStage.SECOND_WINDOW
    assert result.window_expires_at == newer.start_instant + timedelta(days=10)


def test_legacy_free_record_with_kind_counts_as_trial():
    """Zero-priced legacy rows count only under the price heuristic."""
    legacy = appointment("a1", days_ago=5, kind="ONE_OFF", price_cents=0)
    assert compute_stage([legacy], [], NOW, policy=LegacyPriceHeuristicPolicy()).stage == FunnelStage.SECOND_WINDOW
    assert compute_stage([legacy], [], NOW, policy=ExplicitKindPolicy()).stage == FunnelStage.NEW


def test_free_record_without_kind_is_not_a_trial():
    legacy = appointment("a1", days_ago=5, kind=None, price_cents=0)
    result = compute_stage([legacy], [], NOW)
    assert result.stage == FunnelStage.NEW
    assert result.has_uncancelled_trial_free is False


def test_canceled_trial_restores_eligibility():
    canceled = appointment("a1", days_ago=-3, kind=TRIAL, status=AppointmentStatus.CANCELED)
    canceled_second = appointment("a2", days_ago=-4, kind=SECOND, status=AppointmentStatus.CANCELED)
    result = compute_stage([canceled, canceled_second], [], NOW)

    assert result.stage == FunnelStage.NEW
    assert result.has_uncancelled_trial_free is False
    assert result.has_uncancelled_discount_second is False


def test_custom_window_length():
    trial = appointment("a1", days_ago=5, kind=TRIAL)
    assert compute_stage([trial], [], NOW, window_days=3).stage == FunnelStage.FREE_USED


def test_idempotent_for_unchanged_data():
    history = [
        appointment("a1", days_ago=5, kind=TRIAL, price_cents=0),
        appointment("a2", days_ago=-1, kind=SECOND, status=AppointmentStatus.BOOKED),
    ]
    assert compute_stage(history, [], NOW) == compute_stage(list(history), [], NOW)


def test_unknown_policy_name_is_rejected():
    assert isinstance(get_trial_detection_policy("Explicit"), ExplicitKindPolicy)
    with pytest.raises(ValueError):
        get_trial_detection_policy("guess")


def test_service_reads_repository_and_flags_follow_cancellation():
    """Nothing is cached: a cancel is visible on the next computation."""
    booked_trial = appointment("a1", days_ago=-2, kind=TRIAL, status=AppointmentStatus.BOOKED)
    repository = MemoryBookingRepository(appointments=[booked_trial])
    service = FunnelService(repository, clock=lambda: NOW)

    first = service.compute_funnel_stage(CLIENT)
    assert first.stage == FunnelStage.NEW
    assert first.has_uncancelled_trial_free is True
    assert service.compute_funnel_stage(CLIENT) == first

    repository.cancel_appointment("a1")
    assert service.compute_funnel_stage(CLIENT).has_uncancelled_trial_free is False


def test_service_membership_overrides_history():
    repository = MemoryBookingRepository(
        appointments=[appointment("a1", days_ago=5, kind=TRIAL)],
        subscriptions=[subscription(SubscriptionStatus.ACTIVE)],
    )
    result = FunnelService(repository, clock=lambda: NOW).compute_funnel_stage(CLIENT)
    assert result.stage == FunnelStage.MEMBER
