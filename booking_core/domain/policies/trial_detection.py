"""
Policies deciding whether an appointment counts as the client's free trial cut.

Historical records were created before ``kind`` was reliably populated, so the
default policy also accepts zero-priced appointments that carry some kind. The
heuristic lives here, behind a small interface, so callers can switch to the
strict rule once the legacy data has been normalized.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from booking_core.domain.entities.appointment import Appointment, AppointmentKind


class TrialDetectionPolicy(ABC):
    name: str = "abstract"

    @abstractmethod
    def is_trial_free(self, appointment: Appointment) -> bool:
        """True when a non-canceled appointment is the client's free trial cut."""
        raise NotImplementedError


class ExplicitKindPolicy(TrialDetectionPolicy):
    name = "explicit"

    def is_trial_free(self, appointment: Appointment) -> bool:
        if appointment.is_canceled:
            return False
        return appointment.kind == AppointmentKind.TRIAL_FREE


class LegacyPriceHeuristicPolicy(ExplicitKindPolicy):
    name = "legacy"

    def is_trial_free(self, appointment: Appointment) -> bool:
        if super().is_trial_free(appointment):
            return True
        if appointment.is_canceled:
            return False
        # kind must be set: null-kind free rows are not trial cuts
        return appointment.price_cents == 0 and appointment.kind is not None


POLICIES: dict[str, type[TrialDetectionPolicy]] = {
    ExplicitKindPolicy.name: ExplicitKindPolicy,
    LegacyPriceHeuristicPolicy.name: LegacyPriceHeuristicPolicy,
}


def get_trial_detection_policy(name: str) -> TrialDetectionPolicy:
    normalized = (name or "").strip().lower()
    policy_cls = POLICIES.get(normalized)
    if policy_cls is None:
        raise ValueError(f"Unknown trial detection policy: {name!r}")
    return policy_cls()
