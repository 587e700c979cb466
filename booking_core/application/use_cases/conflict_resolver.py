from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, time
from zoneinfo import ZoneInfo

from booking_core.application.utils.time_utils import to_business_local
from booking_core.domain.entities.appointment import Appointment

logger = logging.getLogger(__name__)


def exclude_conflicts(
    candidate_slots: Iterable[time],
    appointments: Iterable[Appointment],
    business_timezone: ZoneInfo,
    target_date: date | None = None,
) -> list[time]:
    """
    Remove candidate slots held by active appointments.

    Appointment instants are compared as wall-clock time in the business timezone,
    never the caller's. An appointment that does not start exactly on a candidate
    boundary (or falls on another local date) matches nothing and is only logged.
    """
    candidates = list(candidate_slots)
    candidate_set = set(candidates)
    taken: set[time] = set()

    for appointment in appointments:
        if not appointment.is_active:
            continue

        local_start = to_business_local(appointment.start_instant, business_timezone)
        if target_date is not None and local_start.date() != target_date:
            logger.warning(
                "Appointment outside target business day ignored",
                extra={
                    "appointment_id": appointment.id,
                    "date": target_date.isoformat(),
                    "reason": "wrong_day",
                },
            )
            continue

        slot_time = local_start.time().replace(second=0, microsecond=0)
        if local_start.second or local_start.microsecond or slot_time not in candidate_set:
            logger.warning(
                "Appointment does not align to a slot boundary",
                extra={
                    "appointment_id": appointment.id,
                    "provider_id": appointment.provider_id,
                    "reason": "misaligned",
                    "local_start": local_start.isoformat(),
                },
            )
            continue

        taken.add(slot_time)

    return [slot for slot in candidates if slot not in taken]


def held_slots(
    candidate_slots: Iterable[time],
    appointments: Iterable[Appointment],
    business_timezone: ZoneInfo,
    target_date: date | None = None,
) -> set[time]:
    """Candidate slots that an active appointment holds."""
    candidates = list(candidate_slots)
    free = set(exclude_conflicts(candidates, appointments, business_timezone, target_date))
    return {slot for slot in candidates if slot not in free}
