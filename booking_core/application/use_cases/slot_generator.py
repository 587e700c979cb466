from __future__ import annotations

from datetime import time

from booking_core.application.utils.time_utils import minutes_since_midnight, time_from_minutes
from booking_core.domain.entities.availability_range import AvailabilityRange


def generate_slots(availability_range: AvailabilityRange, slot_duration_minutes: int) -> list[time]:
    """
    Slot start times start + k*duration (k >= 0) that fully fit before the range end.

    A trailing remainder shorter than one slot is dropped. The caller guarantees
    start < end; this function does not check it.
    """
    if slot_duration_minutes <= 0:
        raise ValueError("slot_duration_minutes must be positive")

    start = minutes_since_midnight(availability_range.start_time)
    end = minutes_since_midnight(availability_range.end_time)

    slots: list[time] = []
    current = start
    while current + slot_duration_minutes <= end:
        slots.append(time_from_minutes(current))
        current += slot_duration_minutes
    return slots
