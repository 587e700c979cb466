from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from booking_core.application.use_cases.daily_availability import DailyAvailabilityEngine
from booking_core.application.utils.time_utils import business_today, to_business_instant, utc_now
from booking_core.domain.entities.slot import Opening, Slot


class OpeningsSearch:
    def __init__(
        self,
        engine: DailyAvailabilityEngine,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._engine = engine
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    def next_openings(self, provider_id: str, limit: int = 3, max_days_horizon: int = 30) -> list[Opening]:
        """
        The next `limit` openings, scanning at most `max_days_horizon` business days
        starting today. A day that fails is logged and skipped; running out of
        horizon returns whatever was found, possibly nothing.
        """
        if limit <= 0 or max_days_horizon <= 0:
            return []

        self._engine.ensure_bookable(provider_id)

        tz = self._engine.timezone
        now = self._clock()
        today = business_today(now, tz)
        openings: list[Opening] = []

        for offset in range(max_days_horizon):
            if len(openings) >= limit:
                break
            day = today + timedelta(days=offset)

            try:
                slots = self._engine.available_slots(provider_id, day)
            except Exception as e:
                self._logger.warning(
                    "Skipping day in openings search",
                    extra={"provider_id": provider_id, "date": day.isoformat(), "error": str(e)},
                )
                continue

            for slot_time in slots:
                slot = Slot(date=day, time=slot_time)
                starts_at = to_business_instant(slot.date, slot.time, tz)
                if starts_at <= now:
                    continue
                openings.append(Opening(slot=slot, starts_at=starts_at))
                if len(openings) >= limit:
                    break

        openings.sort(key=lambda opening: opening.slot)
        self._logger.info(
            "Openings search finished",
            extra={"provider_id": provider_id, "found": len(openings), "limit": limit},
        )
        return openings[:limit]
