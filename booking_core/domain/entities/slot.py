from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time


@dataclass(frozen=True, order=True)
class Slot:
    date: date
    time: time


@dataclass(frozen=True)
class SlotStatus:
    time: time
    available: bool


@dataclass(frozen=True, order=True)
class Opening:
    slot: Slot
    starts_at: datetime  # UTC instant of the slot in the business timezone

    @property
    def date(self) -> date:
        return self.slot.date

    @property
    def time(self) -> time:
        return self.slot.time
