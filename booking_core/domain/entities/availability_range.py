from __future__ import annotations

from dataclasses import dataclass
from datetime import time


@dataclass(frozen=True)
class AvailabilityRange:
    provider_id: str
    day_of_week: int  # 0 = Sunday ... 6 = Saturday
    start_time: time
    end_time: time

    @property
    def is_well_formed(self) -> bool:
        return 0 <= self.day_of_week <= 6 and self.start_time < self.end_time

    def label(self) -> str:
        return f"{self.start_time.strftime('%H:%M')}-{self.end_time.strftime('%H:%M')}"
