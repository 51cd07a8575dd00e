from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from boardroom.domain.entities.booking import ConflictInfo
from boardroom.domain.entities.time_range import TimeRange


@dataclass(frozen=True)
class TimeSlot:
    start_time: datetime
    end_time: datetime
    available: bool
    conflicting_booking: ConflictInfo | None = None

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(self.start_time, self.end_time)
