from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo


@dataclass(frozen=True)
class BookingPolicy:
    timezone: ZoneInfo
    workday_start_hour: int = 7
    workday_end_hour: int = 16
    slot_minutes: int = 30
    min_booking_minutes: int = 30
    max_booking_minutes: int = 480

    def localize(self, value: datetime) -> datetime:
        """Naive datetimes are taken as wall-clock time in the booking timezone."""
        if value.tzinfo is None:
            return value.replace(tzinfo=self.timezone)
        return value.astimezone(self.timezone)

    def workday_bounds(self, day: date) -> tuple[datetime, datetime]:
        opens = datetime.combine(day, time(hour=self.workday_start_hour), tzinfo=self.timezone)
        closes = datetime.combine(day, time(hour=self.workday_end_hour), tzinfo=self.timezone)
        return opens, closes

    def day_bounds(self, day: date) -> tuple[datetime, datetime]:
        start = datetime.combine(day, time.min, tzinfo=self.timezone)
        return start, start + timedelta(days=1)

    @property
    def slot_length(self) -> timedelta:
        return timedelta(minutes=self.slot_minutes)
