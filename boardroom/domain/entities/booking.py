from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from boardroom.domain.entities.time_range import TimeRange


class BookingStatus(str, Enum):
    confirmed = "confirmed"
    cancelled = "cancelled"


@dataclass(frozen=True)
class ExternalAttendee:
    email: str
    name: str = ""

    @staticmethod
    def from_email(email: str, name: str | None = None) -> "ExternalAttendee":
        normalized = (email or "").strip().lower()
        return ExternalAttendee(
            email=normalized,
            name=(name or "").strip() or normalized.split("@")[0],
        )


@dataclass(frozen=True)
class Booking:
    id: str
    boardroom_id: str
    user_id: str  # creator
    start_time: datetime
    end_time: datetime
    purpose: str
    notes: str = ""
    status: BookingStatus = BookingStatus.confirmed
    attendees: tuple[str, ...] = ()
    external_attendees: tuple[ExternalAttendee, ...] = ()
    created_at: datetime | None = None
    modified_at: datetime | None = None

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(self.start_time, self.end_time)

    @property
    def is_active(self) -> bool:
        return self.status is BookingStatus.confirmed

    def blocks(self, boardroom_id: str, time_range: TimeRange) -> bool:
        return (
            self.is_active
            and self.boardroom_id == boardroom_id
            and self.time_range.overlaps(time_range)
        )


@dataclass(frozen=True)
class ConflictInfo:
    booking_id: str
    purpose: str
    organizer: str
    start_time: datetime
    end_time: datetime


@dataclass(frozen=True)
class AvailabilityResult:
    available: bool
    conflicting_booking: ConflictInfo | None = None


@dataclass(frozen=True)
class BookingRequest:
    boardroom_id: str | None
    start_time: datetime | None
    end_time: datetime | None
    purpose: str | None
    attendees: tuple[str, ...] = ()
    external_attendees: tuple[ExternalAttendee, ...] = ()
    notes: str = ""
