from __future__ import annotations

import logging
from datetime import datetime

from boardroom.application.exceptions import BookingValidationError, StoreUnavailableError
from boardroom.application.ports.booking_store import BookingStorePort
from boardroom.application.ports.user_store import UserStorePort
from boardroom.domain.entities.booking import AvailabilityResult, Booking, ConflictInfo


class CheckAvailabilityUseCase:
    def __init__(self, bookings: BookingStorePort, users: UserStorePort) -> None:
        self._bookings = bookings
        self._users = users
        self._logger = logging.getLogger(__name__)

    def execute(
        self,
        boardroom_id: str,
        start: datetime,
        end: datetime,
        exclude_booking_id: str | None = None,
    ) -> AvailabilityResult:
        if start >= end:
            raise BookingValidationError("End time must be after start time")
        try:
            conflict = self._bookings.find_conflict(boardroom_id, start, end, exclude_booking_id)
        except StoreUnavailableError as e:
            self._logger.warning(
                "Availability check failed, reporting unavailable",
                extra={"boardroom_id": boardroom_id, "reason": str(e)},
            )
            return AvailabilityResult(available=False)

        if conflict is None:
            return AvailabilityResult(available=True)
        return AvailabilityResult(available=False, conflicting_booking=self.describe(conflict))

    def describe(self, booking: Booking) -> ConflictInfo:
        organizer = self._users.get(booking.user_id)
        return ConflictInfo(
            booking_id=booking.id,
            purpose=booking.purpose,
            organizer=organizer.name if organizer else "Unknown",
            start_time=booking.start_time,
            end_time=booking.end_time,
        )
