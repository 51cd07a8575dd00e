from __future__ import annotations

from datetime import datetime, timedelta

from boardroom.application.exceptions import BookingConflictError, BookingValidationError
from boardroom.application.use_cases.check_availability import CheckAvailabilityUseCase
from boardroom.domain.entities.booking import BookingRequest
from boardroom.domain.entities.booking_policy import BookingPolicy


class BookingValidator:
    """
    Runs the booking rules in a fixed order and stops at the first failure.
    The overlap check runs last, through the availability use case.
    """

    def __init__(self, policy: BookingPolicy, availability: CheckAvailabilityUseCase) -> None:
        self._policy = policy
        self._availability = availability

    def check_rules(self, request: BookingRequest, now: datetime) -> tuple[datetime, datetime]:
        """Validate everything except overlap. Returns (start, end) in the booking timezone."""
        if not request.boardroom_id:
            raise BookingValidationError("Boardroom is required")
        if request.start_time is None or request.end_time is None:
            raise BookingValidationError("Start time and end time are required")
        if not (request.purpose or "").strip():
            raise BookingValidationError("Purpose is required")
        if not (2 <= len(request.purpose.strip()) <= 200):
            raise BookingValidationError("Purpose must be between 2 and 200 characters")
        if len((request.notes or "").strip()) > 1000:
            raise BookingValidationError("Notes cannot exceed 1000 characters")
        for guest in request.external_attendees:
            if "@" not in guest.email:
                raise BookingValidationError(f"Invalid external attendee email: {guest.email or '(empty)'}")

        start = self._policy.localize(request.start_time)
        end = self._policy.localize(request.end_time)

        if start >= end:
            raise BookingValidationError("End time must be after start time")
        if start < now:
            raise BookingValidationError("Start time must be in the future")
        if start.date() != end.date():
            raise BookingValidationError("Booking must start and end on the same day")

        opens, closes = self._policy.workday_bounds(start.date())
        if not (opens <= start < closes):
            raise BookingValidationError(
                f"Start time must be between {opens:%H:%M} and {closes:%H:%M} (working hours)"
            )
        if not (opens < end <= closes):
            raise BookingValidationError(f"Booking must end by {closes:%H:%M} (working hours)")

        duration = end - start
        if duration < timedelta(minutes=self._policy.min_booking_minutes):
            raise BookingValidationError(
                f"Booking must be at least {self._policy.min_booking_minutes} minutes long"
            )
        if duration > timedelta(minutes=self._policy.max_booking_minutes):
            raise BookingValidationError(
                f"Booking cannot be longer than {self._policy.max_booking_minutes // 60} hours"
            )
        return start, end

    def validate(
        self,
        request: BookingRequest,
        now: datetime,
        exclude_booking_id: str | None = None,
    ) -> tuple[datetime, datetime]:
        start, end = self.check_rules(request, now)
        result = self._availability.execute(request.boardroom_id, start, end, exclude_booking_id)
        if not result.available:
            raise BookingConflictError(result.conflicting_booking)
        return start, end
