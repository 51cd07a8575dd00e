from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import date, datetime
from typing import Callable

from boardroom.application.exceptions import (
    BookingConflictError,
    BookingValidationError,
    NotFoundError,
    PermissionDeniedError,
)
from boardroom.application.ports.boardroom_store import BoardroomStorePort
from boardroom.application.ports.booking_store import BookingStorePort
from boardroom.application.ports.user_store import UserStorePort
from boardroom.application.use_cases.attendance import (
    AttendeeRole,
    BookingPermissions,
    resolve_permissions,
)
from boardroom.application.use_cases.booking_validator import BookingValidator
from boardroom.application.use_cases.check_availability import CheckAvailabilityUseCase
from boardroom.application.use_cases.notifications import NotificationsUseCase
from boardroom.domain.entities.boardroom import Boardroom
from boardroom.domain.entities.booking import Booking, BookingRequest, BookingStatus
from boardroom.domain.entities.booking_policy import BookingPolicy
from boardroom.domain.entities.user import User


class BookingUseCase:
    def __init__(
        self,
        bookings: BookingStorePort,
        boardrooms: BoardroomStorePort,
        users: UserStorePort,
        availability: CheckAvailabilityUseCase,
        validator: BookingValidator,
        notifications: NotificationsUseCase,
        policy: BookingPolicy,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._bookings = bookings
        self._boardrooms = boardrooms
        self._users = users
        self._availability = availability
        self._validator = validator
        self._notifications = notifications
        self._policy = policy
        self._clock = clock or (lambda: datetime.now(policy.timezone))
        self._logger = logging.getLogger(__name__)

    def now(self) -> datetime:
        return self._clock()

    def create_booking(self, actor: User, request: BookingRequest) -> Booking:
        room = self._bookable_room(request.boardroom_id)
        start, end = self._validator.validate(request, self.now())
        attendees = self._resolve_attendees(actor, request.attendees)
        self._warn_if_over_capacity(room, attendees, request)

        now = self.now()
        booking = Booking(
            id=uuid.uuid4().hex,
            boardroom_id=room.id,
            user_id=actor.id,
            start_time=start,
            end_time=end,
            purpose=request.purpose.strip(),
            notes=(request.notes or "").strip(),
            status=BookingStatus.confirmed,
            attendees=attendees,
            external_attendees=request.external_attendees,
            created_at=now,
            modified_at=now,
        )

        conflict = self._bookings.add_if_free(booking)
        if conflict is not None:
            # lost a race against a concurrent insert
            self._logger.info(
                "Booking refused at write time",
                extra={"boardroom_id": room.id, "user_id": actor.id, "booking_id": conflict.id},
            )
            raise BookingConflictError(self._availability.describe(conflict))

        self._logger.info(
            "Booking created",
            extra={"booking_id": booking.id, "boardroom_id": room.id, "user_id": actor.id},
        )
        self._notifications.notify(
            [uid for uid in attendees if uid != actor.id],
            f'You have been invited to "{booking.purpose}" in {room.name}',
            booking.id,
        )
        return booking

    def update_booking(self, actor: User, booking_id: str, request: BookingRequest) -> Booking:
        booking = self.get_booking(booking_id)
        permissions = resolve_permissions(booking, actor.id, self.now())
        if not permissions.can_edit:
            raise PermissionDeniedError(_denial(permissions, "edit"))

        room = self._bookable_room(request.boardroom_id)
        start, end = self._validator.validate(request, self.now(), exclude_booking_id=booking.id)
        attendees = self._resolve_attendees(actor, request.attendees)
        self._warn_if_over_capacity(room, attendees, request)

        updated = replace(
            booking,
            boardroom_id=room.id,
            start_time=start,
            end_time=end,
            purpose=request.purpose.strip(),
            notes=(request.notes or "").strip(),
            attendees=attendees,
            external_attendees=request.external_attendees,
            modified_at=self.now(),
        )
        conflict = self._bookings.replace_if_free(updated)
        if conflict is not None:
            raise BookingConflictError(self._availability.describe(conflict))

        self._logger.info(
            "Booking updated",
            extra={"booking_id": booking.id, "boardroom_id": room.id, "user_id": actor.id},
        )
        self._notifications.notify(
            [uid for uid in attendees if uid != actor.id],
            f'Meeting "{updated.purpose}" in {room.name} has been updated',
            booking.id,
        )
        return updated

    def cancel_booking(self, actor: User, booking_id: str) -> Booking:
        booking = self.get_booking(booking_id)
        permissions = resolve_permissions(booking, actor.id, self.now())
        admin_override = actor.is_admin and booking.is_active
        if not (permissions.can_cancel or admin_override):
            raise PermissionDeniedError(_denial(permissions, "cancel"))

        cancelled = replace(booking, status=BookingStatus.cancelled, modified_at=self.now())
        self._bookings.save(cancelled)

        self._logger.info("Booking cancelled", extra={"booking_id": booking.id, "user_id": actor.id})
        room = self._boardrooms.get(booking.boardroom_id)
        self._notifications.notify(
            [uid for uid in booking.attendees if uid != actor.id],
            f'Meeting "{booking.purpose}" in {room.name if room else "the boardroom"} has been cancelled',
            booking.id,
        )
        return cancelled

    def opt_out(self, actor: User, booking_id: str) -> Booking:
        booking = self.get_booking(booking_id)
        permissions = resolve_permissions(booking, actor.id, self.now())
        if permissions.role is AttendeeRole.creator:
            raise BookingValidationError(
                "As the organizer, you cannot opt out. Please cancel the booking instead."
            )
        if permissions.role is AttendeeRole.none:
            raise BookingValidationError("You are not an attendee of this booking")
        if not permissions.can_opt_out:
            raise PermissionDeniedError(_denial(permissions, "opt out of"))

        updated = replace(
            booking,
            attendees=tuple(uid for uid in booking.attendees if uid != actor.id),
            modified_at=self.now(),
        )
        self._bookings.save(updated)

        self._logger.info("Attendee opted out", extra={"booking_id": booking.id, "user_id": actor.id})
        room = self._boardrooms.get(booking.boardroom_id)
        self._notifications.notify(
            [booking.user_id],
            f'{actor.name} opted out of your meeting "{booking.purpose}" in {room.name if room else "the boardroom"}',
            booking.id,
        )
        return updated

    def permissions(self, actor: User, booking_id: str) -> BookingPermissions:
        return resolve_permissions(self.get_booking(booking_id), actor.id, self.now())

    def get_booking(self, booking_id: str) -> Booking:
        booking = self._bookings.get(booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        return booking

    def my_bookings(self, actor: User) -> list[Booking]:
        return self._bookings.list_for_attendee(actor.id)

    def all_bookings(
        self,
        status: BookingStatus | None = None,
        boardroom_id: str | None = None,
        page: int = 1,
        limit: int = 1000,
    ) -> list[Booking]:
        page = max(page, 1)
        limit = max(limit, 1)
        found = self._bookings.list_all(status=status, boardroom_id=boardroom_id)
        return found[(page - 1) * limit : page * limit]

    def room_day_bookings(self, boardroom_id: str, day: date) -> list[Booking]:
        day_start, day_end = self._policy.day_bounds(day)
        return self._bookings.list_for_room_between(boardroom_id, day_start, day_end)

    def _bookable_room(self, boardroom_id: str | None) -> Boardroom:
        if not boardroom_id:
            raise BookingValidationError("Boardroom is required")
        room = self._boardrooms.get(boardroom_id)
        if room is None:
            raise NotFoundError("Boardroom not found")
        if not room.is_active:
            raise BookingValidationError("Boardroom not found or inactive")
        return room

    def _resolve_attendees(self, actor: User, attendee_ids: tuple[str, ...]) -> tuple[str, ...]:
        wanted = list(dict.fromkeys(uid for uid in attendee_ids if uid))
        known = {u.id for u in self._users.get_many(wanted)}
        unknown = [uid for uid in wanted if uid not in known]
        if unknown:
            raise BookingValidationError(f"Unknown attendee: {unknown[0]}")
        if actor.id not in wanted:
            wanted.append(actor.id)
        return tuple(wanted)

    def _warn_if_over_capacity(self, room: Boardroom, attendees: tuple[str, ...], request: BookingRequest) -> None:
        headcount = len(attendees) + len(request.external_attendees)
        if headcount > room.capacity:
            self._logger.warning(
                "Attendee count exceeds room capacity",
                extra={"boardroom_id": room.id, "reason": f"{headcount} > {room.capacity}"},
            )


def _denial(permissions: BookingPermissions, action: str) -> str:
    if permissions.role is AttendeeRole.none:
        return f"You do not have permission to {action} this booking"
    if permissions.role is AttendeeRole.attendee and action != "opt out of":
        return f"Only the organizer can {action} this booking"
    return "This booking can no longer be changed"
