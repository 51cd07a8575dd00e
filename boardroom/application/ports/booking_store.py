from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from boardroom.domain.entities.booking import Booking, BookingStatus


class BookingStorePort(ABC):
    @abstractmethod
    def get(self, booking_id: str) -> Booking | None:
        raise NotImplementedError

    @abstractmethod
    def find_conflict(
        self,
        boardroom_id: str,
        start: datetime,
        end: datetime,
        exclude_booking_id: str | None = None,
    ) -> Booking | None:
        """Return one confirmed booking on the room overlapping [start, end), if any."""
        raise NotImplementedError

    @abstractmethod
    def list_for_room_between(self, boardroom_id: str, start: datetime, end: datetime) -> list[Booking]:
        """Confirmed bookings on the room starting in [start, end), ordered by start."""
        raise NotImplementedError

    @abstractmethod
    def list_for_attendee(self, user_id: str) -> list[Booking]:
        raise NotImplementedError

    @abstractmethod
    def list_all(
        self,
        status: BookingStatus | None = None,
        boardroom_id: str | None = None,
    ) -> list[Booking]:
        raise NotImplementedError

    @abstractmethod
    def add_if_free(self, booking: Booking) -> Booking | None:
        """
        Insert the booking unless a confirmed booking on the same room overlaps it.
        The check and the insert happen as one step.
        Returns the conflicting booking when the insert was refused, else None.
        """
        raise NotImplementedError

    @abstractmethod
    def replace_if_free(self, booking: Booking) -> Booking | None:
        """Same as add_if_free for an existing booking, ignoring its own stored interval."""
        raise NotImplementedError

    @abstractmethod
    def save(self, booking: Booking) -> None:
        """Unconditional write, for changes that cannot create an overlap."""
        raise NotImplementedError
