from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterator, Sequence

from boardroom.application.exceptions import NotFoundError
from boardroom.application.ports.boardroom_store import BoardroomStorePort
from boardroom.application.ports.booking_store import BookingStorePort
from boardroom.application.use_cases.check_availability import CheckAvailabilityUseCase
from boardroom.domain.entities.boardroom import Boardroom
from boardroom.domain.entities.booking import Booking
from boardroom.domain.entities.booking_policy import BookingPolicy
from boardroom.domain.entities.time_range import TimeRange
from boardroom.domain.entities.time_slot import TimeSlot


class DaySchedule:
    """
    Fixed-width slots across one room's working day.

    Iterating yields slots lazily; the sequence can be iterated any number of
    times. Availability is computed against the bookings captured at
    construction, so every pass gives the same answer.
    """

    def __init__(
        self,
        day: date,
        policy: BookingPolicy,
        bookings: Sequence[Booking],
        availability: CheckAvailabilityUseCase,
    ) -> None:
        self.day = day
        self._policy = policy
        self._bookings = tuple(b for b in bookings if b.is_active)
        self._availability = availability

    @property
    def bookings(self) -> tuple[Booking, ...]:
        return self._bookings

    def __iter__(self) -> Iterator[TimeSlot]:
        opens, closes = self._policy.workday_bounds(self.day)
        step = self._policy.slot_length
        current = opens
        # a slot that would run past closing is never produced
        while current + step <= closes:
            yield self._slot(TimeRange(current, current + step))
            current += step

    def __len__(self) -> int:
        opens, closes = self._policy.workday_bounds(self.day)
        return int((closes - opens) / self._policy.slot_length)

    def _slot(self, slot_range: TimeRange) -> TimeSlot:
        for booking in self._bookings:
            if booking.time_range.overlaps(slot_range):
                return TimeSlot(
                    start_time=slot_range.start,
                    end_time=slot_range.end,
                    available=False,
                    conflicting_booking=self._availability.describe(booking),
                )
        return TimeSlot(start_time=slot_range.start, end_time=slot_range.end, available=True)


@dataclass(frozen=True)
class DetailedAvailability:
    boardroom: Boardroom
    day: date
    time_slots: list[TimeSlot]
    total_bookings: int


def extend_selection(slots: Sequence[TimeSlot], start: datetime, wanted_end: datetime) -> TimeRange | None:
    """
    Grow a selection from the slot starting at `start` over consecutive
    available slots, stopping at `wanted_end` or before the first unavailable
    slot. Returns None when the start slot itself is not available.
    """
    ordered = sorted(slots, key=lambda s: s.start_time)
    index = next((i for i, s in enumerate(ordered) if s.start_time == start), None)
    if index is None or not ordered[index].available:
        return None

    end = ordered[index].end_time
    for slot in ordered[index + 1 :]:
        if end >= wanted_end or not slot.available or slot.start_time != end:
            break
        end = slot.end_time
    return TimeRange(start, end)


class SlotGeneratorUseCase:
    def __init__(
        self,
        bookings: BookingStorePort,
        boardrooms: BoardroomStorePort,
        availability: CheckAvailabilityUseCase,
        policy: BookingPolicy,
    ) -> None:
        self._bookings = bookings
        self._boardrooms = boardrooms
        self._availability = availability
        self._policy = policy
        self._logger = logging.getLogger(__name__)

    def slots_for(self, boardroom_id: str, day: date) -> DaySchedule:
        day_start, day_end = self._policy.day_bounds(day)
        bookings = self._bookings.list_for_room_between(boardroom_id, day_start, day_end)
        return DaySchedule(day, self._policy, bookings, self._availability)

    def detailed_availability(self, boardroom_id: str, day: date) -> DetailedAvailability:
        room = self._boardrooms.get(boardroom_id)
        if room is None:
            raise NotFoundError("Boardroom not found")

        schedule = self.slots_for(boardroom_id, day)
        slots = list(schedule)
        self._logger.debug(
            "Detailed availability computed",
            extra={"boardroom_id": boardroom_id, "reason": f"{sum(s.available for s in slots)} free"},
        )
        return DetailedAvailability(
            boardroom=room,
            day=day,
            time_slots=slots,
            total_bookings=len(schedule.bookings),
        )
