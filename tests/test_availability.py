"""
Tests for the conflict query and the slot generator.
"""

from __future__ import annotations

from datetime import date

import pytest

from boardroom.application.exceptions import BookingValidationError, StoreUnavailableError
from boardroom.application.use_cases.check_availability import CheckAvailabilityUseCase
from boardroom.application.use_cases.slot_generator import extend_selection
from boardroom.domain.entities.booking import BookingRequest
from boardroom.infrastructure.store.memory_store import MemoryBookingStore, MemoryUserStore

from conftest import at


DAY = date(2030, 3, 5)


def _book(container, user, room, start, end, purpose="Standup"):
    return container.booking.create_booking(
        user, BookingRequest(boardroom_id=room.id, start_time=start, end_time=end, purpose=purpose)
    )


def test_free_room_is_available(container, room):
    result = container.availability.execute(room.id, at(9), at(10))
    assert result.available is True
    assert result.conflicting_booking is None


def test_overlap_reports_conflicting_booking(container, room, alice):
    booking = _book(container, alice, room, at(9), at(10), purpose="Board review")
    result = container.availability.execute(room.id, at(9, 30), at(10, 30))
    assert result.available is False
    assert result.conflicting_booking.booking_id == booking.id
    assert result.conflicting_booking.purpose == "Board review"
    assert result.conflicting_booking.organizer == "Alice Organizer"


def test_adjacent_interval_is_available(container, room, alice):
    _book(container, alice, room, at(9), at(10))
    assert container.availability.execute(room.id, at(10), at(10, 30)).available is True
    assert container.availability.execute(room.id, at(8, 30), at(9)).available is True


def test_reversed_or_empty_range_is_rejected(container, room, alice):
    _book(container, alice, room, at(9), at(10))
    with pytest.raises(BookingValidationError):
        container.availability.execute(room.id, at(10), at(9))
    with pytest.raises(BookingValidationError):
        container.availability.execute(room.id, at(9, 30), at(9, 30))


def test_other_rooms_do_not_block(container, room, alice):
    from boardroom.application.use_cases.boardrooms import BoardroomDraft

    other = container.boardrooms.create(BoardroomDraft(name="Huddle", location="Floor 2", capacity=3))
    _book(container, alice, room, at(9), at(10))
    assert container.availability.execute(other.id, at(9), at(10)).available is True


def test_cancelled_bookings_never_block(container, room, alice):
    booking = _book(container, alice, room, at(9), at(10))
    container.booking.cancel_booking(alice, booking.id)
    assert container.availability.execute(room.id, at(9), at(10)).available is True


def test_transient_store_failure_reports_unavailable():
    """A store error must never be read as a free room."""
    class FlakyStore(MemoryBookingStore):
        def find_conflict(self, *args, **kwargs):
            raise StoreUnavailableError("disk busy")

    uc = CheckAvailabilityUseCase(bookings=FlakyStore(), users=MemoryUserStore())
    result = uc.execute("room", at(9), at(10))
    assert result.available is False
    assert result.conflicting_booking is None


def test_day_has_eighteen_half_hour_slots(container, room):
    """07:00 to 16:00 in 30 minute steps."""
    schedule = container.slots.slots_for(room.id, DAY)
    slots = list(schedule)
    assert len(slots) == 18
    assert len(schedule) == 18
    assert slots[0].start_time == at(7)
    assert slots[-1].end_time == at(16)
    assert all(s.end_time - s.start_time == slots[0].end_time - slots[0].start_time for s in slots)
    assert all(s.available for s in slots)


def test_schedule_is_restartable(container, room, alice):
    _book(container, alice, room, at(9), at(10))
    schedule = container.slots.slots_for(room.id, DAY)
    assert [s.available for s in schedule] == [s.available for s in schedule]


def test_slot_availability_matches_conflict_query(container, room, alice, bob):
    _book(container, alice, room, at(9), at(10))
    _book(container, bob, room, at(13, 15), at(14))
    for slot in container.slots.slots_for(room.id, DAY):
        expected = container.availability.execute(room.id, slot.start_time, slot.end_time)
        assert slot.available == expected.available

    taken = [s.start_time for s in container.slots.slots_for(room.id, DAY) if not s.available]
    assert taken == [at(9), at(9, 30), at(13), at(13, 30)]


def test_past_slots_are_still_generated(container, room):
    # the clock sits at 08:00 on the 4th
    slots = list(container.slots.slots_for(room.id, date(2030, 3, 4)))
    assert len(slots) == 18
    assert slots[0].start_time == at(7, day=4)


def test_detailed_availability_counts_bookings(container, room, alice):
    _book(container, alice, room, at(9), at(10))
    result = container.slots.detailed_availability(room.id, DAY)
    assert result.boardroom.id == room.id
    assert result.total_bookings == 1
    blocked = [s for s in result.time_slots if not s.available]
    assert {s.conflicting_booking.purpose for s in blocked} == {"Standup"}


def test_extend_selection_stops_before_unavailable_slot(container, room, alice):
    _book(container, alice, room, at(11), at(12))
    slots = list(container.slots.slots_for(room.id, DAY))

    selected = extend_selection(slots, at(9), at(12))
    assert (selected.start, selected.end) == (at(9), at(11))

    selected = extend_selection(slots, at(9), at(10))
    assert (selected.start, selected.end) == (at(9), at(10))

    assert extend_selection(slots, at(11), at(12)) is None
