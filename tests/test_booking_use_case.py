"""
Tests for booking creation, editing, cancellation and opt-out.
"""

from __future__ import annotations

import threading
from datetime import timedelta

import pytest

from boardroom.application.exceptions import (
    BookingConflictError,
    BookingValidationError,
    NotFoundError,
    PermissionDeniedError,
)
from boardroom.application.use_cases.attendance import AttendeeRole, resolve_permissions
from boardroom.application.use_cases.boardrooms import BoardroomDraft
from boardroom.domain.entities.booking import BookingRequest, BookingStatus, ExternalAttendee

from conftest import NOW, at


def _request(room_id, start, end, purpose="Planning", attendees=()):
    return BookingRequest(
        boardroom_id=room_id, start_time=start, end_time=end, purpose=purpose, attendees=tuple(attendees)
    )


def test_scenario_from_existing_nine_to_ten(container, room, alice, bob):
    container.booking.create_booking(alice, _request(room.id, at(9), at(10)))

    with pytest.raises(BookingConflictError) as exc:
        container.booking.create_booking(bob, _request(room.id, at(9, 30), at(10, 30)))
    assert exc.value.conflict is not None
    assert exc.value.conflict.organizer == "Alice Organizer"

    adjacent = container.booking.create_booking(bob, _request(room.id, at(10), at(10, 30)))
    assert adjacent.status is BookingStatus.confirmed

    with pytest.raises(BookingValidationError):
        container.booking.create_booking(bob, _request(room.id, at(6, 30), at(7, 30)))
    with pytest.raises(BookingValidationError):
        container.booking.create_booking(bob, _request(room.id, at(9), at(9, 15)))


def test_creator_is_added_to_attendees(container, room, alice, bob):
    booking = container.booking.create_booking(alice, _request(room.id, at(9), at(10), attendees=[bob.id]))
    assert booking.user_id == alice.id
    assert booking.attendees == (bob.id, alice.id)


def test_unknown_attendee_is_rejected(container, room, alice):
    with pytest.raises(BookingValidationError):
        container.booking.create_booking(alice, _request(room.id, at(9), at(10), attendees=["ghost"]))


def test_external_attendee_name_defaults_to_email_local_part():
    attendee = ExternalAttendee.from_email("  Guest.Person@Example.com ")
    assert attendee.email == "guest.person@example.com"
    assert attendee.name == "guest.person"


def test_unknown_and_inactive_rooms(container, room, alice):
    with pytest.raises(NotFoundError):
        container.booking.create_booking(alice, _request("missing", at(9), at(10)))

    container.boardrooms.deactivate(room.id)
    with pytest.raises(BookingValidationError) as exc:
        container.booking.create_booking(alice, _request(room.id, at(9), at(10)))
    assert "inactive" in exc.value.reason


def test_over_capacity_is_allowed_but_logged(container, room, alice, bob, carol, admin, caplog):
    guests = tuple(ExternalAttendee.from_email(f"guest{i}@example.com") for i in range(2))
    request = BookingRequest(
        boardroom_id=room.id,
        start_time=at(9),
        end_time=at(10),
        purpose="All hands",
        attendees=(bob.id, carol.id, admin.id),
        external_attendees=guests,
    )
    with caplog.at_level("WARNING"):
        booking = container.booking.create_booking(alice, request)
    assert booking.status is BookingStatus.confirmed
    assert "exceeds room capacity" in caplog.text


def test_invitees_are_notified(container, room, alice, bob):
    container.booking.create_booking(alice, _request(room.id, at(9), at(10), purpose="Retro", attendees=[bob.id]))
    messages = [n.message for n in container.notifications.list_for_user(bob.id)]
    assert messages == ['You have been invited to "Retro" in Executive Suite']
    assert container.notifications.list_for_user(alice.id) == []


def test_cancel_frees_the_interval(container, room, alice, bob):
    booking = container.booking.create_booking(alice, _request(room.id, at(9), at(10), attendees=[bob.id]))
    cancelled = container.booking.cancel_booking(alice, booking.id)
    assert cancelled.status is BookingStatus.cancelled
    assert (cancelled.start_time, cancelled.end_time) == (booking.start_time, booking.end_time)

    replacement = container.booking.create_booking(bob, _request(room.id, at(9), at(10)))
    assert replacement.status is BookingStatus.confirmed
    assert any("cancelled" in n.message for n in container.notifications.list_for_user(bob.id))


def test_only_creator_cancels(container, room, alice, bob, carol):
    booking = container.booking.create_booking(alice, _request(room.id, at(9), at(10), attendees=[bob.id]))
    with pytest.raises(PermissionDeniedError):
        container.booking.cancel_booking(bob, booking.id)
    with pytest.raises(PermissionDeniedError):
        container.booking.cancel_booking(carol, booking.id)


def test_admin_may_cancel_any_confirmed_booking(container, room, alice, admin):
    booking = container.booking.create_booking(alice, _request(room.id, at(9), at(10)))
    assert container.booking.cancel_booking(admin, booking.id).status is BookingStatus.cancelled


def test_booking_starting_now_can_still_be_cancelled(container, room, alice, clock):
    booking = container.booking.create_booking(alice, _request(room.id, at(9), at(10)))
    clock.now = at(9)
    assert container.booking.permissions(alice, booking.id).can_edit is True
    assert container.booking.cancel_booking(alice, booking.id).status is BookingStatus.cancelled


def test_started_booking_cannot_be_cancelled(container, room, alice, clock):
    booking = container.booking.create_booking(alice, _request(room.id, at(9), at(10)))
    clock.now = at(9, 15)
    with pytest.raises(PermissionDeniedError):
        container.booking.cancel_booking(alice, booking.id)


def test_opt_out_removes_only_the_actor(container, room, alice, bob, carol):
    booking = container.booking.create_booking(
        alice, _request(room.id, at(9), at(10), attendees=[bob.id, carol.id])
    )
    updated = container.booking.opt_out(bob, booking.id)
    assert updated.attendees == (carol.id, alice.id)
    assert updated.status is BookingStatus.confirmed
    assert (updated.start_time, updated.end_time, updated.boardroom_id) == (
        booking.start_time,
        booking.end_time,
        booking.boardroom_id,
    )
    organizer_inbox = [n.message for n in container.notifications.list_for_user(alice.id)]
    assert organizer_inbox == ['Bob Attendee opted out of your meeting "Planning" in Executive Suite']


def test_opt_out_rules(container, room, alice, bob, carol):
    booking = container.booking.create_booking(alice, _request(room.id, at(9), at(10), attendees=[bob.id]))
    with pytest.raises(BookingValidationError) as exc:
        container.booking.opt_out(alice, booking.id)
    assert "organizer" in exc.value.reason
    with pytest.raises(BookingValidationError):
        container.booking.opt_out(carol, booking.id)

    container.booking.cancel_booking(alice, booking.id)
    with pytest.raises(PermissionDeniedError):
        container.booking.opt_out(bob, booking.id)


def test_permission_matrix(container, room, alice, bob, carol):
    booking = container.booking.create_booking(alice, _request(room.id, at(9), at(10), attendees=[bob.id]))

    creator = resolve_permissions(booking, alice.id, NOW)
    assert creator.role is AttendeeRole.creator
    assert (creator.can_cancel, creator.can_opt_out, creator.can_edit) == (True, False, True)

    attendee = resolve_permissions(booking, bob.id, NOW)
    assert attendee.role is AttendeeRole.attendee
    assert (attendee.can_cancel, attendee.can_opt_out, attendee.can_edit) == (False, True, False)

    outsider = resolve_permissions(booking, carol.id, NOW)
    assert outsider.role is AttendeeRole.none
    assert (outsider.can_cancel, outsider.can_opt_out, outsider.can_edit) == (False, False, False)

    after_start = resolve_permissions(booking, alice.id, at(9) + timedelta(minutes=1))
    assert (after_start.can_cancel, after_start.can_edit) == (False, False)


def test_edit_revalidates_excluding_itself(container, room, alice, bob):
    booking = container.booking.create_booking(alice, _request(room.id, at(9), at(10)))
    container.booking.create_booking(bob, _request(room.id, at(11), at(12)))

    moved = container.booking.update_booking(alice, booking.id, _request(room.id, at(9, 30), at(10, 30), "Moved"))
    assert (moved.start_time, moved.purpose) == (at(9, 30), "Moved")

    with pytest.raises(BookingConflictError):
        container.booking.update_booking(alice, booking.id, _request(room.id, at(10, 30), at(11, 30)))

    with pytest.raises(PermissionDeniedError):
        container.booking.update_booking(bob, booking.id, _request(room.id, at(13), at(14)))


def test_edit_can_move_to_another_room(container, room, alice):
    other = container.boardrooms.create(BoardroomDraft(name="Huddle", location="Floor 2", capacity=3))
    booking = container.booking.create_booking(alice, _request(room.id, at(9), at(10)))
    moved = container.booking.update_booking(alice, booking.id, _request(other.id, at(9), at(10)))
    assert moved.boardroom_id == other.id
    assert container.availability.execute(room.id, at(9), at(10)).available is True


def test_concurrent_requests_cannot_double_book(container, room, alice, bob):
    barrier = threading.Barrier(8)
    outcomes: list[str] = []
    lock = threading.Lock()

    def attempt(user):
        barrier.wait()
        try:
            container.booking.create_booking(user, _request(room.id, at(9), at(10)))
            result = "ok"
        except BookingConflictError:
            result = "conflict"
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=attempt, args=(alice if i % 2 else bob,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("ok") == 1
    assert outcomes.count("conflict") == 7


def test_store_refuses_overlapping_insert_after_stale_check(container, room, alice, bob):
    """The write itself rejects an overlap even when the earlier check passed."""
    validator = container.booking._validator
    real_validate = validator.validate

    def stale_validate(request, now, exclude_booking_id=None):
        # behave as if the check ran before the competing insert landed
        start, end = validator.check_rules(request, now)
        return start, end

    container.booking.create_booking(alice, _request(room.id, at(9), at(10)))
    validator.validate = stale_validate
    try:
        with pytest.raises(BookingConflictError):
            container.booking.create_booking(bob, _request(room.id, at(9), at(10)))
    finally:
        validator.validate = real_validate


def test_confirmed_bookings_never_overlap(container, room, alice, bob):
    for start_hour in range(7, 15):
        for minute in (0, 15, 30, 45):
            try:
                container.booking.create_booking(
                    alice if minute % 30 else bob,
                    _request(room.id, at(start_hour, minute), at(start_hour, minute) + timedelta(minutes=45)),
                )
            except (BookingConflictError, BookingValidationError):
                pass

    confirmed = container.booking.room_day_bookings(room.id, at(9).date())
    assert confirmed
    for i, a in enumerate(confirmed):
        for b in confirmed[i + 1 :]:
            assert not (a.start_time < b.end_time and b.start_time < a.end_time)


def test_listings(container, room, alice, bob):
    first = container.booking.create_booking(alice, _request(room.id, at(9), at(10), attendees=[bob.id]))
    second = container.booking.create_booking(alice, _request(room.id, at(11), at(12)))
    container.booking.cancel_booking(alice, second.id)

    assert [b.id for b in container.booking.my_bookings(bob)] == [first.id]
    assert [b.id for b in container.booking.my_bookings(alice)] == [second.id, first.id]
    assert [b.id for b in container.booking.all_bookings(status=BookingStatus.cancelled)] == [second.id]
    assert [b.id for b in container.booking.all_bookings(page=2, limit=1)] == [first.id]
    assert [b.id for b in container.booking.room_day_bookings(room.id, at(9).date())] == [first.id]
