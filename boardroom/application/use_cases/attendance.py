from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from boardroom.domain.entities.booking import Booking


class AttendeeRole(str, Enum):
    creator = "creator"
    attendee = "attendee"
    none = "none"


@dataclass(frozen=True)
class BookingPermissions:
    role: AttendeeRole
    can_cancel: bool
    can_opt_out: bool
    can_edit: bool


def resolve_role(booking: Booking, actor_id: str) -> AttendeeRole:
    if booking.user_id == actor_id:
        return AttendeeRole.creator
    if actor_id in booking.attendees:
        return AttendeeRole.attendee
    return AttendeeRole.none


def resolve_permissions(booking: Booking, actor_id: str, now: datetime) -> BookingPermissions:
    role = resolve_role(booking, actor_id)
    # same boundary as booking creation: a start equal to now still counts as future
    mutable = booking.is_active and booking.start_time >= now
    return BookingPermissions(
        role=role,
        can_cancel=mutable and role is AttendeeRole.creator,
        can_opt_out=mutable and role is AttendeeRole.attendee,
        can_edit=mutable and role is AttendeeRole.creator,
    )
