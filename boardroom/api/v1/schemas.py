from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from boardroom.application.use_cases.attendance import AttendeeRole
from boardroom.domain.entities.booking import BookingStatus
from boardroom.domain.entities.user import UserRole


class EntitySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class ExternalAttendeeSchema(EntitySchema):
    email: str
    name: str | None = None


class BookingWriteSchema(BaseModel):
    boardroom_id: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    purpose: str | None = None
    attendees: list[str] = Field(default_factory=list)
    external_attendees: list[ExternalAttendeeSchema] = Field(default_factory=list)
    notes: str = ""


class BookingSchema(EntitySchema):
    id: str
    boardroom_id: str
    user_id: str
    start_time: datetime
    end_time: datetime
    purpose: str
    notes: str
    status: BookingStatus
    attendees: list[str]
    external_attendees: list[ExternalAttendeeSchema]
    created_at: datetime | None = None
    modified_at: datetime | None = None


class BookingActionResponseSchema(BaseModel):
    message: str
    booking: BookingSchema


class ConflictSchema(EntitySchema):
    booking_id: str
    purpose: str
    organizer: str
    start_time: datetime
    end_time: datetime


class AvailabilityResponseSchema(EntitySchema):
    available: bool
    conflicting_booking: ConflictSchema | None = None


class TimeSlotSchema(EntitySchema):
    start_time: datetime
    end_time: datetime
    available: bool
    conflicting_booking: ConflictSchema | None = None


class BoardroomImageSchema(EntitySchema):
    url: str
    alt: str = "Boardroom image"
    is_primary: bool = False


class BoardroomSchema(EntitySchema):
    id: str
    name: str
    location: str
    capacity: int
    amenities: list[str]
    description: str
    is_active: bool
    images: list[BoardroomImageSchema]
    created_at: datetime | None = None


class BoardroomWriteSchema(BaseModel):
    name: str
    location: str
    capacity: int
    amenities: list[str] = Field(default_factory=list)
    description: str = ""
    is_active: bool = True
    images: list[BoardroomImageSchema] = Field(default_factory=list)


class DetailedAvailabilitySchema(EntitySchema):
    boardroom: BoardroomSchema
    day: date
    time_slots: list[TimeSlotSchema]
    total_bookings: int


class PermissionsSchema(EntitySchema):
    role: AttendeeRole
    can_cancel: bool
    can_opt_out: bool
    can_edit: bool


class UserSchema(EntitySchema):
    id: str
    name: str
    email: str
    role: UserRole
    created_at: datetime | None = None


class UserCreateSchema(BaseModel):
    name: str
    email: str
    role: UserRole = UserRole.user


class NotificationSchema(EntitySchema):
    id: str
    user_id: str
    message: str
    booking_id: str | None = None
    read: bool
    created_at: datetime | None = None


class MessageSchema(BaseModel):
    message: str
    meta: dict[str, Any] = Field(default_factory=dict)


class BackupSchema(EntitySchema):
    name: str
    created_at: datetime | None = None
    collections: list[str]
    size_bytes: int


class BackupVerificationSchema(EntitySchema):
    name: str
    valid: bool
    problems: list[str]
