from __future__ import annotations

from datetime import date, datetime

from fastapi import APIRouter, Depends, Query

from boardroom.api.deps import get_current_user, require_admin
from boardroom.api.errors import to_http
from boardroom.api.v1.schemas import (
    AvailabilityResponseSchema,
    BookingActionResponseSchema,
    BookingSchema,
    BookingWriteSchema,
    PermissionsSchema,
)
from boardroom.application.exceptions import BookingError, StoreUnavailableError
from boardroom.application.use_cases.booking import BookingUseCase
from boardroom.application.use_cases.check_availability import CheckAvailabilityUseCase
from boardroom.domain.entities.booking import BookingRequest, BookingStatus, ExternalAttendee
from boardroom.domain.entities.booking_policy import BookingPolicy
from boardroom.domain.entities.user import User
from boardroom.wiring.dependencies import (
    get_availability_use_case,
    get_booking_policy,
    get_booking_use_case,
)

router = APIRouter(prefix="/api/v1/bookings")


def _to_request(req: BookingWriteSchema) -> BookingRequest:
    return BookingRequest(
        boardroom_id=req.boardroom_id,
        start_time=req.start_time,
        end_time=req.end_time,
        purpose=req.purpose,
        attendees=tuple(req.attendees),
        external_attendees=tuple(ExternalAttendee.from_email(a.email, a.name) for a in req.external_attendees),
        notes=req.notes,
    )


@router.get("/check-availability", response_model=AvailabilityResponseSchema)
def check_availability(
    boardroom_id: str,
    start_time: datetime,
    end_time: datetime,
    uc: CheckAvailabilityUseCase = Depends(get_availability_use_case),
    policy: BookingPolicy = Depends(get_booking_policy),
):
    try:
        result = uc.execute(boardroom_id, policy.localize(start_time), policy.localize(end_time))
    except BookingError as e:
        raise to_http(e)
    return AvailabilityResponseSchema.model_validate(result)


@router.get("/availability/{boardroom_id}", response_model=list[BookingSchema])
def room_day_bookings(
    boardroom_id: str,
    day: date = Query(..., alias="date"),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    try:
        bookings = uc.room_day_bookings(boardroom_id, day)
    except StoreUnavailableError as e:
        raise to_http(e)
    return [BookingSchema.model_validate(b) for b in bookings]


@router.get("/my-bookings", response_model=list[BookingSchema])
def my_bookings(
    user: User = Depends(get_current_user),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    return [BookingSchema.model_validate(b) for b in uc.my_bookings(user)]


@router.get("/all", response_model=list[BookingSchema])
def all_bookings(
    status: BookingStatus | None = None,
    boardroom_id: str | None = Query(None, alias="boardroom"),
    page: int = Query(1, ge=1),
    limit: int = Query(1000, ge=1),
    admin: User = Depends(require_admin),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    bookings = uc.all_bookings(status=status, boardroom_id=boardroom_id, page=page, limit=limit)
    return [BookingSchema.model_validate(b) for b in bookings]


@router.post("", response_model=BookingSchema, status_code=201)
def create_booking(
    req: BookingWriteSchema,
    user: User = Depends(get_current_user),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    try:
        booking = uc.create_booking(user, _to_request(req))
    except (BookingError, StoreUnavailableError) as e:
        raise to_http(e)
    return BookingSchema.model_validate(booking)


@router.get("/{booking_id}", response_model=BookingSchema)
def get_booking(
    booking_id: str,
    user: User = Depends(get_current_user),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    try:
        booking = uc.get_booking(booking_id)
    except BookingError as e:
        raise to_http(e)
    return BookingSchema.model_validate(booking)


@router.get("/{booking_id}/permissions", response_model=PermissionsSchema)
def booking_permissions(
    booking_id: str,
    user: User = Depends(get_current_user),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    try:
        permissions = uc.permissions(user, booking_id)
    except BookingError as e:
        raise to_http(e)
    return PermissionsSchema.model_validate(permissions)


@router.put("/{booking_id}", response_model=BookingSchema)
def update_booking(
    booking_id: str,
    req: BookingWriteSchema,
    user: User = Depends(get_current_user),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    try:
        booking = uc.update_booking(user, booking_id, _to_request(req))
    except (BookingError, StoreUnavailableError) as e:
        raise to_http(e)
    return BookingSchema.model_validate(booking)


@router.delete("/{booking_id}", response_model=BookingActionResponseSchema)
def cancel_booking(
    booking_id: str,
    user: User = Depends(get_current_user),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    try:
        booking = uc.cancel_booking(user, booking_id)
    except (BookingError, StoreUnavailableError) as e:
        raise to_http(e)
    return BookingActionResponseSchema(
        message="Booking cancelled successfully",
        booking=BookingSchema.model_validate(booking),
    )


@router.patch("/{booking_id}/opt-out", response_model=BookingActionResponseSchema)
def opt_out(
    booking_id: str,
    user: User = Depends(get_current_user),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    try:
        booking = uc.opt_out(user, booking_id)
    except (BookingError, StoreUnavailableError) as e:
        raise to_http(e)
    return BookingActionResponseSchema(
        message="You have opted out of this meeting",
        booking=BookingSchema.model_validate(booking),
    )
