from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query

from boardroom.api.deps import require_admin
from boardroom.api.errors import to_http
from boardroom.api.v1.schemas import (
    BoardroomImageSchema,
    BoardroomSchema,
    BoardroomWriteSchema,
    DetailedAvailabilitySchema,
    MessageSchema,
)
from boardroom.application.exceptions import BookingError, StoreUnavailableError
from boardroom.application.use_cases.boardrooms import BoardroomCatalogUseCase, BoardroomDraft
from boardroom.application.use_cases.slot_generator import SlotGeneratorUseCase
from boardroom.domain.entities.boardroom import BoardroomImage
from boardroom.domain.entities.user import User
from boardroom.wiring.dependencies import get_boardroom_catalog, get_slot_generator

router = APIRouter(prefix="/api/v1/boardrooms")


def _to_draft(req: BoardroomWriteSchema) -> BoardroomDraft:
    return BoardroomDraft(
        name=req.name,
        location=req.location,
        capacity=req.capacity,
        amenities=tuple(req.amenities),
        description=req.description,
        is_active=req.is_active,
        images=tuple(BoardroomImage(url=i.url, alt=i.alt, is_primary=i.is_primary) for i in req.images),
    )


@router.get("", response_model=list[BoardroomSchema])
def list_boardrooms(uc: BoardroomCatalogUseCase = Depends(get_boardroom_catalog)):
    return [BoardroomSchema.model_validate(r) for r in uc.list_active()]


@router.get("/admin/all", response_model=list[BoardroomSchema])
def list_all_boardrooms(
    admin: User = Depends(require_admin),
    uc: BoardroomCatalogUseCase = Depends(get_boardroom_catalog),
):
    return [BoardroomSchema.model_validate(r) for r in uc.list_all()]


@router.get("/{boardroom_id}", response_model=BoardroomSchema)
def get_boardroom(boardroom_id: str, uc: BoardroomCatalogUseCase = Depends(get_boardroom_catalog)):
    try:
        return BoardroomSchema.model_validate(uc.get(boardroom_id))
    except BookingError as e:
        raise to_http(e)


@router.get("/{boardroom_id}/availability", response_model=DetailedAvailabilitySchema)
def detailed_availability(
    boardroom_id: str,
    day: date = Query(..., alias="date"),
    slots: SlotGeneratorUseCase = Depends(get_slot_generator),
):
    try:
        result = slots.detailed_availability(boardroom_id, day)
    except (BookingError, StoreUnavailableError) as e:
        raise to_http(e)
    return DetailedAvailabilitySchema.model_validate(result)


@router.post("", response_model=BoardroomSchema, status_code=201)
def create_boardroom(
    req: BoardroomWriteSchema,
    admin: User = Depends(require_admin),
    uc: BoardroomCatalogUseCase = Depends(get_boardroom_catalog),
):
    try:
        return BoardroomSchema.model_validate(uc.create(_to_draft(req)))
    except (BookingError, StoreUnavailableError) as e:
        raise to_http(e)


@router.put("/{boardroom_id}", response_model=BoardroomSchema)
def update_boardroom(
    boardroom_id: str,
    req: BoardroomWriteSchema,
    admin: User = Depends(require_admin),
    uc: BoardroomCatalogUseCase = Depends(get_boardroom_catalog),
):
    try:
        return BoardroomSchema.model_validate(uc.update(boardroom_id, _to_draft(req)))
    except (BookingError, StoreUnavailableError) as e:
        raise to_http(e)


@router.delete("/{boardroom_id}", response_model=MessageSchema)
def deactivate_boardroom(
    boardroom_id: str,
    admin: User = Depends(require_admin),
    uc: BoardroomCatalogUseCase = Depends(get_boardroom_catalog),
):
    try:
        uc.deactivate(boardroom_id)
    except (BookingError, StoreUnavailableError) as e:
        raise to_http(e)
    return MessageSchema(message="Boardroom deactivated successfully")


@router.post("/{boardroom_id}/images", response_model=BoardroomSchema)
def add_image(
    boardroom_id: str,
    req: BoardroomImageSchema,
    admin: User = Depends(require_admin),
    uc: BoardroomCatalogUseCase = Depends(get_boardroom_catalog),
):
    try:
        room = uc.add_image(boardroom_id, BoardroomImage(url=req.url, alt=req.alt, is_primary=req.is_primary))
    except (BookingError, StoreUnavailableError) as e:
        raise to_http(e)
    return BoardroomSchema.model_validate(room)


@router.delete("/{boardroom_id}/images/{image_index}", response_model=BoardroomSchema)
def remove_image(
    boardroom_id: str,
    image_index: int,
    admin: User = Depends(require_admin),
    uc: BoardroomCatalogUseCase = Depends(get_boardroom_catalog),
):
    try:
        room = uc.remove_image(boardroom_id, image_index)
    except (BookingError, StoreUnavailableError) as e:
        raise to_http(e)
    return BoardroomSchema.model_validate(room)
