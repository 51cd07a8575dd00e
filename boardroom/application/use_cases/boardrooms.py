from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone

from boardroom.application.exceptions import BookingValidationError, NotFoundError
from boardroom.application.ports.boardroom_store import BoardroomStorePort
from boardroom.domain.entities.boardroom import Boardroom, BoardroomImage


@dataclass(frozen=True)
class BoardroomDraft:
    name: str
    location: str
    capacity: int
    amenities: tuple[str, ...] = ()
    description: str = ""
    is_active: bool = True
    images: tuple[BoardroomImage, ...] = ()


class BoardroomCatalogUseCase:
    def __init__(self, store: BoardroomStorePort) -> None:
        self._store = store
        self._logger = logging.getLogger(__name__)

    def list_active(self) -> list[Boardroom]:
        return self._store.list_rooms(active_only=True)

    def list_all(self) -> list[Boardroom]:
        return self._store.list_rooms(active_only=False)

    def get(self, boardroom_id: str) -> Boardroom:
        room = self._store.get(boardroom_id)
        if room is None:
            raise NotFoundError("Boardroom not found")
        return room

    def create(self, draft: BoardroomDraft) -> Boardroom:
        _check_draft(draft)
        room = Boardroom(
            id=uuid.uuid4().hex,
            name=draft.name.strip(),
            location=draft.location.strip(),
            capacity=draft.capacity,
            amenities=_clean_amenities(draft.amenities),
            description=draft.description.strip(),
            is_active=draft.is_active,
            images=_single_primary(draft.images),
            created_at=datetime.now(timezone.utc),
        )
        self._store.save(room)
        self._logger.info("Boardroom created", extra={"boardroom_id": room.id})
        return room

    def update(self, boardroom_id: str, draft: BoardroomDraft) -> Boardroom:
        _check_draft(draft)
        room = self.get(boardroom_id)
        updated = replace(
            room,
            name=draft.name.strip(),
            location=draft.location.strip(),
            capacity=draft.capacity,
            amenities=_clean_amenities(draft.amenities),
            description=draft.description.strip(),
            is_active=draft.is_active,
            images=_single_primary(draft.images),
        )
        self._store.save(updated)
        self._logger.info("Boardroom updated", extra={"boardroom_id": room.id})
        return updated

    def deactivate(self, boardroom_id: str) -> Boardroom:
        room = replace(self.get(boardroom_id), is_active=False)
        self._store.save(room)
        self._logger.info("Boardroom deactivated", extra={"boardroom_id": boardroom_id})
        return room

    def add_image(self, boardroom_id: str, image: BoardroomImage) -> Boardroom:
        if not image.url.strip():
            raise BookingValidationError("Image URL is required")
        room = self.get(boardroom_id)
        images = list(room.images)
        if image.is_primary:
            images = [replace(i, is_primary=False) for i in images]
        images.append(image)
        updated = replace(room, images=tuple(images))
        self._store.save(updated)
        return updated

    def remove_image(self, boardroom_id: str, index: int) -> Boardroom:
        room = self.get(boardroom_id)
        # out-of-range indexes leave the room unchanged
        if not 0 <= index < len(room.images):
            return room
        images = room.images[:index] + room.images[index + 1 :]
        updated = replace(room, images=images)
        self._store.save(updated)
        return updated


def _check_draft(draft: BoardroomDraft) -> None:
    if not (2 <= len(draft.name.strip()) <= 100):
        raise BookingValidationError("Name must be between 2 and 100 characters")
    if not (1 <= draft.capacity <= 500):
        raise BookingValidationError("Capacity must be a number between 1 and 500")
    if not (2 <= len(draft.location.strip()) <= 200):
        raise BookingValidationError("Location must be between 2 and 200 characters")
    if len(draft.description) > 1000:
        raise BookingValidationError("Description cannot exceed 1000 characters")


def _clean_amenities(amenities: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(a.strip() for a in amenities if a and a.strip())


def _single_primary(images: tuple[BoardroomImage, ...]) -> tuple[BoardroomImage, ...]:
    """Keep only the last image flagged primary as primary."""
    last_primary = max((i for i, img in enumerate(images) if img.is_primary), default=None)
    return tuple(replace(img, is_primary=(i == last_primary)) for i, img in enumerate(images))
