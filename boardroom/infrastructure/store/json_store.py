from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from boardroom.application.exceptions import StoreUnavailableError
from boardroom.domain.entities.boardroom import Boardroom, BoardroomImage
from boardroom.domain.entities.booking import Booking, BookingStatus, ExternalAttendee
from boardroom.domain.entities.notification import Notification
from boardroom.domain.entities.user import User, UserRole
from boardroom.infrastructure.store.memory_store import (
    MemoryBoardroomStore,
    MemoryBookingStore,
    MemoryNotificationStore,
    MemoryUserStore,
)


logger = logging.getLogger(__name__)


class JsonCollectionFile:
    """One collection persisted as a JSON document, rewritten atomically on every commit."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[dict[str, Any]]:
        if not self._path.exists():
            return []
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError:
            logger.warning("Corrupted collection file, starting empty", extra={"reason": str(self._path)})
            return []
        except OSError as e:
            raise StoreUnavailableError(f"Cannot read {self._path}: {e}") from e
        return list(data.get("records", []))

    def save(self, records: list[dict[str, Any]]) -> None:
        temp_path = self._path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump({"version": 1, "records": records}, f, indent=2, ensure_ascii=False)
            temp_path.replace(self._path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            raise StoreUnavailableError(f"Cannot write {self._path}: {e}") from e


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _parse_dt(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None


def serialize_booking(booking: Booking) -> dict[str, Any]:
    return {
        "id": booking.id,
        "boardroom_id": booking.boardroom_id,
        "user_id": booking.user_id,
        "start_time": _iso(booking.start_time),
        "end_time": _iso(booking.end_time),
        "purpose": booking.purpose,
        "notes": booking.notes,
        "status": booking.status.value,
        "attendees": list(booking.attendees),
        "external_attendees": [{"email": a.email, "name": a.name} for a in booking.external_attendees],
        "created_at": _iso(booking.created_at),
        "modified_at": _iso(booking.modified_at),
    }


def deserialize_booking(data: dict[str, Any]) -> Booking:
    return Booking(
        id=data["id"],
        boardroom_id=data["boardroom_id"],
        user_id=data["user_id"],
        start_time=datetime.fromisoformat(data["start_time"]),
        end_time=datetime.fromisoformat(data["end_time"]),
        purpose=data.get("purpose", ""),
        notes=data.get("notes", ""),
        status=BookingStatus(data.get("status", BookingStatus.confirmed.value)),
        attendees=tuple(data.get("attendees", [])),
        external_attendees=tuple(
            ExternalAttendee.from_email(a["email"], a.get("name")) for a in data.get("external_attendees", [])
        ),
        created_at=_parse_dt(data.get("created_at")),
        modified_at=_parse_dt(data.get("modified_at")),
    )


def serialize_boardroom(room: Boardroom) -> dict[str, Any]:
    return {
        "id": room.id,
        "name": room.name,
        "location": room.location,
        "capacity": room.capacity,
        "amenities": list(room.amenities),
        "description": room.description,
        "is_active": room.is_active,
        "images": [{"url": i.url, "alt": i.alt, "is_primary": i.is_primary} for i in room.images],
        "created_at": _iso(room.created_at),
    }


def deserialize_boardroom(data: dict[str, Any]) -> Boardroom:
    return Boardroom(
        id=data["id"],
        name=data["name"],
        location=data.get("location", ""),
        capacity=int(data.get("capacity", 1)),
        amenities=tuple(data.get("amenities", [])),
        description=data.get("description", ""),
        is_active=bool(data.get("is_active", True)),
        images=tuple(
            BoardroomImage(url=i["url"], alt=i.get("alt", "Boardroom image"), is_primary=bool(i.get("is_primary")))
            for i in data.get("images", [])
        ),
        created_at=_parse_dt(data.get("created_at")),
    )


def serialize_user(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role.value,
        "created_at": _iso(user.created_at),
    }


def deserialize_user(data: dict[str, Any]) -> User:
    return User(
        id=data["id"],
        name=data["name"],
        email=data["email"],
        role=UserRole(data.get("role", UserRole.user.value)),
        created_at=_parse_dt(data.get("created_at")),
    )


def serialize_notification(notification: Notification) -> dict[str, Any]:
    return {
        "id": notification.id,
        "user_id": notification.user_id,
        "message": notification.message,
        "booking_id": notification.booking_id,
        "read": notification.read,
        "created_at": _iso(notification.created_at),
    }


def deserialize_notification(data: dict[str, Any]) -> Notification:
    return Notification(
        id=data["id"],
        user_id=data["user_id"],
        message=data["message"],
        booking_id=data.get("booking_id"),
        read=bool(data.get("read", False)),
        created_at=_parse_dt(data.get("created_at")),
    )


class _ReloadableMixin:
    def reload(self) -> None:
        """Re-read the collection file, e.g. after a backup was restored."""
        with self._lock:
            self._reload()


class JsonBookingStore(_ReloadableMixin, MemoryBookingStore):
    def __init__(self, data_dir: str = "./data") -> None:
        super().__init__()
        self._file = JsonCollectionFile(Path(data_dir) / "bookings.json")
        self._reload()

    def _reload(self) -> None:
        self._bookings = {r["id"]: deserialize_booking(r) for r in self._file.load()}

    def _commit(self) -> None:
        try:
            self._file.save([serialize_booking(b) for b in self._bookings.values()])
        except StoreUnavailableError:
            # keep memory consistent with what is on disk
            self._reload()
            raise


class JsonBoardroomStore(_ReloadableMixin, MemoryBoardroomStore):
    def __init__(self, data_dir: str = "./data") -> None:
        super().__init__()
        self._file = JsonCollectionFile(Path(data_dir) / "boardrooms.json")
        self._reload()

    def _reload(self) -> None:
        self._rooms = {r["id"]: deserialize_boardroom(r) for r in self._file.load()}

    def _commit(self) -> None:
        try:
            self._file.save([serialize_boardroom(r) for r in self._rooms.values()])
        except StoreUnavailableError:
            self._reload()
            raise


class JsonUserStore(_ReloadableMixin, MemoryUserStore):
    def __init__(self, data_dir: str = "./data") -> None:
        super().__init__()
        self._file = JsonCollectionFile(Path(data_dir) / "users.json")
        self._reload()

    def _reload(self) -> None:
        self._users = {r["id"]: deserialize_user(r) for r in self._file.load()}

    def _commit(self) -> None:
        try:
            self._file.save([serialize_user(u) for u in self._users.values()])
        except StoreUnavailableError:
            self._reload()
            raise


class JsonNotificationStore(_ReloadableMixin, MemoryNotificationStore):
    def __init__(self, data_dir: str = "./data") -> None:
        super().__init__()
        self._file = JsonCollectionFile(Path(data_dir) / "notifications.json")
        self._reload()

    def _reload(self) -> None:
        self._notifications = {r["id"]: deserialize_notification(r) for r in self._file.load()}

    def _commit(self) -> None:
        try:
            self._file.save([serialize_notification(n) for n in self._notifications.values()])
        except StoreUnavailableError:
            self._reload()
            raise
