from __future__ import annotations

import threading
from datetime import datetime, timezone

from boardroom.application.ports.boardroom_store import BoardroomStorePort
from boardroom.application.ports.booking_store import BookingStorePort
from boardroom.application.ports.notification_store import NotificationStorePort
from boardroom.application.ports.user_store import UserStorePort
from boardroom.domain.entities.boardroom import Boardroom
from boardroom.domain.entities.booking import Booking, BookingStatus
from boardroom.domain.entities.notification import Notification
from boardroom.domain.entities.time_range import TimeRange
from boardroom.domain.entities.user import User


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class MemoryBookingStore(BookingStorePort):
    def __init__(self) -> None:
        self._bookings: dict[str, Booking] = {}
        self._lock = threading.RLock()

    def _commit(self) -> None:
        """Hook for persistent subclasses; called with the lock held after a write."""
        pass

    def get(self, booking_id: str) -> Booking | None:
        with self._lock:
            return self._bookings.get(booking_id)

    def find_conflict(
        self,
        boardroom_id: str,
        start: datetime,
        end: datetime,
        exclude_booking_id: str | None = None,
    ) -> Booking | None:
        wanted = TimeRange(start, end)
        with self._lock:
            for booking in self._bookings.values():
                if booking.id == exclude_booking_id:
                    continue
                if booking.blocks(boardroom_id, wanted):
                    return booking
        return None

    def list_for_room_between(self, boardroom_id: str, start: datetime, end: datetime) -> list[Booking]:
        with self._lock:
            found = [
                b
                for b in self._bookings.values()
                if b.boardroom_id == boardroom_id and b.is_active and start <= b.start_time < end
            ]
        return sorted(found, key=lambda b: b.start_time)

    def list_for_attendee(self, user_id: str) -> list[Booking]:
        with self._lock:
            found = [b for b in self._bookings.values() if user_id in b.attendees]
        return sorted(found, key=lambda b: b.start_time, reverse=True)

    def list_all(
        self,
        status: BookingStatus | None = None,
        boardroom_id: str | None = None,
    ) -> list[Booking]:
        with self._lock:
            found = [
                b
                for b in self._bookings.values()
                if (status is None or b.status is status)
                and (boardroom_id is None or b.boardroom_id == boardroom_id)
            ]
        return sorted(found, key=lambda b: b.start_time, reverse=True)

    def add_if_free(self, booking: Booking) -> Booking | None:
        with self._lock:
            if booking.is_active:
                conflict = self.find_conflict(booking.boardroom_id, booking.start_time, booking.end_time)
                if conflict is not None:
                    return conflict
            self._bookings[booking.id] = booking
            self._commit()
        return None

    def replace_if_free(self, booking: Booking) -> Booking | None:
        with self._lock:
            if booking.is_active:
                conflict = self.find_conflict(
                    booking.boardroom_id,
                    booking.start_time,
                    booking.end_time,
                    exclude_booking_id=booking.id,
                )
                if conflict is not None:
                    return conflict
            self._bookings[booking.id] = booking
            self._commit()
        return None

    def save(self, booking: Booking) -> None:
        with self._lock:
            self._bookings[booking.id] = booking
            self._commit()


class MemoryBoardroomStore(BoardroomStorePort):
    def __init__(self) -> None:
        self._rooms: dict[str, Boardroom] = {}
        self._lock = threading.RLock()

    def _commit(self) -> None:
        pass

    def get(self, boardroom_id: str) -> Boardroom | None:
        with self._lock:
            return self._rooms.get(boardroom_id)

    def list_rooms(self, active_only: bool = True) -> list[Boardroom]:
        with self._lock:
            rooms = [r for r in self._rooms.values() if r.is_active or not active_only]
        return sorted(rooms, key=lambda r: r.name.lower())

    def save(self, boardroom: Boardroom) -> None:
        with self._lock:
            self._rooms[boardroom.id] = boardroom
            self._commit()


class MemoryUserStore(UserStorePort):
    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._lock = threading.RLock()

    def _commit(self) -> None:
        pass

    def get(self, user_id: str) -> User | None:
        with self._lock:
            return self._users.get(user_id)

    def get_by_email(self, email: str) -> User | None:
        normalized = email.strip().lower()
        with self._lock:
            for user in self._users.values():
                if user.email == normalized:
                    return user
        return None

    def get_many(self, user_ids: list[str]) -> list[User]:
        with self._lock:
            return [self._users[uid] for uid in user_ids if uid in self._users]

    def list_users(self) -> list[User]:
        with self._lock:
            users = list(self._users.values())
        return sorted(users, key=lambda u: u.name.lower())

    def add_if_email_free(self, user: User) -> bool:
        with self._lock:
            if self.get_by_email(user.email) is not None:
                return False
            self._users[user.id] = user
            self._commit()
        return True


class MemoryNotificationStore(NotificationStorePort):
    def __init__(self) -> None:
        self._notifications: dict[str, Notification] = {}
        self._lock = threading.RLock()

    def _commit(self) -> None:
        pass

    def add(self, notification: Notification) -> None:
        self.save(notification)

    def list_for_user(self, user_id: str) -> list[Notification]:
        with self._lock:
            found = [n for n in self._notifications.values() if n.user_id == user_id]
        return sorted(found, key=lambda n: n.created_at or _EPOCH, reverse=True)

    def get(self, notification_id: str) -> Notification | None:
        with self._lock:
            return self._notifications.get(notification_id)

    def save(self, notification: Notification) -> None:
        with self._lock:
            self._notifications[notification.id] = notification
            self._commit()

    def delete(self, notification_id: str) -> bool:
        with self._lock:
            if self._notifications.pop(notification_id, None) is None:
                return False
            self._commit()
        return True

    def delete_for_user(self, user_id: str) -> int:
        with self._lock:
            doomed = [nid for nid, n in self._notifications.items() if n.user_id == user_id]
            for nid in doomed:
                del self._notifications[nid]
            if doomed:
                self._commit()
        return len(doomed)
