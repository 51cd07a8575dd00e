from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Iterable

from boardroom.application.exceptions import NotFoundError
from boardroom.application.ports.notification_store import NotificationStorePort
from boardroom.domain.entities.notification import Notification


class NotificationsUseCase:
    def __init__(
        self,
        store: NotificationStorePort,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._logger = logging.getLogger(__name__)

    def notify(self, user_ids: Iterable[str], message: str, booking_id: str | None = None) -> list[Notification]:
        created: list[Notification] = []
        for user_id in dict.fromkeys(user_ids):
            notification = Notification(
                id=uuid.uuid4().hex,
                user_id=user_id,
                message=message,
                booking_id=booking_id,
                created_at=self._clock(),
            )
            self._store.add(notification)
            created.append(notification)
        if created:
            self._logger.info(
                "Notifications created",
                extra={"booking_id": booking_id, "reason": f"{len(created)} recipients"},
            )
        return created

    def list_for_user(self, user_id: str) -> list[Notification]:
        return self._store.list_for_user(user_id)

    def unread_count(self, user_id: str) -> int:
        return sum(1 for n in self._store.list_for_user(user_id) if not n.read)

    def mark_read(self, user_id: str, notification_id: str) -> Notification:
        notification = self._owned(user_id, notification_id)
        updated = Notification(
            id=notification.id,
            user_id=notification.user_id,
            message=notification.message,
            booking_id=notification.booking_id,
            read=True,
            created_at=notification.created_at,
        )
        self._store.save(updated)
        return updated

    def delete(self, user_id: str, notification_id: str) -> None:
        self._owned(user_id, notification_id)
        self._store.delete(notification_id)

    def delete_all(self, user_id: str) -> int:
        return self._store.delete_for_user(user_id)

    def _owned(self, user_id: str, notification_id: str) -> Notification:
        notification = self._store.get(notification_id)
        if notification is None or notification.user_id != user_id:
            raise NotFoundError("Notification not found")
        return notification
