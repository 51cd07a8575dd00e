from __future__ import annotations

from abc import ABC, abstractmethod

from boardroom.domain.entities.notification import Notification


class NotificationStorePort(ABC):
    @abstractmethod
    def add(self, notification: Notification) -> None:
        raise NotImplementedError

    @abstractmethod
    def list_for_user(self, user_id: str) -> list[Notification]:
        """Newest first."""
        raise NotImplementedError

    @abstractmethod
    def get(self, notification_id: str) -> Notification | None:
        raise NotImplementedError

    @abstractmethod
    def save(self, notification: Notification) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, notification_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def delete_for_user(self, user_id: str) -> int:
        raise NotImplementedError
