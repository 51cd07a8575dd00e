from __future__ import annotations

from abc import ABC, abstractmethod

from boardroom.domain.entities.user import User


class UserStorePort(ABC):
    @abstractmethod
    def get(self, user_id: str) -> User | None:
        raise NotImplementedError

    @abstractmethod
    def get_by_email(self, email: str) -> User | None:
        raise NotImplementedError

    @abstractmethod
    def get_many(self, user_ids: list[str]) -> list[User]:
        raise NotImplementedError

    @abstractmethod
    def list_users(self) -> list[User]:
        raise NotImplementedError

    @abstractmethod
    def add_if_email_free(self, user: User) -> bool:
        """Insert the user unless the email is taken. Returns False when taken."""
        raise NotImplementedError
