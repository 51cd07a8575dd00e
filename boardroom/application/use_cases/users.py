from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from boardroom.application.exceptions import BookingValidationError, DuplicateError, NotFoundError
from boardroom.application.ports.user_store import UserStorePort
from boardroom.domain.entities.user import User, UserRole


class UsersUseCase:
    def __init__(self, store: UserStorePort) -> None:
        self._store = store
        self._logger = logging.getLogger(__name__)

    def create(self, name: str, email: str, role: UserRole = UserRole.user) -> User:
        name = (name or "").strip()
        email = (email or "").strip().lower()
        if not (2 <= len(name) <= 50):
            raise BookingValidationError("Name must be between 2 and 50 characters")
        if "@" not in email:
            raise BookingValidationError("Please provide a valid email")

        user = User(
            id=uuid.uuid4().hex,
            name=name,
            email=email,
            role=role,
            created_at=datetime.now(timezone.utc),
        )
        if not self._store.add_if_email_free(user):
            raise DuplicateError("A user with this email already exists")
        self._logger.info("User created", extra={"user_id": user.id})
        return user

    def get(self, user_id: str) -> User:
        user = self._store.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def list_users(self) -> list[User]:
        return self._store.list_users()
