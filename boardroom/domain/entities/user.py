from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class UserRole(str, Enum):
    admin = "admin"
    user = "user"


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str
    role: UserRole = UserRole.user
    created_at: datetime | None = None

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.admin
