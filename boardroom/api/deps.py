from __future__ import annotations

from fastapi import Depends, Header, HTTPException

from boardroom.application.use_cases.users import UsersUseCase
from boardroom.application.exceptions import NotFoundError
from boardroom.domain.entities.user import User
from boardroom.wiring.dependencies import get_users_use_case


def get_current_user(
    x_user_id: str | None = Header(None),
    users: UsersUseCase = Depends(get_users_use_case),
) -> User:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="X-User-Id header is required")
    try:
        return users.get(x_user_id)
    except NotFoundError:
        raise HTTPException(status_code=401, detail="Unknown user")


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
