from __future__ import annotations

from fastapi import APIRouter, Depends

from boardroom.api.deps import get_current_user, require_admin
from boardroom.api.errors import to_http
from boardroom.api.v1.schemas import UserCreateSchema, UserSchema
from boardroom.application.exceptions import BookingError, StoreUnavailableError
from boardroom.application.use_cases.users import UsersUseCase
from boardroom.domain.entities.user import User
from boardroom.wiring.dependencies import get_users_use_case

router = APIRouter(prefix="/api/v1/users")


@router.get("/me", response_model=UserSchema)
def me(user: User = Depends(get_current_user)):
    return UserSchema.model_validate(user)


@router.get("", response_model=list[UserSchema])
def list_users(
    user: User = Depends(get_current_user),
    uc: UsersUseCase = Depends(get_users_use_case),
):
    # any signed-in user may list colleagues to invite them
    return [UserSchema.model_validate(u) for u in uc.list_users()]


@router.post("", response_model=UserSchema, status_code=201)
def create_user(
    req: UserCreateSchema,
    admin: User = Depends(require_admin),
    uc: UsersUseCase = Depends(get_users_use_case),
):
    try:
        return UserSchema.model_validate(uc.create(req.name, req.email, req.role))
    except (BookingError, StoreUnavailableError) as e:
        raise to_http(e)
