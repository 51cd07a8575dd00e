from __future__ import annotations

from fastapi import APIRouter, Depends

from boardroom.api.deps import get_current_user
from boardroom.api.errors import to_http
from boardroom.api.v1.schemas import MessageSchema, NotificationSchema
from boardroom.application.exceptions import BookingError
from boardroom.application.use_cases.notifications import NotificationsUseCase
from boardroom.domain.entities.user import User
from boardroom.wiring.dependencies import get_notifications_use_case

router = APIRouter(prefix="/api/v1/notifications")


@router.get("", response_model=list[NotificationSchema])
def list_notifications(
    user: User = Depends(get_current_user),
    uc: NotificationsUseCase = Depends(get_notifications_use_case),
):
    return [NotificationSchema.model_validate(n) for n in uc.list_for_user(user.id)]


@router.get("/unread-count")
def unread_count(
    user: User = Depends(get_current_user),
    uc: NotificationsUseCase = Depends(get_notifications_use_case),
) -> dict[str, int]:
    return {"unread": uc.unread_count(user.id)}


@router.patch("/{notification_id}/read", response_model=NotificationSchema)
def mark_read(
    notification_id: str,
    user: User = Depends(get_current_user),
    uc: NotificationsUseCase = Depends(get_notifications_use_case),
):
    try:
        return NotificationSchema.model_validate(uc.mark_read(user.id, notification_id))
    except BookingError as e:
        raise to_http(e)


@router.delete("/{notification_id}", response_model=MessageSchema)
def delete_notification(
    notification_id: str,
    user: User = Depends(get_current_user),
    uc: NotificationsUseCase = Depends(get_notifications_use_case),
):
    try:
        uc.delete(user.id, notification_id)
    except BookingError as e:
        raise to_http(e)
    return MessageSchema(message="Notification deleted")


@router.delete("", response_model=MessageSchema)
def delete_all_notifications(
    user: User = Depends(get_current_user),
    uc: NotificationsUseCase = Depends(get_notifications_use_case),
):
    deleted = uc.delete_all(user.id)
    return MessageSchema(message="All notifications deleted", meta={"deleted": deleted})
