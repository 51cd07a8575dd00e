from __future__ import annotations

from fastapi import APIRouter, Depends

from boardroom.api.deps import require_admin
from boardroom.api.errors import to_http
from boardroom.api.v1.schemas import BackupSchema, BackupVerificationSchema, MessageSchema
from boardroom.application.exceptions import BookingError, StoreUnavailableError
from boardroom.application.use_cases.backups import BackupUseCase
from boardroom.domain.entities.user import User
from boardroom.wiring.dependencies import get_backup_use_case

router = APIRouter(prefix="/api/v1/backups")


@router.get("", response_model=list[BackupSchema])
def list_backups(
    admin: User = Depends(require_admin),
    uc: BackupUseCase = Depends(get_backup_use_case),
):
    return [BackupSchema.model_validate(b) for b in uc.list_backups()]


@router.post("", response_model=BackupSchema, status_code=201)
def create_backup(
    admin: User = Depends(require_admin),
    uc: BackupUseCase = Depends(get_backup_use_case),
):
    try:
        return BackupSchema.model_validate(uc.create_backup())
    except (BookingError, StoreUnavailableError) as e:
        raise to_http(e)


@router.post("/cleanup", response_model=MessageSchema)
def cleanup_backups(
    admin: User = Depends(require_admin),
    uc: BackupUseCase = Depends(get_backup_use_case),
):
    try:
        removed = uc.cleanup()
    except StoreUnavailableError as e:
        raise to_http(e)
    return MessageSchema(message="Backup cleanup completed", meta={"deleted": removed})


@router.get("/{name}/verify", response_model=BackupVerificationSchema)
def verify_backup(
    name: str,
    admin: User = Depends(require_admin),
    uc: BackupUseCase = Depends(get_backup_use_case),
):
    try:
        return BackupVerificationSchema.model_validate(uc.verify(name))
    except BookingError as e:
        raise to_http(e)


@router.post("/{name}/restore", response_model=MessageSchema)
def restore_backup(
    name: str,
    admin: User = Depends(require_admin),
    uc: BackupUseCase = Depends(get_backup_use_case),
):
    try:
        uc.restore(name)
    except (BookingError, StoreUnavailableError) as e:
        raise to_http(e)
    return MessageSchema(message="Backup restored successfully", meta={"backup": name})


@router.delete("/{name}", response_model=MessageSchema)
def delete_backup(
    name: str,
    admin: User = Depends(require_admin),
    uc: BackupUseCase = Depends(get_backup_use_case),
):
    try:
        uc.delete(name)
    except (BookingError, StoreUnavailableError) as e:
        raise to_http(e)
    return MessageSchema(message="Backup deleted successfully")
