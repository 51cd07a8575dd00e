from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import logging
from pathlib import Path
from zoneinfo import ZoneInfo

from fastapi import Depends, HTTPException

from boardroom.application.ports.boardroom_store import BoardroomStorePort
from boardroom.application.ports.booking_store import BookingStorePort
from boardroom.application.ports.notification_store import NotificationStorePort
from boardroom.application.ports.user_store import UserStorePort
from boardroom.application.use_cases.backups import BackupUseCase
from boardroom.application.use_cases.boardrooms import BoardroomCatalogUseCase
from boardroom.application.use_cases.booking import BookingUseCase
from boardroom.application.use_cases.booking_validator import BookingValidator
from boardroom.application.use_cases.check_availability import CheckAvailabilityUseCase
from boardroom.application.use_cases.health_check import HealthChecks
from boardroom.application.use_cases.notifications import NotificationsUseCase
from boardroom.application.use_cases.slot_generator import SlotGeneratorUseCase
from boardroom.application.use_cases.users import UsersUseCase
from boardroom.core.config import Settings, settings
from boardroom.domain.entities.booking_policy import BookingPolicy
from boardroom.domain.entities.user import UserRole
from boardroom.infrastructure.store.file_backup import FileBackupStore
from boardroom.infrastructure.store.json_store import (
    JsonBoardroomStore,
    JsonBookingStore,
    JsonNotificationStore,
    JsonUserStore,
)
from boardroom.infrastructure.store.memory_store import (
    MemoryBoardroomStore,
    MemoryBookingStore,
    MemoryNotificationStore,
    MemoryUserStore,
)


@dataclass
class Container:
    policy: BookingPolicy
    bookings_store: BookingStorePort
    boardrooms_store: BoardroomStorePort
    users_store: UserStorePort
    notifications_store: NotificationStorePort
    availability: CheckAvailabilityUseCase
    slots: SlotGeneratorUseCase
    booking: BookingUseCase
    boardrooms: BoardroomCatalogUseCase
    users: UsersUseCase
    notifications: NotificationsUseCase
    health: HealthChecks
    backups: BackupUseCase | None = None


def build_policy(cfg: Settings) -> BookingPolicy:
    return BookingPolicy(
        timezone=ZoneInfo(cfg.BOOKING_TIMEZONE),
        workday_start_hour=cfg.WORKDAY_START_HOUR,
        workday_end_hour=cfg.WORKDAY_END_HOUR,
        slot_minutes=cfg.SLOT_MINUTES,
        min_booking_minutes=cfg.MIN_BOOKING_MINUTES,
        max_booking_minutes=cfg.MAX_BOOKING_MINUTES,
    )


def build_container(cfg: Settings, clock=None) -> Container:
    logger = logging.getLogger(__name__)
    policy = build_policy(cfg)

    backups: BackupUseCase | None = None
    if cfg.STORE_PROVIDER.lower() == "json":
        logger.info("Using JSON file store in %s", cfg.DATA_DIR)
        json_stores = (
            JsonBookingStore(cfg.DATA_DIR),
            JsonBoardroomStore(cfg.DATA_DIR),
            JsonUserStore(cfg.DATA_DIR),
            JsonNotificationStore(cfg.DATA_DIR),
        )
        bookings_store: BookingStorePort = json_stores[0]
        boardrooms_store: BoardroomStorePort = json_stores[1]
        users_store: UserStorePort = json_stores[2]
        notifications_store: NotificationStorePort = json_stores[3]

        def reload_stores() -> None:
            for store in json_stores:
                store.reload()

        backups = BackupUseCase(
            store=FileBackupStore(cfg.DATA_DIR, cfg.BACKUP_DIR),
            reload_stores=reload_stores,
            max_backups=cfg.MAX_BACKUPS,
            clock=clock,
        )
    else:
        logger.info("Using in-memory store")
        bookings_store = MemoryBookingStore()
        boardrooms_store = MemoryBoardroomStore()
        users_store = MemoryUserStore()
        notifications_store = MemoryNotificationStore()

    availability = CheckAvailabilityUseCase(bookings=bookings_store, users=users_store)
    notifications = NotificationsUseCase(store=notifications_store, clock=clock)
    booking = BookingUseCase(
        bookings=bookings_store,
        boardrooms=boardrooms_store,
        users=users_store,
        availability=availability,
        validator=BookingValidator(policy=policy, availability=availability),
        notifications=notifications,
        policy=policy,
        clock=clock,
    )

    users = UsersUseCase(store=users_store)
    if cfg.BOOTSTRAP_ADMIN_EMAIL and users_store.get_by_email(cfg.BOOTSTRAP_ADMIN_EMAIL) is None:
        admin = users.create(cfg.BOOTSTRAP_ADMIN_NAME, cfg.BOOTSTRAP_ADMIN_EMAIL, UserRole.admin)
        logger.info("Bootstrap admin created", extra={"user_id": admin.id})

    health = HealthChecks()
    health.register("store", lambda: f"{len(boardrooms_store.list_rooms(active_only=False))} boardrooms")
    if cfg.STORE_PROVIDER.lower() == "json":
        health.register("data_dir", lambda: _check_writable(Path(cfg.DATA_DIR)), critical=False)
        health.register("backups", lambda: f"{len(backups.list_backups())} backups", critical=False)

    return Container(
        policy=policy,
        bookings_store=bookings_store,
        boardrooms_store=boardrooms_store,
        users_store=users_store,
        notifications_store=notifications_store,
        availability=availability,
        slots=SlotGeneratorUseCase(
            bookings=bookings_store,
            boardrooms=boardrooms_store,
            availability=availability,
            policy=policy,
        ),
        booking=booking,
        boardrooms=BoardroomCatalogUseCase(store=boardrooms_store),
        users=users,
        notifications=notifications,
        health=health,
        backups=backups,
    )


def _check_writable(path: Path) -> str:
    marker = path / ".health"
    marker.write_text("ok", encoding="utf-8")
    marker.unlink()
    return f"{path} writable"


@lru_cache
def get_container() -> Container:
    return build_container(settings)


def get_booking_use_case(container: Container = Depends(get_container)) -> BookingUseCase:
    return container.booking


def get_availability_use_case(container: Container = Depends(get_container)) -> CheckAvailabilityUseCase:
    return container.availability


def get_slot_generator(container: Container = Depends(get_container)) -> SlotGeneratorUseCase:
    return container.slots


def get_boardroom_catalog(container: Container = Depends(get_container)) -> BoardroomCatalogUseCase:
    return container.boardrooms


def get_users_use_case(container: Container = Depends(get_container)) -> UsersUseCase:
    return container.users


def get_notifications_use_case(container: Container = Depends(get_container)) -> NotificationsUseCase:
    return container.notifications


def get_health_checks(container: Container = Depends(get_container)) -> HealthChecks:
    return container.health


def get_backup_use_case(container: Container = Depends(get_container)) -> BackupUseCase:
    if container.backups is None:
        raise HTTPException(status_code=404, detail="Backups require the JSON store")
    return container.backups


def get_booking_policy(container: Container = Depends(get_container)) -> BookingPolicy:
    return container.policy
