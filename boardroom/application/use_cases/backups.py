from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from boardroom.application.exceptions import BookingValidationError, NotFoundError
from boardroom.application.ports.backup_store import BackupStorePort
from boardroom.domain.entities.backup import BackupInfo, BackupVerification


class BackupUseCase:
    """Admin snapshots of the data directory with a retention limit."""

    def __init__(
        self,
        store: BackupStorePort,
        reload_stores: Callable[[], None],
        max_backups: int = 7,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._reload_stores = reload_stores
        self._max_backups = max(max_backups, 1)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._logger = logging.getLogger(__name__)

    def create_backup(self) -> BackupInfo:
        now = self._clock()
        info = self._store.create(f"backup-{now:%Y%m%d-%H%M%S-%f}", now)
        self._logger.info("Backup created", extra={"reason": info.name})
        self.cleanup()
        return info

    def list_backups(self) -> list[BackupInfo]:
        return self._store.list_backups()

    def verify(self, name: str) -> BackupVerification:
        return self._store.verify(name)

    def restore(self, name: str) -> BackupVerification:
        result = self._store.verify(name)
        if not result.valid:
            raise BookingValidationError(f"Backup {name} failed verification: {result.problems[0]}")
        self._store.restore(name)
        self._reload_stores()
        self._logger.warning("Data restored from backup", extra={"reason": name})
        return result

    def delete(self, name: str) -> None:
        if not self._store.delete(name):
            raise NotFoundError("Backup not found")
        self._logger.info("Backup deleted", extra={"reason": name})

    def cleanup(self) -> list[str]:
        """Delete everything beyond the newest `max_backups` snapshots."""
        stale = [b.name for b in self._store.list_backups()[self._max_backups :]]
        for name in stale:
            self._store.delete(name)
        if stale:
            self._logger.info("Old backups removed", extra={"reason": ", ".join(stale)})
        return stale
