from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from boardroom.domain.entities.backup import BackupInfo, BackupVerification


class BackupStorePort(ABC):
    """Snapshots of the data directory, addressed by name."""

    @abstractmethod
    def create(self, name: str, created_at: datetime) -> BackupInfo:
        raise NotImplementedError

    @abstractmethod
    def list_backups(self) -> list[BackupInfo]:
        """Newest first."""
        raise NotImplementedError

    @abstractmethod
    def verify(self, name: str) -> BackupVerification:
        raise NotImplementedError

    @abstractmethod
    def restore(self, name: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, name: str) -> bool:
        raise NotImplementedError
