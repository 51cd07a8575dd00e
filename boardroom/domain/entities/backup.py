from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class BackupInfo:
    name: str
    created_at: datetime | None
    collections: tuple[str, ...] = ()
    size_bytes: int = 0


@dataclass(frozen=True)
class BackupVerification:
    name: str
    valid: bool
    problems: tuple[str, ...] = field(default_factory=tuple)
