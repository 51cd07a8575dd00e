from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Notification:
    id: str
    user_id: str
    message: str
    booking_id: str | None = None
    read: bool = False
    created_at: datetime | None = None
