from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class BoardroomImage:
    url: str
    alt: str = "Boardroom image"
    is_primary: bool = False


@dataclass(frozen=True)
class Boardroom:
    id: str
    name: str
    location: str
    capacity: int
    amenities: tuple[str, ...] = ()
    description: str = ""
    is_active: bool = True
    images: tuple[BoardroomImage, ...] = ()
    created_at: datetime | None = None
