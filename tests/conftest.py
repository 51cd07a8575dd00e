from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from boardroom.application.use_cases.boardrooms import BoardroomDraft
from boardroom.core.config import Settings
from boardroom.domain.entities.user import UserRole
from boardroom.wiring.dependencies import Container, build_container


TZ = ZoneInfo("Africa/Johannesburg")
NOW = datetime(2030, 3, 4, 8, 0, tzinfo=TZ)  # Monday morning


def at(hour: int, minute: int = 0, day: int = 5) -> datetime:
    """Local time on March `day` 2030."""
    return datetime(2030, 3, day, hour, minute, tzinfo=TZ)


class Clock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> Clock:
    return Clock(NOW)


@pytest.fixture
def container(clock: Clock) -> Container:
    return build_container(
        Settings(STORE_PROVIDER="memory", BOOKING_TIMEZONE="Africa/Johannesburg", BOOTSTRAP_ADMIN_EMAIL=None),
        clock=clock,
    )


@pytest.fixture
def room(container: Container):
    return container.boardrooms.create(
        BoardroomDraft(name="Executive Suite", location="Floor 1", capacity=4, amenities=("Projector",))
    )


@pytest.fixture
def alice(container: Container):
    return container.users.create("Alice Organizer", "alice@example.com")


@pytest.fixture
def bob(container: Container):
    return container.users.create("Bob Attendee", "bob@example.com")


@pytest.fixture
def carol(container: Container):
    return container.users.create("Carol Outsider", "carol@example.com")


@pytest.fixture
def admin(container: Container):
    return container.users.create("Ada Admin", "ada@example.com", UserRole.admin)
