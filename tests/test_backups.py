"""
Tests for data directory backups.
"""

from __future__ import annotations

import json
import tempfile
from datetime import timedelta
from pathlib import Path

import pytest

from boardroom.application.exceptions import BookingValidationError, NotFoundError
from boardroom.application.use_cases.boardrooms import BoardroomDraft
from boardroom.core.config import Settings
from boardroom.domain.entities.booking import BookingRequest, BookingStatus
from boardroom.wiring.dependencies import build_container

from conftest import Clock, NOW, at


def _json_container(tmpdir: str, clock: Clock, max_backups: int = 7):
    return build_container(
        Settings(
            STORE_PROVIDER="json",
            DATA_DIR=str(Path(tmpdir) / "data"),
            BACKUP_DIR=str(Path(tmpdir) / "backups"),
            MAX_BACKUPS=max_backups,
            BOOTSTRAP_ADMIN_EMAIL=None,
        ),
        clock=clock,
    )


def _seed(container):
    room = container.boardrooms.create(BoardroomDraft(name="Executive Suite", location="Floor 1", capacity=8))
    alice = container.users.create("Alice Organizer", "alice@example.com")
    return room, alice


def test_restore_brings_back_the_snapshot():
    """Test that restoring a backup replaces live data with the snapshot."""
    with tempfile.TemporaryDirectory() as tmpdir:
        clock = Clock(NOW)
        container = _json_container(tmpdir, clock)
        room, alice = _seed(container)
        booking = container.booking.create_booking(
            alice, BookingRequest(boardroom_id=room.id, start_time=at(9), end_time=at(10), purpose="Planning")
        )

        snapshot = container.backups.create_backup()
        assert set(snapshot.collections) >= {"bookings", "boardrooms", "users"}

        container.booking.cancel_booking(alice, booking.id)
        assert container.booking.get_booking(booking.id).status is BookingStatus.cancelled

        container.backups.restore(snapshot.name)
        assert container.booking.get_booking(booking.id).status is BookingStatus.confirmed
        assert container.availability.execute(room.id, at(9), at(10)).available is False

        # a fresh process reading the same directory sees the restored state
        reopened = _json_container(tmpdir, clock)
        assert reopened.booking.get_booking(booking.id).status is BookingStatus.confirmed


def test_retention_keeps_newest_backups():
    with tempfile.TemporaryDirectory() as tmpdir:
        clock = Clock(NOW)
        container = _json_container(tmpdir, clock, max_backups=2)
        _seed(container)

        names = []
        for _ in range(3):
            names.append(container.backups.create_backup().name)
            clock.now += timedelta(minutes=1)

        assert [b.name for b in container.backups.list_backups()] == [names[2], names[1]]


def test_tampered_backup_fails_verification_and_is_not_restored():
    with tempfile.TemporaryDirectory() as tmpdir:
        clock = Clock(NOW)
        container = _json_container(tmpdir, clock)
        _seed(container)
        snapshot = container.backups.create_backup()

        users_copy = Path(tmpdir) / "backups" / snapshot.name / "users.json"
        users_copy.write_text(json.dumps({"version": 1, "records": []}), encoding="utf-8")

        result = container.backups.verify(snapshot.name)
        assert result.valid is False
        assert result.problems == ("checksum mismatch for users.json",)
        with pytest.raises(BookingValidationError):
            container.backups.restore(snapshot.name)
        assert len(container.users.list_users()) == 1


def test_unknown_or_unsafe_names_are_not_found():
    with tempfile.TemporaryDirectory() as tmpdir:
        container = _json_container(tmpdir, Clock(NOW))
        for name in ("backup-19990101-000000-000000", "../data"):
            with pytest.raises(NotFoundError):
                container.backups.verify(name)
            with pytest.raises(NotFoundError):
                container.backups.delete(name)


def test_memory_store_has_no_backups(container):
    assert container.backups is None
