#!/usr/bin/env python3
"""
Seed a JSON data directory with demo users and boardrooms.

Usage:
  python3 scripts/seed_data.py --data-dir ./data

Prints the created user ids so they can be sent as the X-User-Id header.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from boardroom.application.exceptions import DuplicateError
from boardroom.application.use_cases.boardrooms import BoardroomDraft
from boardroom.core.config import Settings
from boardroom.domain.entities.boardroom import BoardroomImage
from boardroom.domain.entities.user import UserRole
from boardroom.wiring.dependencies import build_container


DEMO_USERS = [
    ("John Doe", "john@example.com", UserRole.admin),
    ("Jane Smith", "jane@example.com", UserRole.user),
    ("Mike Johnson", "mike@example.com", UserRole.user),
    ("Sarah Wilson", "sarah@example.com", UserRole.user),
]

DEMO_BOARDROOMS = [
    BoardroomDraft(
        name="Executive Suite",
        location="Floor 1 - East Wing",
        capacity=12,
        amenities=("Projector", "Whiteboard", "Video Conference", "Coffee Machine"),
        description="Premium boardroom with executive seating and advanced AV equipment",
        images=(
            BoardroomImage(
                url="https://images.unsplash.com/photo-1497366216548-37526070297c?w=800&h=600&fit=crop",
                alt="Executive boardroom with modern furniture",
                is_primary=True,
            ),
        ),
    ),
    BoardroomDraft(
        name="Innovation Hub",
        location="Floor 2 - West Wing",
        capacity=8,
        amenities=("Smart TV", "Whiteboard", "Conference Phone"),
        description="Collaborative space for brainstorming sessions",
    ),
    BoardroomDraft(
        name="Training Room",
        location="Ground Floor",
        capacity=20,
        amenities=("Projector", "Sound System", "Flip Charts"),
        description="Large room for workshops and training",
    ),
]


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed demo data into the JSON store")
    parser.add_argument("--data-dir", default="./data")
    args = parser.parse_args()

    container = build_container(Settings(STORE_PROVIDER="json", DATA_DIR=args.data_dir))

    for name, email, role in DEMO_USERS:
        try:
            user = container.users.create(name, email, role)
            print(f"user     {user.id}  {user.email} ({user.role.value})")
        except DuplicateError:
            print(f"user     exists  {email}")

    existing = {room.name for room in container.boardrooms.list_all()}
    for draft in DEMO_BOARDROOMS:
        if draft.name in existing:
            print(f"room     exists  {draft.name}")
            continue
        room = container.boardrooms.create(draft)
        print(f"room     {room.id}  {room.name}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
