from __future__ import annotations

import hashlib
import json
import logging
import re
import shutil
from datetime import datetime
from pathlib import Path
from typing import Any

from boardroom.application.exceptions import DuplicateError, NotFoundError, StoreUnavailableError
from boardroom.application.ports.backup_store import BackupStorePort
from boardroom.domain.entities.backup import BackupInfo, BackupVerification


logger = logging.getLogger(__name__)

METADATA_FILE = "metadata.json"
_SAFE_NAME = re.compile(r"[A-Za-z0-9][A-Za-z0-9_.-]*")


def _sha256(path: Path) -> str:
    return hashlib.sha256(path.read_bytes()).hexdigest()


def _parse_dt(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None


class FileBackupStore(BackupStorePort):
    """
    Copies every collection file of the JSON store into its own directory
    under `backup_dir`, next to a metadata.json holding per-file checksums.

    A backup is assembled in a hidden ".partial" directory and renamed into
    place once complete, so a listed backup is never half written.
    """

    def __init__(self, data_dir: str, backup_dir: str) -> None:
        self._data_dir = Path(data_dir)
        self._backup_dir = Path(backup_dir)
        self._backup_dir.mkdir(parents=True, exist_ok=True)

    def create(self, name: str, created_at: datetime) -> BackupInfo:
        target = self._path(name)
        if target.exists():
            raise DuplicateError(f"Backup {name} already exists")

        partial = self._backup_dir / f".{name}.partial"
        try:
            partial.mkdir(parents=True)
            checksums: dict[str, str] = {}
            size = 0
            for source in sorted(self._data_dir.glob("*.json")):
                copied = partial / source.name
                shutil.copy2(source, copied)
                checksums[source.name] = _sha256(copied)
                size += copied.stat().st_size
            metadata = {
                "name": name,
                "created_at": created_at.isoformat(),
                "collections": [Path(f).stem for f in checksums],
                "files": checksums,
                "size_bytes": size,
            }
            (partial / METADATA_FILE).write_text(json.dumps(metadata, indent=2), encoding="utf-8")
            partial.rename(target)
        except OSError as e:
            shutil.rmtree(partial, ignore_errors=True)
            raise StoreUnavailableError(f"Cannot create backup {name}: {e}") from e
        return self._info(target, metadata)

    def list_backups(self) -> list[BackupInfo]:
        found = [
            self._info(path, self._metadata(path))
            for path in self._backup_dir.iterdir()
            if path.is_dir() and not path.name.startswith(".")
        ]
        # names carry the timestamp, so name order is age order
        return sorted(found, key=lambda b: b.name, reverse=True)

    def verify(self, name: str) -> BackupVerification:
        path = self._existing(name)
        metadata = self._metadata(path)
        if metadata is None:
            return BackupVerification(name=name, valid=False, problems=("metadata missing or unreadable",))

        problems = []
        for file_name, checksum in metadata.get("files", {}).items():
            copy = path / file_name
            if not copy.is_file():
                problems.append(f"missing {file_name}")
            elif _sha256(copy) != checksum:
                problems.append(f"checksum mismatch for {file_name}")
        return BackupVerification(name=name, valid=not problems, problems=tuple(problems))

    def restore(self, name: str) -> None:
        path = self._existing(name)
        metadata = self._metadata(path) or {}
        files = set(metadata.get("files", {}))
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            for file_name in sorted(files):
                staged = self._data_dir / f"{file_name}.restore"
                shutil.copy2(path / file_name, staged)
                staged.replace(self._data_dir / file_name)
            # a collection absent from the snapshot was empty when it was taken
            for current in self._data_dir.glob("*.json"):
                if current.name not in files:
                    current.unlink()
        except OSError as e:
            raise StoreUnavailableError(f"Cannot restore backup {name}: {e}") from e

    def delete(self, name: str) -> bool:
        path = self._path(name)
        if not path.is_dir():
            return False
        try:
            shutil.rmtree(path)
        except OSError as e:
            raise StoreUnavailableError(f"Cannot delete backup {name}: {e}") from e
        return True

    def _path(self, name: str) -> Path:
        if not _SAFE_NAME.fullmatch(name or ""):
            raise NotFoundError("Backup not found")
        return self._backup_dir / name

    def _existing(self, name: str) -> Path:
        path = self._path(name)
        if not path.is_dir():
            raise NotFoundError("Backup not found")
        return path

    def _metadata(self, path: Path) -> dict[str, Any] | None:
        try:
            with open(path / METADATA_FILE, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError):
            logger.warning("Backup metadata unreadable", extra={"reason": str(path)})
            return None

    def _info(self, path: Path, metadata: dict[str, Any] | None) -> BackupInfo:
        metadata = metadata or {}
        return BackupInfo(
            name=path.name,
            created_at=_parse_dt(metadata.get("created_at")),
            collections=tuple(metadata.get("collections", [])),
            size_bytes=int(metadata.get("size_bytes", 0)),
        )
