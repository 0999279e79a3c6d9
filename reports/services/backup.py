"""
Backup transports for JSON snapshots.

Two interchangeable storages share ``upload / list / download``:

- :class:`FileBackupStorage` writes into a local directory;
- :class:`DropboxBackupStorage` talks to the Dropbox HTTP API with ``requests``.

Backups are named ``homer_backup_YYYY-MM-DD.json``; a second backup on the
same day overwrites the first.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import requests
from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.utils import timezone

from core.exceptions import NotFoundError, ServiceError
from reports.services.snapshot import build_snapshot

logger = logging.getLogger(__name__)

BACKUP_PREFIX = "homer_backup_"
BACKUP_SUFFIX = ".json"


class BackupError(ServiceError):
    """The backup transport failed."""

    status_code = 502


class BackupNotConfiguredError(BackupError):
    status_code = 503


class BackupNotFoundError(NotFoundError):
    pass


@dataclass(frozen=True)
class BackupFile:
    name: str
    path: str
    size: int
    modified: Optional[datetime] = None


def backup_filename(day: Optional[date] = None) -> str:
    day = day or timezone.localdate()
    return f"{BACKUP_PREFIX}{day.isoformat()}{BACKUP_SUFFIX}"


def is_backup_name(name: str) -> bool:
    return name.startswith(BACKUP_PREFIX) and name.endswith(BACKUP_SUFFIX)


def dump_snapshot(data: dict) -> bytes:
    return json.dumps(data, cls=DjangoJSONEncoder, indent=2).encode("utf-8")


class FileBackupStorage:
    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def upload(self, filename: str, content: bytes) -> str:
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self.directory / filename
        target.write_bytes(content)
        return str(target)

    def list(self) -> list[BackupFile]:
        if not self.directory.is_dir():
            return []
        files = []
        for entry in self.directory.iterdir():
            if entry.is_file() and is_backup_name(entry.name):
                stat = entry.stat()
                files.append(
                    BackupFile(
                        name=entry.name,
                        path=str(entry),
                        size=stat.st_size,
                        modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.get_current_timezone()),
                    )
                )
        return sorted(files, key=lambda item: item.name, reverse=True)

    def download(self, filename: str | None = None) -> tuple[str, bytes]:
        """Content of ``filename``, or of the newest backup when omitted."""

        name = filename or _latest_name(self.list())
        if not is_backup_name(name) or "/" in name or "\\" in name:
            raise BackupNotFoundError(f"Backup not found: {name}")
        target = self.directory / name
        if not target.is_file():
            raise BackupNotFoundError(f"Backup not found: {name}")
        return name, target.read_bytes()


class DropboxBackupStorage:
    """Backups in the root of the app folder of a Dropbox account."""

    def __init__(self, access_token: str, api_url: str, content_url: str, timeout: int = 30):
        if not access_token:
            raise BackupNotConfiguredError("Dropbox not configured. Set DROPBOX_ACCESS_TOKEN.")
        self.access_token = access_token
        self.api_url = api_url.rstrip("/")
        self.content_url = content_url.rstrip("/")
        self.timeout = timeout

    def _headers(self, **extra) -> dict:
        headers = {"Authorization": f"Bearer {self.access_token}"}
        headers.update(extra)
        return headers

    def _post(self, url: str, **kwargs) -> requests.Response:
        try:
            response = requests.post(url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.error("Dropbox request failed: %s", exc)
            raise BackupError(f"Dropbox request failed: {exc}") from exc

        if response.status_code == 409:
            raise BackupNotFoundError("Backup not found in Dropbox")
        if response.status_code >= 400:
            logger.error("Dropbox error %s: %s", response.status_code, response.text[:500])
            raise BackupError(f"Dropbox error {response.status_code}")
        return response

    def upload(self, filename: str, content: bytes) -> str:
        arg = {"path": f"/{filename}", "mode": "overwrite", "mute": True}
        response = self._post(
            f"{self.content_url}/files/upload",
            headers=self._headers(
                **{
                    "Dropbox-API-Arg": json.dumps(arg),
                    "Content-Type": "application/octet-stream",
                }
            ),
            data=content,
        )
        return response.json().get("path_lower", arg["path"])

    def list(self) -> list[BackupFile]:
        response = self._post(
            f"{self.api_url}/files/list_folder",
            headers=self._headers(),
            json={"path": ""},
        )
        page = response.json()
        entries = page.get("entries", [])
        while page.get("has_more"):
            response = self._post(
                f"{self.api_url}/files/list_folder/continue",
                headers=self._headers(),
                json={"cursor": page["cursor"]},
            )
            page = response.json()
            entries.extend(page.get("entries", []))

        files = []
        for entry in entries:
            if entry.get(".tag") != "file" or not is_backup_name(entry.get("name", "")):
                continue
            modified = entry.get("server_modified")
            files.append(
                BackupFile(
                    name=entry["name"],
                    path=entry.get("path_lower", f"/{entry['name']}"),
                    size=entry.get("size", 0),
                    modified=datetime.fromisoformat(modified.replace("Z", "+00:00")) if modified else None,
                )
            )
        return sorted(files, key=lambda item: item.name, reverse=True)

    def download(self, filename: str | None = None) -> tuple[str, bytes]:
        name = filename or _latest_name(self.list())
        response = self._post(
            f"{self.content_url}/files/download",
            headers=self._headers(**{"Dropbox-API-Arg": json.dumps({"path": f"/{name}"})}),
        )
        return name, response.content


def _latest_name(files: list[BackupFile]) -> str:
    if not files:
        raise BackupNotFoundError("No backup files found")
    return files[0].name


def get_backup_storage(backend: str | None = None):
    config = settings.BACKUP_CONFIG
    backend = backend or config.get("BACKEND", "file")
    if backend == "file":
        return FileBackupStorage(config["DIRECTORY"])
    if backend == "dropbox":
        return DropboxBackupStorage(
            access_token=config.get("DROPBOX_ACCESS_TOKEN", ""),
            api_url=config["DROPBOX_API_URL"],
            content_url=config["DROPBOX_CONTENT_URL"],
            timeout=config.get("TIMEOUT", 30),
        )
    raise BackupNotConfiguredError(f"Unknown backup backend: {backend}")


def create_backup(storage=None, day: Optional[date] = None) -> str:
    """Snapshot the database and upload it; returns the stored path."""

    storage = storage or get_backup_storage()
    filename = backup_filename(day)
    path = storage.upload(filename, dump_snapshot(build_snapshot()))
    logger.info("Backup %s written to %s", filename, path)
    return path


def load_backup(storage=None, filename: str | None = None) -> tuple[str, dict]:
    storage = storage or get_backup_storage()
    name, content = storage.download(filename)
    try:
        return name, json.loads(content)
    except ValueError as exc:
        raise BackupError(f"Backup {name} is not valid JSON") from exc
