"""
JSON file persistence for the repository.

The data file holds one document::

    {"folders": [[id, folder], ...], "reminders": [[id, reminder], ...],
     "tags": [[tag, count], ...], "lastSaved": <epoch ms>}
"""
import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

from fastapi import Request
from pydantic import ValidationError as PydanticValidationError

from remindme.core.repository import Repository
from remindme.core.timeutil import now_ms
from remindme.errors import CorruptBackupError, NotFoundError
from remindme.models.folder import Folder
from remindme.models.reminder import Reminder


logger = logging.getLogger(__name__)

Collections = Tuple[Dict[str, Folder], Dict[str, Reminder], Dict[str, int]]


def serialize(repository: Repository, saved_at: int) -> Dict[str, Any]:
    return {
        "folders": [
            [folder_id, folder.model_dump(by_alias=True)]
            for folder_id, folder in repository.folders.items()
        ],
        "reminders": [
            [reminder_id, reminder.model_dump(by_alias=True)]
            for reminder_id, reminder in repository.reminders.items()
        ],
        "tags": [[tag, count] for tag, count in repository.tags.items()],
        "lastSaved": saved_at,
    }


def deserialize(document: Any) -> Collections:
    """
    Rebuild the three collections from a parsed data document.

    Raises ValueError if the document does not have the expected shape.
    """
    if not isinstance(document, dict):
        raise ValueError("Data document must be a JSON object")
    try:
        folders = {
            key: Folder.model_validate(value)
            for key, value in document.get("folders") or []
        }
        reminders = {
            key: Reminder.model_validate(value)
            for key, value in document.get("reminders") or []
        }
        tags = {str(key): int(value) for key, value in document.get("tags") or []}
    except (PydanticValidationError, TypeError) as exc:
        raise ValueError(f"Malformed data document: {exc}") from exc
    return folders, reminders, tags


def read_document(path: Path) -> Collections:
    with open(path, "r", encoding="utf-8") as f:
        return deserialize(json.load(f))


class Store:
    """
    Owns the repository and its on-disk representation.

    Every repository change is written straight away. A failed write leaves
    the store dirty so the auto-save timer retries it.
    """

    def __init__(
        self,
        data_file: str,
        backup_dir: str,
        repository: Optional[Repository] = None,
        on_saved: Optional[Callable[[], None]] = None,
    ):
        self.data_file = Path(data_file)
        self.backup_dir = Path(backup_dir)
        self.repository = repository or Repository()
        self.repository.on_change = self.save
        self.on_saved = on_saved
        self.last_saved: Optional[int] = None
        self.dirty = False

    def load(self) -> None:
        """Load the data file, falling back to empty collections on failure."""
        folders: Dict[str, Folder] = {}
        reminders: Dict[str, Reminder] = {}
        tags: Dict[str, int] = {}

        if self.data_file.exists():
            try:
                folders, reminders, tags = read_document(self.data_file)
                logger.info(
                    "Loaded %d folders and %d reminders from %s",
                    len(folders), len(reminders), self.data_file,
                )
            except (OSError, ValueError) as exc:
                logger.error("Could not load %s: %s", self.data_file, exc)
                self._set_aside_unreadable()
        else:
            logger.info("No data file at %s, starting empty", self.data_file)

        self.repository.replace_all(folders, reminders, tags)
        if self.repository.ensure_system_folders():
            self.dirty = True

    def _set_aside_unreadable(self) -> None:
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        target = self.data_file.with_name(f"{self.data_file.name}.corrupt-{stamp}")
        try:
            os.replace(self.data_file, target)
            logger.warning("Moved unreadable data file to %s", target)
        except OSError as exc:
            logger.error("Could not move unreadable data file aside: %s", exc)

    def save(self) -> bool:
        """
        Write all collections to the data file.

        Returns False (and stays dirty) when the write fails.
        """
        saved_at = now_ms()
        document = serialize(self.repository, saved_at)
        tmp = self.data_file.with_name(self.data_file.name + ".tmp")
        try:
            self.data_file.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False)
            os.replace(tmp, self.data_file)
        except (OSError, TypeError, ValueError) as exc:
            self.dirty = True
            logger.error("Could not save %s: %s", self.data_file, exc)
            return False

        self.dirty = False
        self.last_saved = saved_at
        if self.on_saved is not None:
            self.on_saved()
        return True

    def save_if_dirty(self) -> bool:
        if not self.dirty:
            return False
        return self.save()

    def restore(self, backup_file: str) -> None:
        """
        Replace all collections with the contents of a backup file.

        The file must live directly in the backup directory. Memory is only
        touched once the backup has been read and parsed.
        """
        path = self.resolve_backup(backup_file)
        try:
            folders, reminders, tags = read_document(path)
        except (OSError, ValueError) as exc:
            raise CorruptBackupError(f"Backup {backup_file} is unreadable: {exc}") from exc

        self.repository.replace_all(folders, reminders, tags)
        self.repository.ensure_system_folders()
        self.repository.rebuild_tags()
        logger.info("Restored %d reminders from %s", len(reminders), path)
        self.save()

    def resolve_backup(self, backup_file: str) -> Path:
        name = Path(backup_file or "").name
        if not name or name != backup_file:
            raise NotFoundError("Backup not found")
        path = self.backup_dir / name
        if not path.is_file():
            raise NotFoundError("Backup not found")
        return path


def get_store(request: Request) -> Store:
    """Dependency to get the application's store."""
    return request.app.state.store


def get_repository(request: Request) -> Repository:
    """Dependency to get the application's repository."""
    return request.app.state.store.repository
