"""
In-memory repository of folders and reminders.

The repository is the single owner of the three collections (folders,
reminders, tag counts). Route handlers and background tasks all work on the
same instance; every mutation calls ``on_change`` so the store can persist it.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from remindme.core import recurrence
from remindme.core.tags import rebuild_tag_index
from remindme.core.timeutil import local_day_window, now_ms
from remindme.errors import NotFoundError, ValidationError
from remindme.models.folder import (
    DEFAULT_COLOR,
    DEFAULT_ICON,
    INBOX_ID,
    SYSTEM_FOLDER_IDS,
    Folder,
    inbox_folder,
    smart_folders,
)
from remindme.models.reminder import PRIORITIES, RECURRENCE_KINDS, Reminder, Subtask


logger = logging.getLogger(__name__)

PRIORITY_RANK = {"high": 0, "normal": 1, "low": 2}
UNKNOWN_PRIORITY_RANK = len(PRIORITY_RANK)

BULK_ACTIONS = ("complete", "uncomplete", "delete", "move")

SubtaskInput = Union[str, Mapping[str, Any]]


@dataclass
class ReminderQuery:
    """Optional reminder filters, combined with AND."""

    folder_id: Optional[str] = None
    completed: Optional[bool] = None
    due_today: bool = False
    scheduled: bool = False
    tag: Optional[str] = None
    search: Optional[str] = None


def sort_key(reminder: Reminder):
    """
    Ordering key for reminder lists.

    Incomplete first, then priority, then dated before undated. Dated
    reminders ascend by due date, undated ones are newest first.
    """
    rank = PRIORITY_RANK.get(reminder.priority, UNKNOWN_PRIORITY_RANK)
    if reminder.due_date is not None:
        return (reminder.completed, rank, 0, reminder.due_date)
    return (reminder.completed, rank, 1, -reminder.created_at)


def sort_reminders(reminders: Iterable[Reminder]) -> List[Reminder]:
    return sorted(reminders, key=sort_key)


def _new_id(existing: Mapping[str, Any]) -> str:
    while True:
        candidate = uuid.uuid4().hex[:8]
        if candidate not in existing:
            return candidate


def _clean_title(title: Optional[str], what: str = "Title") -> str:
    cleaned = (title or "").strip()
    if not cleaned:
        raise ValidationError(f"{what} required")
    return cleaned


def _check_priority(priority: str) -> str:
    if priority not in PRIORITIES:
        raise ValidationError(f"Unknown priority: {priority}")
    return priority


def _check_recurring(recurring: Optional[str]) -> Optional[str]:
    if recurring is not None and recurring not in RECURRENCE_KINDS:
        raise ValidationError(f"Unknown recurrence: {recurring}")
    return recurring


class Repository:
    def __init__(
        self,
        clock: Callable[[], int] = now_ms,
        on_change: Optional[Callable[[], None]] = None,
    ):
        self.clock = clock
        self.on_change = on_change
        self.folders: Dict[str, Folder] = {}
        self.reminders: Dict[str, Reminder] = {}
        self.tags: Dict[str, int] = {}

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()

    # ------------------------------------------------------------------
    # Whole-collection operations
    # ------------------------------------------------------------------

    def ensure_system_folders(self) -> bool:
        """Create the inbox and smart folders if missing. Returns True if any were added."""
        now = self.clock()
        added = False
        for folder in [inbox_folder(now)] + smart_folders(now):
            if folder.id not in self.folders:
                self.folders[folder.id] = folder
                added = True
        return added

    def replace_all(
        self,
        folders: Dict[str, Folder],
        reminders: Dict[str, Reminder],
        tags: Dict[str, int],
    ) -> None:
        self.folders = dict(folders)
        self.reminders = dict(reminders)
        self.tags = dict(tags)

    def rebuild_tags(self) -> bool:
        """Recount tags from all reminders. Returns True if the counts changed."""
        fresh = rebuild_tag_index(self.reminders.values())
        changed = fresh != self.tags
        self.tags = fresh
        return changed

    def tag_counts(self) -> List[tuple]:
        return sorted(self.tags.items(), key=lambda item: (-item[1], item[0]))

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------

    def list_folders(self) -> List[Folder]:
        return sorted(self.folders.values(), key=lambda f: f.created_at)

    def get_folder(self, folder_id: str) -> Folder:
        folder = self.folders.get(folder_id)
        if folder is None:
            raise NotFoundError("Folder not found")
        return folder

    def create_folder(
        self,
        name: str,
        color: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> Folder:
        folder = Folder(
            id=_new_id(self.folders),
            name=_clean_title(name, "Folder name"),
            color=color or DEFAULT_COLOR,
            icon=icon or DEFAULT_ICON,
            created_at=self.clock(),
        )
        self.folders[folder.id] = folder
        self._changed()
        return folder

    def update_folder(self, folder_id: str, **fields) -> Folder:
        folder = self.get_folder(folder_id)
        if "name" in fields:
            folder.name = _clean_title(fields["name"], "Folder name")
        if fields.get("color"):
            folder.color = fields["color"]
        if fields.get("icon"):
            folder.icon = fields["icon"]
        self._changed()
        return folder

    def delete_folder(self, folder_id: str) -> int:
        """
        Delete a folder, moving its reminders to the inbox.

        Returns the number of reminders moved.
        """
        if folder_id in SYSTEM_FOLDER_IDS:
            raise ValidationError(f"Cannot delete {folder_id}")
        self.get_folder(folder_id)

        moved = 0
        for reminder in self.reminders.values():
            if reminder.folder_id == folder_id:
                reminder.folder_id = INBOX_ID
                moved += 1
        del self.folders[folder_id]
        logger.info("Deleted folder %s, moved %d reminders to inbox", folder_id, moved)
        self._changed()
        return moved

    # ------------------------------------------------------------------
    # Reminders
    # ------------------------------------------------------------------

    def get_reminder(self, reminder_id: str) -> Reminder:
        reminder = self.reminders.get(reminder_id)
        if reminder is None:
            raise NotFoundError("Reminder not found")
        return reminder

    def create_reminder(
        self,
        title: str,
        notes: Optional[str] = "",
        folder_id: Optional[str] = INBOX_ID,
        due_date: Optional[int] = None,
        priority: Optional[str] = "normal",
        recurring: Optional[str] = None,
        subtasks: Iterable[SubtaskInput] = (),
        source: Optional[str] = None,
    ) -> Reminder:
        reminder = Reminder(
            id=_new_id(self.reminders),
            title=_clean_title(title),
            notes=(notes or "").strip(),
            folder_id=folder_id or INBOX_ID,
            due_date=due_date,
            priority=_check_priority(priority or "normal"),
            recurring=_check_recurring(recurring),
            created_at=self.clock(),
            source=source,
        )
        for item in subtasks:
            if isinstance(item, str):
                title_value, completed = item, False
            else:
                title_value, completed = item.get("title"), bool(item.get("completed", False))
            self._append_subtask(reminder, title_value, completed)

        self.reminders[reminder.id] = reminder
        self.rebuild_tags()
        self._changed()
        return reminder

    def update_reminder(self, reminder_id: str, **fields) -> Reminder:
        """
        Patch a reminder in place.

        Only the keys present in ``fields`` are touched; a ``due_date`` of None
        clears the due date.
        """
        reminder = self.get_reminder(reminder_id)

        # Validate everything before touching the reminder.
        changes = {}
        if "title" in fields:
            changes["title"] = _clean_title(fields["title"])
        if "priority" in fields:
            changes["priority"] = _check_priority(fields["priority"] or "normal")
        if "recurring" in fields:
            changes["recurring"] = _check_recurring(fields["recurring"])
        if "notes" in fields:
            changes["notes"] = (fields["notes"] or "").strip()
        if "folder_id" in fields:
            changes["folder_id"] = fields["folder_id"] or INBOX_ID
        if "due_date" in fields:
            changes["due_date"] = fields["due_date"]

        for name, value in changes.items():
            setattr(reminder, name, value)
        if fields.get("completed") is not None:
            reminder.set_completed(bool(fields["completed"]), self.clock())

        self.rebuild_tags()
        self._changed()
        return reminder

    def delete_reminder(self, reminder_id: str) -> None:
        self.get_reminder(reminder_id)
        del self.reminders[reminder_id]
        self.rebuild_tags()
        self._changed()

    # ------------------------------------------------------------------
    # Subtasks
    # ------------------------------------------------------------------

    def _append_subtask(self, reminder: Reminder, title: Optional[str], completed: bool = False) -> Subtask:
        taken = {st.id for st in reminder.subtasks}
        while True:
            subtask_id = f"{reminder.id}-sub-{uuid.uuid4().hex[:6]}"
            if subtask_id not in taken:
                break
        subtask = Subtask(id=subtask_id, title=_clean_title(title), completed=completed)
        reminder.subtasks.append(subtask)
        return subtask

    def _get_subtask(self, reminder: Reminder, subtask_id: str) -> Subtask:
        for subtask in reminder.subtasks:
            if subtask.id == subtask_id:
                return subtask
        raise NotFoundError("Subtask not found")

    def add_subtask(self, reminder_id: str, title: str) -> Subtask:
        reminder = self.get_reminder(reminder_id)
        subtask = self._append_subtask(reminder, title)
        self._changed()
        return subtask

    def update_subtask(
        self,
        reminder_id: str,
        subtask_id: str,
        title: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> Subtask:
        """Patch a subtask; completing the last open one completes the parent."""
        reminder = self.get_reminder(reminder_id)
        subtask = self._get_subtask(reminder, subtask_id)

        if title is not None:
            subtask.title = _clean_title(title)
        if completed is not None:
            subtask.completed = completed

        if reminder.subtasks and all(st.completed for st in reminder.subtasks):
            reminder.set_completed(True, self.clock())

        self._changed()
        return subtask

    def delete_subtask(self, reminder_id: str, subtask_id: str) -> None:
        reminder = self.get_reminder(reminder_id)
        subtask = self._get_subtask(reminder, subtask_id)
        reminder.subtasks.remove(subtask)
        self._changed()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_reminders(self, query: Optional[ReminderQuery] = None) -> List[Reminder]:
        query = query or ReminderQuery()
        items: Iterable[Reminder] = self.reminders.values()

        if query.folder_id:
            items = [r for r in items if r.folder_id == query.folder_id]
        if query.completed is not None:
            items = [r for r in items if r.completed == query.completed]
        if query.due_today:
            start, end = local_day_window(self.clock())
            items = [r for r in items if r.due_date is not None and start <= r.due_date < end]
        if query.scheduled:
            items = [r for r in items if r.due_date is not None]
        if query.tag:
            needle = query.tag.lower()
            items = [r for r in items if needle in r.text.lower()]
        if query.search:
            needle = query.search.lower()
            items = [
                r for r in items
                if needle in r.title.lower() or needle in r.notes.lower()
            ]

        return sort_reminders(items)

    def reminders_due_today(self) -> List[Reminder]:
        """Incomplete reminders due today, earliest first."""
        items = self.list_reminders(ReminderQuery(completed=False, due_today=True))
        return sorted(items, key=lambda r: r.due_date)

    def stats(self) -> Dict[str, Any]:
        now = self.clock()
        start, end = local_day_window(now)
        open_items = [r for r in self.reminders.values() if not r.completed]

        by_folder: Dict[str, int] = {}
        by_priority: Dict[str, int] = {p: 0 for p in PRIORITIES}
        for reminder in open_items:
            by_folder[reminder.folder_id] = by_folder.get(reminder.folder_id, 0) + 1
            by_priority[reminder.priority] = by_priority.get(reminder.priority, 0) + 1

        return {
            "total": len(self.reminders),
            "completed": len(self.reminders) - len(open_items),
            "incomplete": len(open_items),
            "due_today": sum(
                1 for r in open_items if r.due_date is not None and start <= r.due_date < end
            ),
            "overdue": sum(1 for r in open_items if r.due_date is not None and r.due_date < now),
            "recurring": sum(1 for r in self.reminders.values() if r.recurring),
            "by_folder": by_folder,
            "by_priority": by_priority,
            "tags": len(self.tags),
        }

    # ------------------------------------------------------------------
    # Bulk and background operations
    # ------------------------------------------------------------------

    def bulk(self, action: str, ids: Iterable[str], folder_id: Optional[str] = None) -> int:
        """
        Apply ``action`` to every known id, skipping unknown ones.

        Returns how many reminders the action was applied to.
        """
        if action not in BULK_ACTIONS:
            raise ValidationError(f"Unknown bulk action: {action}")

        now = self.clock()
        updated = 0
        for reminder_id in dict.fromkeys(ids):
            reminder = self.reminders.get(reminder_id)
            if reminder is None:
                continue
            if action == "complete":
                reminder.set_completed(True, now)
            elif action == "uncomplete":
                reminder.set_completed(False, now)
            elif action == "delete":
                del self.reminders[reminder_id]
            elif action == "move":
                if not folder_id:
                    continue
                reminder.folder_id = folder_id
            updated += 1

        if updated:
            if action == "delete":
                self.rebuild_tags()
            self._changed()
        return updated

    def reset_recurring(self, now: Optional[int] = None) -> List[Reminder]:
        """Run one recurrence sweep; persist only if something was reset."""
        reset = recurrence.sweep(self.reminders.values(), self.clock() if now is None else now)
        if reset:
            logger.info("Reset %d recurring reminders", len(reset))
            self._changed()
        return reset
