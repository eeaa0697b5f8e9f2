"""
Domain entities held in memory and persisted to the JSON data file.
"""
from remindme.models.folder import (
    Folder,
    INBOX_ID,
    SYSTEM_FOLDER_IDS,
    inbox_folder,
    smart_folders,
)
from remindme.models.reminder import Reminder, Subtask, PRIORITIES, RECURRENCE_KINDS

__all__ = [
    "Folder",
    "INBOX_ID",
    "SYSTEM_FOLDER_IDS",
    "inbox_folder",
    "smart_folders",
    "Reminder",
    "Subtask",
    "PRIORITIES",
    "RECURRENCE_KINDS",
]
