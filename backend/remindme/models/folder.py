"""
Folder entity.
"""
from typing import Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


INBOX_ID = "inbox"
DEFAULT_COLOR = "#007AFF"
DEFAULT_ICON = "📁"


class Folder(BaseModel):
    """
    A reminder container, or a smart folder when ``smart`` is set.

    Smart folders own no reminders; ``filter`` names the view the API layer
    computes for them.
    """

    id: str
    name: str
    color: str = DEFAULT_COLOR
    icon: str = DEFAULT_ICON
    created_at: int
    smart: bool = False
    filter: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


# id, name, color, icon, filter
SMART_FOLDERS = [
    ("today", "Today", "#007AFF", "📅", "today"),
    ("scheduled", "Scheduled", "#FF3B30", "🗓️", "scheduled"),
    ("all", "All", "#5856D6", "🗂️", "all"),
    ("completed", "Completed", "#8E8E93", "✅", "completed"),
]

SYSTEM_FOLDER_IDS = frozenset([INBOX_ID] + [entry[0] for entry in SMART_FOLDERS])


def inbox_folder(created_at: int) -> Folder:
    return Folder(id=INBOX_ID, name="Inbox", icon="📥", created_at=created_at)


def smart_folders(created_at: int) -> list[Folder]:
    return [
        Folder(
            id=folder_id,
            name=name,
            color=color,
            icon=icon,
            created_at=created_at,
            smart=True,
            filter=filter_name,
        )
        for folder_id, name, color, icon, filter_name in SMART_FOLDERS
    ]
