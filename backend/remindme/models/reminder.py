"""
Reminder and subtask entities.
"""
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


PRIORITIES = ("high", "normal", "low")
RECURRENCE_KINDS = ("daily", "weekly", "monthly")


class Subtask(BaseModel):
    id: str
    title: str
    completed: bool = False

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class Reminder(BaseModel):
    """
    A single reminder.

    Timestamps (``due_date``, ``created_at``, ``completed_at``) are epoch
    milliseconds. ``completed_at`` is set exactly while ``completed`` is true.
    """

    id: str
    title: str
    notes: str = ""
    folder_id: str = "inbox"
    completed: bool = False
    due_date: Optional[int] = None
    priority: str = "normal"
    recurring: Optional[str] = None
    subtasks: List[Subtask] = Field(default_factory=list)
    created_at: int
    completed_at: Optional[int] = None
    source: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @property
    def text(self) -> str:
        """Title and notes joined, as scanned by tag and search filters."""
        return f"{self.title} {self.notes}"

    def set_completed(self, completed: bool, now: int) -> bool:
        """
        Move the completion state, keeping ``completed_at`` in step.

        Returns True when the state actually changed.
        """
        if completed == self.completed:
            return False
        self.completed = completed
        self.completed_at = now if completed else None
        return True
