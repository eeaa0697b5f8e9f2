"""
Reminder and subtask request schemas.

Due dates are accepted as epoch milliseconds or ISO-8601 strings.
"""
from datetime import datetime
from typing import List, Literal, Optional, Union

from remindme.schemas.common import ApiModel


Priority = Literal["high", "normal", "low"]
Recurrence = Literal["daily", "weekly", "monthly"]
DateInput = Union[int, datetime]


class SubtaskIn(ApiModel):
    title: str
    completed: bool = False


class ReminderCreate(ApiModel):
    title: str
    notes: Optional[str] = ""
    folder_id: Optional[str] = "inbox"
    due_date: Optional[DateInput] = None
    priority: Priority = "normal"
    recurring: Optional[Recurrence] = None
    subtasks: List[Union[str, SubtaskIn]] = []


class ReminderUpdate(ApiModel):
    title: Optional[str] = None
    notes: Optional[str] = None
    folder_id: Optional[str] = None
    due_date: Optional[DateInput] = None
    priority: Optional[Priority] = None
    recurring: Optional[Recurrence] = None
    completed: Optional[bool] = None


class SubtaskCreate(ApiModel):
    title: str


class SubtaskUpdate(ApiModel):
    title: Optional[str] = None
    completed: Optional[bool] = None
