"""
Core reminder logic: repository, tag index, recurrence and background tasks.
"""
from remindme.core.repository import Repository, ReminderQuery, sort_key, sort_reminders
from remindme.core.tags import extract_tags, rebuild_tag_index
from remindme.core.recurrence import RECURRENCE_INTERVALS, interval_for

__all__ = [
    "Repository",
    "ReminderQuery",
    "sort_key",
    "sort_reminders",
    "extract_tags",
    "rebuild_tag_index",
    "RECURRENCE_INTERVALS",
    "interval_for",
]
