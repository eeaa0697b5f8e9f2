"""
API routers for Remindme.
"""
from remindme.api import folders, reminders, bulk, stats, backups, external

__all__ = [
    "folders",
    "reminders",
    "bulk",
    "stats",
    "backups",
    "external",
]
