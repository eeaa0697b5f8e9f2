"""
Remindme - personal reminders with folders, sub-tasks, tags and recurrence.
"""
__version__ = "1.0.0"
