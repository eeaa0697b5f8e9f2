"""
Recurring reminder reset.

A completed recurring reminder comes back as incomplete once a full interval
has passed since it was completed. Intervals are fixed widths, so a "month"
is always 30 days.
"""
from typing import Iterable, List, Optional

from remindme.core.timeutil import DAY_MS
from remindme.models.reminder import Reminder


RECURRENCE_INTERVALS = {
    "daily": DAY_MS,
    "weekly": 7 * DAY_MS,
    "monthly": 30 * DAY_MS,
}


def interval_for(kind: Optional[str]) -> Optional[int]:
    """Interval in milliseconds for a recurrence kind, or None."""
    if not kind:
        return None
    return RECURRENCE_INTERVALS.get(kind)


def is_due_for_reset(reminder: Reminder, now: int) -> bool:
    interval = interval_for(reminder.recurring)
    if interval is None or not reminder.completed or reminder.completed_at is None:
        return False
    return now - reminder.completed_at >= interval


def reset(reminder: Reminder, now: int) -> None:
    """Reopen a recurring reminder and push its due date one interval forward."""
    interval = interval_for(reminder.recurring)
    reminder.completed = False
    reminder.completed_at = None
    reminder.created_at = now
    if reminder.due_date is not None:
        # Advance from the previous due date to keep the time of day.
        reminder.due_date += interval


def sweep(reminders: Iterable[Reminder], now: int) -> List[Reminder]:
    """
    Reset every recurring reminder whose interval has elapsed.

    Candidates are selected from a snapshot before any reset, so one sweep
    resets a reminder at most once.
    """
    due = [r for r in list(reminders) if is_due_for_reset(r, now)]
    for reminder in due:
        reset(reminder, now)
    return due
