"""
Reminder and subtask endpoints.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from remindme.core.repository import Repository, ReminderQuery
from remindme.core.timeutil import to_epoch_ms
from remindme.models.reminder import Reminder, Subtask
from remindme.schemas.common import SuccessResponse
from remindme.schemas.reminder import (
    ReminderCreate,
    ReminderUpdate,
    SubtaskCreate,
    SubtaskUpdate,
)
from remindme.store import get_repository

router = APIRouter()


def build_query(
    repo: Repository,
    folder: Optional[str] = None,
    completed: Optional[bool] = None,
    tag: Optional[str] = None,
    search: Optional[str] = None,
) -> ReminderQuery:
    """
    Translate list parameters into a repository query.

    Smart folder ids select their view instead of folder membership.
    """
    query = ReminderQuery(completed=completed, tag=tag, search=search)
    target = repo.folders.get(folder) if folder else None

    if target is None or not target.smart:
        query.folder_id = folder
    elif target.filter == "today":
        query.due_today = True
        query.completed = False if completed is None else completed
    elif target.filter == "scheduled":
        query.scheduled = True
        query.completed = False if completed is None else completed
    elif target.filter == "all":
        query.completed = False if completed is None else completed
    elif target.filter == "completed":
        query.completed = True

    return query


def create_from_schema(
    repo: Repository,
    reminder_data: ReminderCreate,
    source: Optional[str] = None,
) -> Reminder:
    subtasks = [
        item if isinstance(item, str) else item.model_dump()
        for item in reminder_data.subtasks
    ]
    return repo.create_reminder(
        reminder_data.title,
        notes=reminder_data.notes,
        folder_id=reminder_data.folder_id,
        due_date=to_epoch_ms(reminder_data.due_date) if reminder_data.due_date is not None else None,
        priority=reminder_data.priority,
        recurring=reminder_data.recurring,
        subtasks=subtasks,
        source=source,
    )


@router.get("", response_model=List[Reminder])
async def list_reminders(
    folder: Optional[str] = Query(None, description="Folder id or smart folder id"),
    completed: Optional[bool] = Query(None, description="Filter by completion"),
    tag: Optional[str] = Query(None, description="Substring match in title and notes"),
    search: Optional[str] = Query(None, description="Search in title and notes"),
    repo: Repository = Depends(get_repository),
):
    """List reminders with optional filters, in display order."""
    return repo.list_reminders(build_query(repo, folder, completed, tag, search))


@router.post("", response_model=Reminder)
async def create_reminder(
    reminder_data: ReminderCreate,
    repo: Repository = Depends(get_repository),
):
    """Create a new reminder."""
    return create_from_schema(repo, reminder_data)


@router.get("/today", response_model=List[Reminder])
async def get_reminders_due_today(repo: Repository = Depends(get_repository)):
    """Get all incomplete reminders due today."""
    return repo.reminders_due_today()


@router.get("/{reminder_id}", response_model=Reminder)
async def get_reminder(
    reminder_id: str,
    repo: Repository = Depends(get_repository),
):
    """Get a specific reminder."""
    return repo.get_reminder(reminder_id)


@router.patch("/{reminder_id}", response_model=Reminder)
async def update_reminder(
    reminder_id: str,
    reminder_data: ReminderUpdate,
    repo: Repository = Depends(get_repository),
):
    """Update a reminder. A null dueDate clears the due date."""
    update_data = reminder_data.model_dump(exclude_unset=True)
    if update_data.get("due_date") is not None:
        update_data["due_date"] = to_epoch_ms(update_data["due_date"])
    return repo.update_reminder(reminder_id, **update_data)


@router.delete("/{reminder_id}", response_model=SuccessResponse)
async def delete_reminder(
    reminder_id: str,
    repo: Repository = Depends(get_repository),
):
    """Delete a reminder."""
    repo.delete_reminder(reminder_id)
    return SuccessResponse()


@router.post("/{reminder_id}/subtasks", response_model=Subtask)
async def add_subtask(
    reminder_id: str,
    subtask_data: SubtaskCreate,
    repo: Repository = Depends(get_repository),
):
    """Add a subtask to a reminder."""
    return repo.add_subtask(reminder_id, subtask_data.title)


@router.patch("/{reminder_id}/subtasks/{subtask_id}", response_model=Subtask)
async def update_subtask(
    reminder_id: str,
    subtask_id: str,
    subtask_data: SubtaskUpdate,
    repo: Repository = Depends(get_repository),
):
    """Update a subtask. Completing the last open subtask completes the reminder."""
    return repo.update_subtask(
        reminder_id,
        subtask_id,
        title=subtask_data.title,
        completed=subtask_data.completed,
    )


@router.delete("/{reminder_id}/subtasks/{subtask_id}", response_model=SuccessResponse)
async def delete_subtask(
    reminder_id: str,
    subtask_id: str,
    repo: Repository = Depends(get_repository),
):
    """Delete a subtask."""
    repo.delete_subtask(reminder_id, subtask_id)
    return SuccessResponse()
