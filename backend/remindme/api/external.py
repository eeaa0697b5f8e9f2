"""
Assistant integration endpoints.

These routes skip the session auth gate; every call must carry the shared
secret instead.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request

from remindme.api.deps import verify_external_secret
from remindme.api.reminders import build_query, create_from_schema
from remindme.core.repository import Repository
from remindme.models.reminder import Reminder
from remindme.schemas.common import BulkResponse, StatsResponse
from remindme.schemas.external import ExternalBulkRequest, ExternalReminderCreate
from remindme.store import get_repository

router = APIRouter()

ASSISTANT_SOURCE = "assistant"


@router.post("/reminder", response_model=Reminder)
async def create_reminder(
    request: Request,
    reminder_data: ExternalReminderCreate,
    repo: Repository = Depends(get_repository),
):
    """Create a reminder on behalf of the assistant."""
    verify_external_secret(request, reminder_data.secret)
    return create_from_schema(repo, reminder_data, source=ASSISTANT_SOURCE)


@router.get("/reminders", response_model=List[Reminder])
async def list_reminders(
    request: Request,
    secret: Optional[str] = None,
    folder: Optional[str] = None,
    completed: Optional[bool] = None,
    tag: Optional[str] = None,
    search: Optional[str] = None,
    repo: Repository = Depends(get_repository),
):
    """List reminders with the same filters as the main API."""
    verify_external_secret(request, secret)
    return repo.list_reminders(build_query(repo, folder, completed, tag, search))


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    request: Request,
    secret: Optional[str] = Query(None),
    repo: Repository = Depends(get_repository),
):
    verify_external_secret(request, secret)
    return StatsResponse(**repo.stats())


@router.post("/bulk", response_model=BulkResponse)
async def bulk_action(
    request: Request,
    bulk_data: ExternalBulkRequest,
    repo: Repository = Depends(get_repository),
):
    verify_external_secret(request, bulk_data.secret)
    updated = repo.bulk(bulk_data.action, bulk_data.ids, folder_id=bulk_data.folder_id)
    return BulkResponse(updated=updated)
