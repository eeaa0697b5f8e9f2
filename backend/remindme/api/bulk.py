"""
Bulk reminder actions.
"""
from fastapi import APIRouter, Depends

from remindme.core.repository import Repository
from remindme.schemas.common import BulkRequest, BulkResponse
from remindme.store import get_repository

router = APIRouter()


@router.post("/bulk", response_model=BulkResponse)
async def bulk_action(
    bulk_data: BulkRequest,
    repo: Repository = Depends(get_repository),
):
    """
    Apply complete, uncomplete, delete or move to many reminders.
    Unknown ids are skipped.
    """
    updated = repo.bulk(bulk_data.action, bulk_data.ids, folder_id=bulk_data.folder_id)
    return BulkResponse(updated=updated)
