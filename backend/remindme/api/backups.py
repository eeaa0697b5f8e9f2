"""
Backup and restore endpoints.
"""
from typing import List

from fastapi import APIRouter, Depends, Request

from remindme.schemas.common import BackupInfo, BackupResponse, RestoreRequest, RestoreResponse
from remindme.services.backup import BackupService
from remindme.store import Store, get_store

router = APIRouter()


def get_backup_service(request: Request) -> BackupService:
    """Dependency to get the application's backup service."""
    return request.app.state.backups


@router.post("/backup", response_model=BackupResponse)
async def create_backup(
    store: Store = Depends(get_store),
    backups: BackupService = Depends(get_backup_service),
):
    """Save the current state and back it up now."""
    store.save_if_dirty()
    result = await backups.run()
    return BackupResponse(
        backup_file=result.backup_file,
        remote_synced=result.remote_synced,
        remote_errors=result.remote_errors,
        pruned=result.pruned,
    )


@router.get("/backups", response_model=List[BackupInfo])
async def list_backups(backups: BackupService = Depends(get_backup_service)):
    """Local backups, newest first."""
    return [BackupInfo(**entry) for entry in backups.list_backups()]


@router.post("/restore", response_model=RestoreResponse)
async def restore_backup(
    restore_data: RestoreRequest,
    store: Store = Depends(get_store),
):
    """Replace all data with a backup and write it to the data file."""
    store.restore(restore_data.backup_file)
    return RestoreResponse(
        folders=len(store.repository.folders),
        reminders=len(store.repository.reminders),
    )
