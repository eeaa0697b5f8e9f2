"""
Folder endpoints.
"""
from typing import List

from fastapi import APIRouter, Depends

from remindme.core.repository import Repository
from remindme.models.folder import Folder
from remindme.schemas.folder import FolderCreate, FolderUpdate, FolderDeleteResponse
from remindme.store import get_repository

router = APIRouter()


@router.get("", response_model=List[Folder])
async def list_folders(repo: Repository = Depends(get_repository)):
    """List all folders, oldest first."""
    return repo.list_folders()


@router.post("", response_model=Folder)
async def create_folder(
    folder_data: FolderCreate,
    repo: Repository = Depends(get_repository),
):
    """Create a new folder."""
    return repo.create_folder(
        folder_data.name,
        color=folder_data.color,
        icon=folder_data.icon,
    )


@router.patch("/{folder_id}", response_model=Folder)
async def update_folder(
    folder_id: str,
    folder_data: FolderUpdate,
    repo: Repository = Depends(get_repository),
):
    """Rename or restyle a folder."""
    return repo.update_folder(folder_id, **folder_data.model_dump(exclude_unset=True))


@router.delete("/{folder_id}", response_model=FolderDeleteResponse)
async def delete_folder(
    folder_id: str,
    repo: Repository = Depends(get_repository),
):
    """Delete a folder; its reminders move to the inbox."""
    moved = repo.delete_folder(folder_id)
    return FolderDeleteResponse(moved=moved)
