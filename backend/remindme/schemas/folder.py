"""
Folder schemas.
"""
from typing import Optional

from remindme.schemas.common import ApiModel


class FolderCreate(ApiModel):
    name: str
    color: Optional[str] = None
    icon: Optional[str] = None


class FolderUpdate(ApiModel):
    name: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None


class FolderDeleteResponse(ApiModel):
    success: bool = True
    moved: int = 0
