"""
Shared schemas: camelCase base model, bulk actions, stats and backups.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Accepts and emits camelCase field names."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class SuccessResponse(ApiModel):
    success: bool = True


class BulkRequest(ApiModel):
    action: str
    ids: List[str]
    folder_id: Optional[str] = None


class BulkResponse(ApiModel):
    updated: int


class TagCount(ApiModel):
    tag: str
    count: int


class StatsResponse(ApiModel):
    total: int
    completed: int
    incomplete: int
    due_today: int
    overdue: int
    recurring: int
    by_folder: Dict[str, int]
    by_priority: Dict[str, int]
    tags: int


class BackupInfo(ApiModel):
    name: str
    size: int
    modified: int


class BackupResponse(ApiModel):
    success: bool = True
    backup_file: str
    remote_synced: bool
    remote_errors: List[str] = []
    pruned: int = 0


class RestoreRequest(ApiModel):
    backup_file: str


class RestoreResponse(ApiModel):
    success: bool = True
    folders: int
    reminders: int
