"""
Pydantic schemas for API request/response validation.
"""
from remindme.schemas.common import (
    ApiModel,
    SuccessResponse,
    BulkRequest,
    BulkResponse,
    TagCount,
    StatsResponse,
    BackupInfo,
    BackupResponse,
    RestoreRequest,
    RestoreResponse,
)
from remindme.schemas.folder import (
    FolderCreate,
    FolderUpdate,
    FolderDeleteResponse,
)
from remindme.schemas.reminder import (
    ReminderCreate,
    ReminderUpdate,
    SubtaskIn,
    SubtaskCreate,
    SubtaskUpdate,
)
from remindme.schemas.external import (
    ExternalReminderCreate,
    ExternalBulkRequest,
)

__all__ = [
    # Common
    "ApiModel",
    "SuccessResponse",
    "BulkRequest",
    "BulkResponse",
    "TagCount",
    "StatsResponse",
    "BackupInfo",
    "BackupResponse",
    "RestoreRequest",
    "RestoreResponse",
    # Folder
    "FolderCreate",
    "FolderUpdate",
    "FolderDeleteResponse",
    # Reminder
    "ReminderCreate",
    "ReminderUpdate",
    "SubtaskIn",
    "SubtaskCreate",
    "SubtaskUpdate",
    # External
    "ExternalReminderCreate",
    "ExternalBulkRequest",
]
