"""
External collaborators: backups and the identity service.
"""
from remindme.services.backup import BackupService, BackupResult
from remindme.services.identity import IdentityService

__all__ = [
    "BackupService",
    "BackupResult",
    "IdentityService",
]
