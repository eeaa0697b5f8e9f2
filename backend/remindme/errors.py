"""
Domain errors raised by the repository, store and services.

The API layer maps them to HTTP status codes in ``remindme.main``.
"""


class RemindmeError(Exception):
    """Base class for all handled application errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RemindmeError):
    """A required field is missing or a value is not acceptable."""

    status_code = 400


class NotFoundError(RemindmeError):
    """An unknown folder, reminder, subtask or backup was requested."""

    status_code = 404


class CorruptBackupError(ValidationError):
    """A backup file exists but cannot be parsed."""


class BackupError(RemindmeError):
    """The local backup copy could not be produced."""


class AuthenticationError(RemindmeError):
    """No valid session; the caller should log in at ``login_url``."""

    status_code = 401

    def __init__(self, message: str, login_url: str):
        super().__init__(message)
        self.login_url = login_url
