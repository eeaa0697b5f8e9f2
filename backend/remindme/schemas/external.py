"""
Assistant integration schemas. Every request carries the shared secret.
"""
from remindme.schemas.common import BulkRequest
from remindme.schemas.reminder import ReminderCreate


class ExternalReminderCreate(ReminderCreate):
    secret: str = ""


class ExternalBulkRequest(BulkRequest):
    secret: str = ""
