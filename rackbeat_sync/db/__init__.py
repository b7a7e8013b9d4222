"""
Database package - SQLite only.
"""

from .models import SyncLog, LogStatus, TriggerType, generate_uuid
from .sqlite import SQLiteDatabase

__all__ = [
    "SQLiteDatabase",
    "SyncLog",
    "LogStatus",
    "TriggerType",
    "generate_uuid",
]
