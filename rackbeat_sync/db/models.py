"""
Pydantic models for database entities.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field
import uuid


class LogStatus(str, Enum):
    """Status of a sync log entry."""
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"


class TriggerType(str, Enum):
    """What triggered the sync."""
    SCHEDULER = "scheduler"
    MANUAL = "manual"


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Current time in UTC."""
    return datetime.now(timezone.utc)


class SyncLog(BaseModel):
    """A log entry for one sync run."""
    id: str = Field(default_factory=generate_uuid)
    started_at: datetime = Field(default_factory=utcnow)
    finished_at: Optional[datetime] = None
    status: LogStatus = LogStatus.RUNNING
    triggered_by: TriggerType = TriggerType.MANUAL
    mode: str = "skip_existing"
    
    # Statistics
    products_fetched: int = 0
    products_created: int = 0
    products_updated: int = 0
    products_skipped: int = 0
    products_failed: int = 0
    publish_warnings: int = 0
    
    # Error information
    error_message: Optional[str] = None
    error_details: Optional[str] = None

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()
