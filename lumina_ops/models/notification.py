"""
Operations feed notifications
"""
import uuid
import enum
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from ..utils.time_utils import utc_now


class NotificationType(str, enum.Enum):
    JOB_CREATED = "job_created"
    JOB_ASSIGNED = "job_assigned"
    JOB_COMPLETED = "job_completed"
    JOB_CANCELLED = "job_cancelled"
    ISSUE_REPORTED = "issue_reported"
    LOW_STOCK = "low_stock"


class Notification(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    type: NotificationType
    message: str
    entity_id: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)

    class Config:
        frozen = True
