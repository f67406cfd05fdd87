"""
Jobs (turnovers and maintenance) and their checklists
"""
import uuid
import enum
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from ..utils.time_utils import ensure_aware, utc_now


class JobStatus(str, enum.Enum):
    NEEDS_CLEANING = "NEEDS_CLEANING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


TERMINAL_STATUSES = frozenset({JobStatus.COMPLETED, JobStatus.CANCELLED})


class JobType(str, enum.Enum):
    TURNOVER = "TURNOVER"
    MAINTENANCE = "MAINTENANCE"


class Priority(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class ChecklistItem(BaseModel):
    id: str
    label: str = Field(..., min_length=1)
    required: bool = True
    completed_at: Optional[datetime] = None
    issue_id: Optional[str] = None

    @property
    def is_done(self) -> bool:
        return self.completed_at is not None


class Job(BaseModel):
    """
    A unit of work at a property.

    The job owns its checklist and media list. ``revision`` is bumped on
    every successful mutation and serves as the optimistic version.
    """
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    property_id: str
    booking_id: Optional[str] = None
    type: JobType
    status: JobStatus = JobStatus.NEEDS_CLEANING
    priority: Priority = Priority.MEDIUM
    assigned_to: List[str] = Field(default_factory=list)
    deadline: datetime
    checklist: List[ChecklistItem] = Field(default_factory=list)
    media_urls: List[str] = Field(default_factory=list)
    notes: str = ""
    created_at: datetime = Field(default_factory=utc_now)

    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancel_reason: Optional[str] = None
    revision: int = 0

    @field_validator('deadline')
    @classmethod
    def deadline_is_aware(cls, v: datetime) -> datetime:
        """Naive deadlines are taken as UTC"""
        return ensure_aware(v)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def find_item(self, item_id: str) -> Optional[ChecklistItem]:
        for item in self.checklist:
            if item.id == item_id:
                return item
        return None

    def __repr__(self):
        return f"<Job {self.id} {self.type.value} - {self.status.value}>"
