import uuid
import enum
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from ..utils.time_utils import utc_now


class IssueType(str, enum.Enum):
    MISSING = "MISSING"
    DAMAGED = "DAMAGED"
    LOW_STOCK = "LOW_STOCK"
    OTHER = "OTHER"


class Issue(BaseModel):
    """A problem surfaced while working a job. Never changed after creation."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    job_id: str
    booking_id: Optional[str] = None
    property_id: str
    type: IssueType
    item_name: str
    comment: str = ""
    media_url: str = ""
    reported_by: str
    reported_at: datetime = Field(default_factory=utc_now)

    class Config:
        frozen = True
