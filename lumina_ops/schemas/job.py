"""
Job request / response schemas
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from ..models.job import ChecklistItem, Job, JobStatus, JobType, Priority
from ..models.issue import IssueType


class ChecklistItemCreate(BaseModel):
    id: str = Field(..., min_length=1, max_length=50)
    label: str = Field(..., min_length=1, max_length=255)
    required: bool = True


class MaintenanceJobCreate(BaseModel):
    property_id: str
    deadline: datetime
    priority: Priority = Priority.MEDIUM
    notes: str = ""
    assignee_ids: List[str] = Field(default_factory=list)
    checklist: List[ChecklistItemCreate] = Field(default_factory=list)
    booking_id: Optional[str] = None

    def checklist_items(self) -> List[ChecklistItem]:
        return [ChecklistItem(**item.model_dump()) for item in self.checklist]


class RevisionedRequest(BaseModel):
    """Optional optimistic-concurrency guard shared by job mutations"""
    expected_revision: Optional[int] = None


class AssignRequest(RevisionedRequest):
    user_ids: List[str]


class MediaAttach(RevisionedRequest):
    media_url: str


class CancelRequest(RevisionedRequest):
    reason: str = Field(..., min_length=1, max_length=500)


class NoteCreate(BaseModel):
    text: str = Field(..., min_length=1, max_length=2000)


class IssueCreate(BaseModel):
    type: IssueType
    item_name: str = Field(..., min_length=1, max_length=255)
    comment: str = ""
    media_url: str = ""
    checklist_item_id: Optional[str] = None


class JobResponse(BaseModel):
    """Job plus derived state for the presentation layer"""
    id: str
    property_id: str
    booking_id: Optional[str]
    type: JobType
    status: JobStatus
    priority: Priority
    assigned_to: List[str]
    deadline: datetime
    checklist: List[ChecklistItem]
    media_urls: List[str]
    notes: str
    created_at: datetime
    completed_at: Optional[datetime]
    cancelled_at: Optional[datetime]
    cancel_reason: Optional[str]
    revision: int

    is_overdue: bool
    missing_required_item_ids: List[str]

    @classmethod
    def from_job(cls, job: Job, now: Optional[datetime] = None) -> "JobResponse":
        from ..services.job_lifecycle import is_overdue, missing_required_items
        return cls(
            **job.model_dump(),
            is_overdue=is_overdue(job, now),
            missing_required_item_ids=missing_required_items(job),
        )


class JobListResponse(BaseModel):
    jobs: List[JobResponse]
    total: int


class MyJobsResponse(BaseModel):
    open: List[JobResponse]
    finished: List[JobResponse]
