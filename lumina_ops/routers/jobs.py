"""
Jobs API - turnover / maintenance lifecycle
"""
from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from ..models.issue import Issue
from ..models.job import ChecklistItem, JobStatus
from ..models.user import User
from ..schemas.job import (
    AssignRequest,
    CancelRequest,
    ChecklistItemCreate,
    IssueCreate,
    JobListResponse,
    JobResponse,
    MaintenanceJobCreate,
    MediaAttach,
    NoteCreate,
    RevisionedRequest,
)
from ..services.job_lifecycle import DEFAULT_CHECKLIST_TEMPLATE, JobLifecycleService
from ..store import OperationsStore
from ..utils.dependencies import (
    get_current_user,
    get_job_service,
    get_store,
    require_admin,
    require_capability,
)

router = APIRouter(prefix="/api/jobs", tags=["Jobs"])


@router.get("", response_model=JobListResponse)
@router.get("/", response_model=JobListResponse, include_in_schema=False)
def list_jobs(
    property_id: Optional[str] = Query(None),
    status: Optional[JobStatus] = Query(None),
    assignee_id: Optional[str] = Query(None),
    current_user: User = Depends(require_capability("view_jobs")),
    store: OperationsStore = Depends(get_store)
):
    jobs = store.list_jobs(property_id=property_id, status=status, assignee_id=assignee_id)
    return {"jobs": [JobResponse.from_job(j) for j in jobs], "total": len(jobs)}


@router.get("/checklist-template", response_model=List[ChecklistItemCreate])
def get_checklist_template(current_user: User = Depends(get_current_user)):
    """Master checklist copied into every new turnover job"""
    return [
        {"id": item_id, "label": label, "required": required}
        for item_id, label, required in DEFAULT_CHECKLIST_TEMPLATE
    ]


@router.get("/{job_id}", response_model=JobResponse)
def get_job(
    job_id: str,
    current_user: User = Depends(require_capability("view_jobs")),
    store: OperationsStore = Depends(get_store)
):
    return JobResponse.from_job(store.get_job(job_id))


@router.post("/maintenance", response_model=JobResponse, status_code=201)
def create_maintenance_job(
    data: MaintenanceJobCreate,
    current_user: User = Depends(require_capability("create_maintenance")),
    service: JobLifecycleService = Depends(get_job_service)
):
    job = service.create_maintenance_job(
        property_id=data.property_id,
        deadline=data.deadline,
        priority=data.priority,
        notes=data.notes,
        assignee_ids=data.assignee_ids,
        checklist=data.checklist_items(),
        booking_id=data.booking_id,
    )
    return JobResponse.from_job(job)


@router.put("/{job_id}/assignees", response_model=JobResponse)
def assign_job(
    job_id: str,
    data: AssignRequest,
    current_user: User = Depends(require_admin),
    service: JobLifecycleService = Depends(get_job_service)
):
    job = service.assign(job_id, data.user_ids, data.expected_revision)
    return JobResponse.from_job(job)


@router.post("/{job_id}/start", response_model=JobResponse)
def start_job(
    job_id: str,
    data: Optional[RevisionedRequest] = None,
    current_user: User = Depends(require_capability("update_status")),
    service: JobLifecycleService = Depends(get_job_service)
):
    expected = data.expected_revision if data else None
    return JobResponse.from_job(service.start(job_id, expected))


@router.post("/{job_id}/checklist/{item_id}/toggle", response_model=ChecklistItem)
def toggle_checklist_item(
    job_id: str,
    item_id: str,
    data: Optional[RevisionedRequest] = None,
    current_user: User = Depends(require_capability("update_status")),
    service: JobLifecycleService = Depends(get_job_service)
):
    expected = data.expected_revision if data else None
    return service.toggle_checklist_item(job_id, item_id, expected)


@router.post("/{job_id}/media", response_model=JobResponse)
def attach_media(
    job_id: str,
    data: MediaAttach,
    current_user: User = Depends(require_capability("upload_media")),
    service: JobLifecycleService = Depends(get_job_service)
):
    job = service.attach_media(job_id, data.media_url, data.expected_revision)
    return JobResponse.from_job(job)


@router.delete("/{job_id}/media/{index}", response_model=JobResponse)
def detach_media(
    job_id: str,
    index: int,
    current_user: User = Depends(require_capability("upload_media")),
    service: JobLifecycleService = Depends(get_job_service)
):
    return JobResponse.from_job(service.detach_media(job_id, index))


@router.post("/{job_id}/complete", response_model=JobResponse)
def complete_job(
    job_id: str,
    data: Optional[RevisionedRequest] = None,
    current_user: User = Depends(require_capability("update_status")),
    service: JobLifecycleService = Depends(get_job_service)
):
    expected = data.expected_revision if data else None
    return JobResponse.from_job(service.complete(job_id, expected))


@router.post("/{job_id}/cancel", response_model=JobResponse)
def cancel_job(
    job_id: str,
    data: CancelRequest,
    current_user: User = Depends(require_capability("update_status")),
    service: JobLifecycleService = Depends(get_job_service)
):
    job = service.cancel(job_id, data.reason, data.expected_revision)
    return JobResponse.from_job(job)


@router.post("/{job_id}/notes", response_model=JobResponse)
def add_note(
    job_id: str,
    data: NoteCreate,
    current_user: User = Depends(require_capability("add_comments")),
    service: JobLifecycleService = Depends(get_job_service)
):
    return JobResponse.from_job(service.add_note(job_id, current_user.id, data.text))


@router.post("/{job_id}/issues", response_model=Issue, status_code=201)
def report_issue(
    job_id: str,
    data: IssueCreate,
    current_user: User = Depends(require_capability("report_issues")),
    service: JobLifecycleService = Depends(get_job_service)
):
    return service.report_issue(
        job_id,
        reporter_id=current_user.id,
        type=data.type,
        item_name=data.item_name,
        comment=data.comment,
        media_url=data.media_url,
        checklist_item_id=data.checklist_item_id,
    )


@router.get("/{job_id}/issues", response_model=List[Issue])
def list_job_issues(
    job_id: str,
    current_user: User = Depends(require_capability("view_jobs")),
    store: OperationsStore = Depends(get_store)
):
    store.get_job(job_id)
    return store.issues_for_job(job_id)
