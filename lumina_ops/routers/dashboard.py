"""
Dashboard API - admin operations hub and staff job queues
"""
from fastapi import APIRouter, Depends
from typing import List

from ..models.notification import Notification
from ..models.user import User
from ..schemas.dashboard import JobStatsResponse
from ..schemas.job import JobResponse, MyJobsResponse
from ..services.dashboard_service import job_stats, jobs_for_user, overdue_jobs
from ..store import OperationsStore
from ..utils.dependencies import get_current_user, get_store, require_capability

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=JobStatsResponse)
def get_job_stats(
    current_user: User = Depends(require_capability("view_jobs")),
    store: OperationsStore = Depends(get_store)
):
    return job_stats(list(store.jobs.values()))


@router.get("/my-jobs", response_model=MyJobsResponse)
def get_my_jobs(
    current_user: User = Depends(require_capability("view_jobs")),
    store: OperationsStore = Depends(get_store)
):
    open_jobs, finished = jobs_for_user(list(store.jobs.values()), current_user.id)
    return {
        "open": [JobResponse.from_job(j) for j in open_jobs],
        "finished": [JobResponse.from_job(j) for j in finished],
    }


@router.get("/overdue", response_model=List[JobResponse])
def get_overdue_jobs(
    current_user: User = Depends(require_capability("view_jobs")),
    store: OperationsStore = Depends(get_store)
):
    return [JobResponse.from_job(j) for j in overdue_jobs(list(store.jobs.values()))]


@router.get("/notifications", response_model=List[Notification])
def get_notifications(
    current_user: User = Depends(get_current_user),
    store: OperationsStore = Depends(get_store)
):
    """Newest first, capped at NOTIFICATION_LIMIT"""
    return store.recent_notifications()
