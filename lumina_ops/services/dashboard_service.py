"""
Dashboard queries for the admin operations hub and staff job queues.
Read-only: nothing here mutates the store.
"""

from datetime import datetime
from typing import Dict, List, Optional, Tuple

from ..models import Job, JobStatus
from ..utils.time_utils import utc_now
from .job_lifecycle import is_overdue


def job_stats(jobs: List[Job], now: Optional[datetime] = None) -> Dict[str, int]:
    """Counts per status plus open jobs past their deadline"""
    now = now or utc_now()
    stats = {
        "needs_cleaning": 0,
        "in_progress": 0,
        "completed": 0,
        "cancelled": 0,
        "overdue": 0,
    }
    for job in jobs:
        stats[job.status.value.lower()] += 1
        if is_overdue(job, now):
            stats["overdue"] += 1
    return stats


def jobs_for_user(jobs: List[Job], user_id: str) -> Tuple[List[Job], List[Job]]:
    """
    Split a user's jobs into (open, finished).
    Open jobs come earliest deadline first, finished ones most recent first.
    """
    mine = [j for j in jobs if user_id in j.assigned_to]
    open_jobs = sorted((j for j in mine if not j.is_terminal), key=lambda j: j.deadline)
    finished = sorted(
        (j for j in mine if j.status == JobStatus.COMPLETED),
        key=lambda j: j.completed_at or j.deadline,
        reverse=True,
    )
    return open_jobs, finished


def overdue_jobs(jobs: List[Job], now: Optional[datetime] = None) -> List[Job]:
    now = now or utc_now()
    return sorted((j for j in jobs if is_overdue(j, now)), key=lambda j: j.deadline)
