"""
Job Lifecycle Controller

State machine:
    NEEDS_CLEANING -> IN_PROGRESS -> COMPLETED
    any non-terminal state -> CANCELLED

The module-level functions are pure operations on a single Job and raise
domain errors. ``JobLifecycleService`` runs them against the store under the
per-job lock, validates cross-entity references, bumps the revision and emits
logs and notifications.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from ..config import Settings, settings as default_settings
from ..exceptions import (
    ConflictError,
    IncompleteChecklistError,
    InvalidTransitionError,
    MissingEvidenceError,
    NotFoundError,
    ValidationError,
)
from ..models import (
    Booking,
    ChecklistItem,
    Issue,
    IssueType,
    Job,
    JobStatus,
    JobType,
    NotificationType,
    Priority,
    User,
)
from ..store import OperationsStore
from ..utils.logging_config import get_logger
from ..utils.time_utils import ensure_aware, local_deadline, utc_now

logger = get_logger(__name__)


# Master template copied into every turnover job
DEFAULT_CHECKLIST_TEMPLATE = (
    ("c1", "Launder all linen and towels", True),
    ("c2", "Deep clean kitchen and surfaces", True),
    ("c3", "Refill toiletries and consumables", True),
    ("c4", "Vacuum and mop all floors", True),
    ("c5", "Check for maintenance issues", False),
)


def checklist_from_template(template: Iterable = DEFAULT_CHECKLIST_TEMPLATE) -> List[ChecklistItem]:
    """Fresh, uncompleted checklist items; each job gets its own copies"""
    return [
        ChecklistItem(id=item_id, label=label, required=required)
        for item_id, label, required in template
    ]


def _ensure_open(job: Job, action: str) -> None:
    if job.is_terminal:
        raise InvalidTransitionError(job.id, job.status.value, action)


# ======== Job construction ========

def build_turnover_job(
    booking: Booking,
    assignee_ids: Sequence[str] = (),
    priority: Priority = Priority.HIGH,
    config: Optional[Settings] = None,
) -> Job:
    """
    Turnover job for a booking: due on the checkout day at the configured
    turnover time in the configured timezone.
    """
    config = config or default_settings
    return Job(
        property_id=booking.property_id,
        booking_id=booking.id,
        type=JobType.TURNOVER,
        status=JobStatus.NEEDS_CLEANING,
        priority=priority,
        assigned_to=list(dict.fromkeys(assignee_ids)),
        deadline=local_deadline(booking.check_out, config.turnover_time, config.timezone),
        checklist=checklist_from_template(),
    )


def build_maintenance_job(
    property_id: str,
    deadline: datetime,
    priority: Priority = Priority.MEDIUM,
    notes: str = "",
    assignee_ids: Sequence[str] = (),
    checklist: Optional[List[ChecklistItem]] = None,
    booking_id: Optional[str] = None,
) -> Job:
    return Job(
        property_id=property_id,
        booking_id=booking_id,
        type=JobType.MAINTENANCE,
        status=JobStatus.NEEDS_CLEANING,
        priority=priority,
        assigned_to=list(dict.fromkeys(assignee_ids)),
        deadline=ensure_aware(deadline),
        checklist=[item.model_copy() for item in (checklist or [])],
        notes=notes,
    )


# ======== Pure operations ========

def assign(job: Job, user_ids: Sequence[str]) -> Job:
    """Replace the assignee list. Status is left alone."""
    _ensure_open(job, "assign")
    job.assigned_to = list(dict.fromkeys(user_ids))
    return job


def start(job: Job) -> Job:
    """NEEDS_CLEANING -> IN_PROGRESS; already in progress is a no-op"""
    _ensure_open(job, "start")
    job.status = JobStatus.IN_PROGRESS
    return job


def toggle_checklist_item(job: Job, item_id: str, now: Optional[datetime] = None) -> ChecklistItem:
    """Flip the item's completion between unset and ``now``"""
    _ensure_open(job, "update checklist of")
    item = job.find_item(item_id)
    if item is None:
        raise NotFoundError("ChecklistItem", item_id)
    item.completed_at = None if item.is_done else (now or utc_now())
    return item


def attach_media(job: Job, media_ref: str) -> Job:
    _ensure_open(job, "attach media to")
    if not media_ref or not media_ref.strip():
        raise ValidationError("Media reference cannot be empty")
    job.media_urls.append(media_ref.strip())
    return job


def detach_media(job: Job, index: int) -> str:
    """Remove the media reference at ``index`` before the job is closed"""
    _ensure_open(job, "remove media from")
    if index < 0 or index >= len(job.media_urls):
        raise NotFoundError("Media", str(index))
    return job.media_urls.pop(index)


def add_note(job: Job, author: str, text: str) -> Job:
    """Append a comment line; allowed in every status"""
    if not text or not text.strip():
        raise ValidationError("Note cannot be empty")
    line = f"[{author}] {text.strip()}"
    job.notes = f"{job.notes}\n{line}" if job.notes else line
    return job


def missing_required_items(job: Job) -> List[str]:
    """Ids of required items without a completion timestamp, in checklist order"""
    return [item.id for item in job.checklist if item.required and not item.is_done]


def complete(job: Job, now: Optional[datetime] = None) -> Job:
    """
    Close the job once every required item is done and evidence exists.

    Checklist gaps are reported before missing evidence. Callers sharing
    a job across sessions must hold the job lock around this call.
    """
    _ensure_open(job, "complete")
    missing = missing_required_items(job)
    if missing:
        raise IncompleteChecklistError(missing)
    if not job.media_urls:
        raise MissingEvidenceError()
    job.status = JobStatus.COMPLETED
    job.completed_at = now or utc_now()
    return job


def cancel(job: Job, reason: str, now: Optional[datetime] = None) -> Job:
    """Cancel a non-terminal job; cancelling again is a no-op"""
    if job.status == JobStatus.CANCELLED:
        return job
    _ensure_open(job, "cancel")
    job.status = JobStatus.CANCELLED
    job.cancel_reason = reason
    job.cancelled_at = now or utc_now()
    return job


def is_overdue(job: Job, now: Optional[datetime] = None) -> bool:
    if job.is_terminal:
        return False
    return ensure_aware(now or utc_now()) > job.deadline


# ======== Store-backed service ========

class JobLifecycleService:
    """
    Applies lifecycle operations to jobs held in the store.

    Each call:
    - takes the job lock (serializes all writers of one job)
    - checks ``expected_revision`` when given
    - runs the pure operation
    - bumps ``revision`` only when the operation succeeded
    """

    def __init__(self, store: OperationsStore, config: Optional[Settings] = None):
        self.store = store
        self.config = config or default_settings

    def _check_revision(self, job: Job, expected_revision: Optional[int]) -> None:
        if expected_revision is not None and expected_revision != job.revision:
            raise ConflictError(job.id, expected_revision, job.revision)

    def check_assignees(self, user_ids: Sequence[str]) -> List[User]:
        """Resolve assignees; unknown ids raise NotFoundError, deactivated ones ValidationError"""
        users = [self.store.get_user(user_id) for user_id in user_ids]
        inactive = [u.id for u in users if not u.active]
        if inactive:
            raise ValidationError("Cannot assign deactivated users: " + ", ".join(inactive))
        return users

    # ---- creation ----

    def create_turnover_job(
        self,
        booking_id: str,
        assignee_ids: Sequence[str] = (),
        priority: Priority = Priority.HIGH,
    ) -> Job:
        booking = self.store.get_booking(booking_id)
        self.check_assignees(assignee_ids)
        job = self.store.add_job(
            build_turnover_job(booking, assignee_ids, priority, self.config)
        )
        logger.log_with_context(
            logging.INFO, f"Turnover job created for booking {booking.reference}",
            entity_type="job", entity_id=job.id, booking_id=booking.id
        )
        self.store.notify(
            NotificationType.JOB_CREATED,
            f"Turnover scheduled for {booking.reference}",
            job.id,
        )
        return job

    def create_maintenance_job(
        self,
        property_id: str,
        deadline: datetime,
        priority: Priority = Priority.MEDIUM,
        notes: str = "",
        assignee_ids: Sequence[str] = (),
        checklist: Optional[List[ChecklistItem]] = None,
        booking_id: Optional[str] = None,
    ) -> Job:
        prop = self.store.get_property(property_id)
        if booking_id:
            self.store.get_booking(booking_id)
        self.check_assignees(assignee_ids)
        job = self.store.add_job(build_maintenance_job(
            property_id, deadline, priority, notes, assignee_ids, checklist, booking_id
        ))
        logger.log_with_context(
            logging.INFO, f"Maintenance job created at {prop.name}",
            entity_type="job", entity_id=job.id, priority=priority.value
        )
        self.store.notify(
            NotificationType.JOB_CREATED,
            f"Maintenance requested at {prop.name}",
            job.id,
        )
        return job

    # ---- mutations ----

    def assign(self, job_id: str, user_ids: Sequence[str], expected_revision: Optional[int] = None) -> Job:
        self.check_assignees(user_ids)
        with self.store.locked_job(job_id) as job:
            self._check_revision(job, expected_revision)
            assign(job, user_ids)
            job.revision += 1
        self.store.notify(NotificationType.JOB_ASSIGNED, f"Job {job.id} assigned", job.id)
        return job

    def start(self, job_id: str, expected_revision: Optional[int] = None) -> Job:
        with self.store.locked_job(job_id) as job:
            self._check_revision(job, expected_revision)
            old_status = job.status
            start(job)
            if job.status != old_status:
                job.revision += 1
                logger.job_status_changed(job.id, old_status.value, job.status.value, job.revision)
        return job

    def toggle_checklist_item(
        self,
        job_id: str,
        item_id: str,
        expected_revision: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> ChecklistItem:
        with self.store.locked_job(job_id) as job:
            self._check_revision(job, expected_revision)
            try:
                item = toggle_checklist_item(job, item_id, now)
            except InvalidTransitionError as e:
                logger.job_rejected(job.id, "checklist toggle", e.message)
                raise
            job.revision += 1
        logger.debug(f"Checklist item {item_id} on job {job_id} done={item.is_done}")
        return item

    def attach_media(self, job_id: str, media_ref: str, expected_revision: Optional[int] = None) -> Job:
        with self.store.locked_job(job_id) as job:
            self._check_revision(job, expected_revision)
            attach_media(job, media_ref)
            job.revision += 1
        return job

    def detach_media(self, job_id: str, index: int, expected_revision: Optional[int] = None) -> Job:
        with self.store.locked_job(job_id) as job:
            self._check_revision(job, expected_revision)
            detach_media(job, index)
            job.revision += 1
        return job

    def complete(self, job_id: str, expected_revision: Optional[int] = None, now: Optional[datetime] = None) -> Job:
        with self.store.locked_job(job_id) as job:
            self._check_revision(job, expected_revision)
            old_status = job.status
            try:
                complete(job, now)
            except (IncompleteChecklistError, MissingEvidenceError, InvalidTransitionError) as e:
                logger.job_rejected(job.id, "completion", e.message)
                raise
            job.revision += 1
            logger.job_status_changed(job.id, old_status.value, job.status.value, job.revision)

        prop = self.store.properties.get(job.property_id)
        self.store.notify(
            NotificationType.JOB_COMPLETED,
            f"Job for {prop.name if prop else job.property_id} completed successfully!",
            job.id,
        )
        return job

    def cancel(
        self,
        job_id: str,
        reason: str,
        expected_revision: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> Job:
        with self.store.locked_job(job_id) as job:
            if job.status == JobStatus.CANCELLED:
                return job
            self._check_revision(job, expected_revision)
            old_status = job.status
            cancel(job, reason, now)
            job.revision += 1
            logger.job_status_changed(job.id, old_status.value, job.status.value, job.revision)

        self.store.notify(NotificationType.JOB_CANCELLED, f"Job {job.id} cancelled: {reason}", job.id)
        return job

    def add_note(self, job_id: str, author_id: str, text: str) -> Job:
        author = self.store.get_user(author_id)
        with self.store.locked_job(job_id) as job:
            add_note(job, author.name, text)
            job.revision += 1
        return job

    # ---- issues ----

    def report_issue(
        self,
        job_id: str,
        reporter_id: str,
        type: IssueType,
        item_name: str,
        comment: str = "",
        media_url: str = "",
        checklist_item_id: Optional[str] = None,
    ) -> Issue:
        """
        Record an issue found while working a job. When a checklist item is
        named, the item is linked to the new issue.
        """
        reporter = self.store.get_user(reporter_id)
        if not item_name or not item_name.strip():
            raise ValidationError("Issue item name cannot be empty")

        with self.store.locked_job(job_id) as job:
            item = None
            if checklist_item_id:
                _ensure_open(job, "link issue to")
                item = job.find_item(checklist_item_id)
                if item is None:
                    raise NotFoundError("ChecklistItem", checklist_item_id)

            issue = Issue(
                job_id=job.id,
                booking_id=job.booking_id,
                property_id=job.property_id,
                type=type,
                item_name=item_name.strip(),
                comment=comment,
                media_url=media_url,
                reported_by=reporter.id,
            )
            self.store.add_issue(issue)
            if item is not None:
                item.issue_id = issue.id
                job.revision += 1

        logger.log_with_context(
            logging.INFO, f"Issue reported: {issue.type.value} {issue.item_name}",
            entity_type="job", entity_id=job.id, issue_id=issue.id
        )
        self.store.notify(
            NotificationType.ISSUE_REPORTED,
            f"{issue.type.value.replace('_', ' ').title()}: {issue.item_name}",
            issue.id,
        )
        return issue
