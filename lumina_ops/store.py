"""
Operations Store

The single explicit container for all process-lifetime state. It is created
by the application root (``main.create_app``) and handed to services and
routers; there is no module-level instance.

Provides:
- id-keyed collections per entity
- lookups that raise NotFoundError instead of returning None
- per-job and per-inventory-item mutual exclusion
- a bounded, newest-first notification feed
"""

import logging
import threading
from collections import deque
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from .exceptions import NotFoundError
from .models import (
    Booking,
    InventoryItem,
    Issue,
    Job,
    JobStatus,
    Notification,
    NotificationType,
    Property,
    User,
)

logger = logging.getLogger(__name__)


class OperationsStore:
    """In-memory store of users, properties, bookings, jobs, inventory and issues"""

    def __init__(self, notification_limit: int = 10):
        self.users: Dict[str, User] = {}
        self.properties: Dict[str, Property] = {}
        self.bookings: Dict[str, Booking] = {}
        self.jobs: Dict[str, Job] = {}
        self.inventory: Dict[str, InventoryItem] = {}
        self.issues: Dict[str, Issue] = {}
        self.notifications: deque = deque(maxlen=notification_limit)

        # Guards creation of the per-entity locks below
        self._registry_lock = threading.Lock()
        self._job_locks: Dict[str, threading.RLock] = {}
        self._item_locks: Dict[str, threading.RLock] = {}

    # ======== Locking ========

    def _lock_for(self, registry: Dict[str, threading.RLock], key: str) -> threading.RLock:
        with self._registry_lock:
            lock = registry.get(key)
            if lock is None:
                lock = threading.RLock()
                registry[key] = lock
            return lock

    @contextmanager
    def locked_job(self, job_id: str) -> Iterator[Job]:
        """
        Hold the job's lock for the duration of the block.

        Every mutation of a job runs inside this region so that the
        completion check-then-set cannot interleave with checklist or
        media updates from another session.
        """
        job = self.get_job(job_id)
        with self._lock_for(self._job_locks, job_id):
            yield job

    @contextmanager
    def locked_inventory_item(self, item_id: str) -> Iterator[InventoryItem]:
        item = self.get_inventory_item(item_id)
        with self._lock_for(self._item_locks, item_id):
            yield item

    # ======== Lookups ========

    def get_user(self, user_id: str) -> User:
        user = self.users.get(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def get_property(self, property_id: str) -> Property:
        prop = self.properties.get(property_id)
        if prop is None:
            raise NotFoundError("Property", property_id)
        return prop

    def get_booking(self, booking_id: str) -> Booking:
        booking = self.bookings.get(booking_id)
        if booking is None:
            raise NotFoundError("Booking", booking_id)
        return booking

    def get_job(self, job_id: str) -> Job:
        job = self.jobs.get(job_id)
        if job is None:
            raise NotFoundError("Job", job_id)
        return job

    def get_inventory_item(self, item_id: str) -> InventoryItem:
        item = self.inventory.get(item_id)
        if item is None:
            raise NotFoundError("InventoryItem", item_id)
        return item

    def get_issue(self, issue_id: str) -> Issue:
        issue = self.issues.get(issue_id)
        if issue is None:
            raise NotFoundError("Issue", issue_id)
        return issue

    # ======== Inserts ========

    def add_user(self, user: User) -> User:
        self.users[user.id] = user
        return user

    def add_property(self, prop: Property) -> Property:
        self.properties[prop.id] = prop
        return prop

    def add_booking(self, booking: Booking) -> Booking:
        self.bookings[booking.id] = booking
        return booking

    def add_job(self, job: Job) -> Job:
        self.jobs[job.id] = job
        return job

    def add_inventory_item(self, item: InventoryItem) -> InventoryItem:
        self.inventory[item.id] = item
        return item

    def add_issue(self, issue: Issue) -> Issue:
        self.issues[issue.id] = issue
        return issue

    # ======== Queries ========

    def list_jobs(
        self,
        property_id: Optional[str] = None,
        status: Optional[JobStatus] = None,
        assignee_id: Optional[str] = None,
    ) -> List[Job]:
        """Jobs ordered by deadline, optionally filtered"""
        jobs = list(self.jobs.values())
        if property_id:
            jobs = [j for j in jobs if j.property_id == property_id]
        if status:
            jobs = [j for j in jobs if j.status == status]
        if assignee_id:
            jobs = [j for j in jobs if assignee_id in j.assigned_to]
        return sorted(jobs, key=lambda j: j.deadline)

    def inventory_for_property(self, property_id: str) -> List[InventoryItem]:
        return [i for i in self.inventory.values() if i.property_id == property_id]

    def issues_for_property(self, property_id: str) -> List[Issue]:
        return sorted(
            (i for i in self.issues.values() if i.property_id == property_id),
            key=lambda i: i.reported_at,
        )

    def issues_for_job(self, job_id: str) -> List[Issue]:
        return [i for i in self.issues.values() if i.job_id == job_id]

    def job_for_booking(self, booking_id: str) -> Optional[Job]:
        for job in self.jobs.values():
            if job.booking_id == booking_id:
                return job
        return None

    # ======== Notifications ========

    def notify(
        self,
        type: NotificationType,
        message: str,
        entity_id: Optional[str] = None
    ) -> Notification:
        """Push to the feed; the oldest entry drops off past the limit"""
        notification = Notification(type=type, message=message, entity_id=entity_id)
        self.notifications.appendleft(notification)
        logger.debug(f"Notification [{type.value}]: {message}")
        return notification

    def recent_notifications(self) -> List[Notification]:
        return list(self.notifications)
