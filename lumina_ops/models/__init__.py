# Models package
from .user import User, Role, Permission
from .property import Property
from .booking import Booking
from .job import Job, JobStatus, JobType, Priority, ChecklistItem, TERMINAL_STATUSES
from .inventory import InventoryItem
from .issue import Issue, IssueType
from .notification import Notification, NotificationType

__all__ = [
    "User", "Role", "Permission",
    "Property",
    "Booking",
    "Job", "JobStatus", "JobType", "Priority", "ChecklistItem", "TERMINAL_STATUSES",
    "InventoryItem",
    "Issue", "IssueType",
    "Notification", "NotificationType",
]
