# Services package
from .access_policy import permissions_for, has_permission, require_permission, PERMISSION_TABLE
from .job_lifecycle import JobLifecycleService, is_overdue, DEFAULT_CHECKLIST_TEMPLATE
from .inventory_ledger import InventoryService, is_low, utilization_percent
from .advice_service import AdviceService, AdviceResult, ADVICE_FALLBACK, SUMMARY_FALLBACK
from .dashboard_service import job_stats, jobs_for_user, overdue_jobs

__all__ = [
    "permissions_for", "has_permission", "require_permission", "PERMISSION_TABLE",
    "JobLifecycleService", "is_overdue", "DEFAULT_CHECKLIST_TEMPLATE",
    "InventoryService", "is_low", "utilization_percent",
    "AdviceService", "AdviceResult", "ADVICE_FALLBACK", "SUMMARY_FALLBACK",
    "job_stats", "jobs_for_user", "overdue_jobs",
]
