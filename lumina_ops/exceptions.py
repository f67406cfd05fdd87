"""
Domain errors for the operations core.

All of them are local, synchronous and recoverable. The HTTP layer maps
each ``code`` to a status in ``main.register_exception_handlers``.
"""

from typing import List, Optional


class OperationsError(Exception):
    """Base class for every error raised by the operations core"""

    code = "operations_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.code, "detail": self.message}


class ValidationError(OperationsError):
    """Malformed input, e.g. a negative stock count"""

    code = "validation_error"


class NotFoundError(OperationsError):
    """Unknown id or untracked consumable"""

    code = "not_found"

    def __init__(self, entity: str, key: str):
        super().__init__(f"{entity} not found: {key}")
        self.entity = entity
        self.key = key


class IncompleteChecklistError(OperationsError):
    """Job completion attempted while required checklist items are still open"""

    code = "incomplete_checklist"

    def __init__(self, missing_item_ids: List[str]):
        super().__init__(
            "Required checklist items not completed: " + ", ".join(missing_item_ids)
        )
        self.missing_item_ids = list(missing_item_ids)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["missing_item_ids"] = self.missing_item_ids
        return data


class MissingEvidenceError(OperationsError):
    """Job completion attempted without any media attached"""

    code = "missing_evidence"

    def __init__(self, message: str = "At least one photo is required as evidence"):
        super().__init__(message)


class UnknownRoleError(OperationsError):
    code = "unknown_role"

    def __init__(self, role):
        super().__init__(f"Unknown role: {role}")
        self.role = role


class InvalidTransitionError(OperationsError):
    """Operation not allowed in the job's current status"""

    code = "invalid_transition"

    def __init__(self, job_id: str, status: str, action: str):
        super().__init__(f"Cannot {action} job {job_id} in status {status}")
        self.job_id = job_id
        self.status = status
        self.action = action


class ConflictError(OperationsError):
    """Optimistic revision check failed"""

    code = "conflict"

    def __init__(self, job_id: str, expected: int, actual: int):
        super().__init__(
            f"Job {job_id} was modified concurrently (expected revision {expected}, found {actual})"
        )
        self.expected = expected
        self.actual = actual


class PermissionDeniedError(OperationsError):
    code = "permission_denied"

    def __init__(self, user_id: Optional[str], permission: str):
        super().__init__(f"User {user_id} lacks permission: {permission}")
        self.user_id = user_id
        self.permission = permission
