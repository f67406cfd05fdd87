"""
Issues API - read side; issues are reported through /api/jobs/{id}/issues
"""
from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from ..models.issue import Issue, IssueType
from ..models.user import User
from ..store import OperationsStore
from ..utils.dependencies import get_store, require_capability

router = APIRouter(prefix="/api/issues", tags=["Issues"])


@router.get("", response_model=List[Issue])
@router.get("/", response_model=List[Issue], include_in_schema=False)
def list_issues(
    property_id: Optional[str] = Query(None),
    type: Optional[IssueType] = Query(None),
    current_user: User = Depends(require_capability("view_jobs")),
    store: OperationsStore = Depends(get_store)
):
    issues = store.issues_for_property(property_id) if property_id else sorted(
        store.issues.values(), key=lambda i: i.reported_at
    )
    if type:
        issues = [i for i in issues if i.type == type]
    return issues


@router.get("/{issue_id}", response_model=Issue)
def get_issue(
    issue_id: str,
    current_user: User = Depends(require_capability("view_jobs")),
    store: OperationsStore = Depends(get_store)
):
    return store.get_issue(issue_id)
