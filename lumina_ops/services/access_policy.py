"""
Access Policy

Static role -> capability table. Every capability check in the system is a
direct flag lookup on the record returned by ``permissions_for``; nothing is
inherited or computed per user.
"""

from typing import Dict, Union

from ..exceptions import UnknownRoleError, PermissionDeniedError
from ..models.user import Permission, Role, User


PERMISSION_FLAGS = tuple(Permission.model_fields.keys())


_STAFF = dict(
    view_jobs=True,
    update_status=True,
    upload_media=True,
    add_comments=True,
    report_issues=True,
)

PERMISSION_TABLE: Dict[Role, Permission] = {
    Role.ADMIN: Permission(
        **_STAFF, adjust_inventory=True, create_maintenance=True, view_guest_details=True
    ),
    Role.CLEANER: Permission(
        **_STAFF, adjust_inventory=False, create_maintenance=False, view_guest_details=False
    ),
    Role.HANDYMAN: Permission(
        **_STAFF, adjust_inventory=False, create_maintenance=True, view_guest_details=False
    ),
    Role.CONTRACTOR: Permission(
        **_STAFF, adjust_inventory=False, create_maintenance=False, view_guest_details=False
    ),
}

# Adding a Role without a table row must fail at import, not at lookup time.
_uncovered = set(Role) - set(PERMISSION_TABLE)
if _uncovered:
    raise RuntimeError(
        "Roles missing from PERMISSION_TABLE: " + ", ".join(sorted(r.value for r in _uncovered))
    )


def parse_role(role: Union[Role, str]) -> Role:
    """Accept a Role or its string value"""
    if isinstance(role, Role):
        return role
    try:
        return Role(str(role).upper())
    except ValueError:
        raise UnknownRoleError(role)


def permissions_for(role: Union[Role, str]) -> Permission:
    """Return the immutable capability record for ``role``"""
    return PERMISSION_TABLE[parse_role(role)]


def has_permission(user: User, flag: str) -> bool:
    """
    Direct flag lookup for a user.
    Deactivated users hold no capability at all.
    """
    if flag not in PERMISSION_FLAGS:
        raise ValueError(f"Unknown permission flag: {flag}")
    if not user.active:
        return False
    return getattr(permissions_for(user.role), flag)


def require_permission(user: User, flag: str) -> None:
    """Raise PermissionDeniedError unless ``user`` holds ``flag``"""
    if not has_permission(user, flag):
        raise PermissionDeniedError(user.id, flag)
