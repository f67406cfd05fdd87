"""
FastAPI dependencies: store access, acting user, capability checks.

The acting user is identified by the ``X-User-Id`` header. This is
identification only: no credential is verified.
"""

from typing import Callable, Optional

from fastapi import Depends, Header, HTTPException, Request, status

from ..config import Settings
from ..models.user import Role, User
from ..services.access_policy import PERMISSION_FLAGS, require_permission
from ..services.advice_service import AdviceService
from ..services.job_lifecycle import JobLifecycleService
from ..store import OperationsStore
from .logging_config import user_id_var


def get_store(request: Request) -> OperationsStore:
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_current_user(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
    store: OperationsStore = Depends(get_store),
) -> User:
    """Resolve the acting user; unknown or deactivated ids are refused"""
    user = store.users.get(x_user_id) if x_user_id else None
    if user is None or not user.active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown or inactive user"
        )
    user_id_var.set(user.id)
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != Role.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin role required"
        )
    return current_user


def require_capability(flag: str) -> Callable[..., User]:
    """Dependency factory: the acting user must hold ``flag``"""
    if flag not in PERMISSION_FLAGS:
        raise ValueError(f"Unknown permission flag: {flag}")

    def dependency(current_user: User = Depends(get_current_user)) -> User:
        require_permission(current_user, flag)
        return current_user

    return dependency


def get_job_service(
    store: OperationsStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> JobLifecycleService:
    return JobLifecycleService(store, settings)


def get_advice_service(settings: Settings = Depends(get_app_settings)) -> AdviceService:
    return AdviceService(settings)
