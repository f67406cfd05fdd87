"""
Users API - staff onboarding and role permissions
"""
import logging
from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from ..models.user import Permission, Role, User
from ..schemas.user import UserCreate
from ..services.access_policy import permissions_for
from ..store import OperationsStore
from ..utils.dependencies import get_current_user, get_store, require_admin
from ..utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("", response_model=List[User])
@router.get("/", response_model=List[User], include_in_schema=False)
def list_users(
    role: Optional[Role] = Query(None),
    include_inactive: bool = Query(False),
    current_user: User = Depends(get_current_user),
    store: OperationsStore = Depends(get_store)
):
    users = list(store.users.values())
    if role:
        users = [u for u in users if u.role == role]
    if not include_inactive:
        users = [u for u in users if u.active]
    return sorted(users, key=lambda u: u.name)


@router.get("/me", response_model=User)
def get_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.get("/roles/{role}/permissions", response_model=Permission)
def get_role_permissions(role: str):
    """Capability record of a role (unknown roles -> 400)"""
    return permissions_for(role)


@router.get("/{user_id}", response_model=User)
def get_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    store: OperationsStore = Depends(get_store)
):
    return store.get_user(user_id)


@router.post("", response_model=User, status_code=201)
@router.post("/", response_model=User, status_code=201, include_in_schema=False)
def create_user(
    data: UserCreate,
    current_user: User = Depends(require_admin),
    store: OperationsStore = Depends(get_store)
):
    user = store.add_user(User(**data.model_dump()))
    logger.log_with_context(
        logging.INFO, f"User onboarded: {user.name} ({user.role.value})",
        entity_type="user", entity_id=user.id
    )
    return user


@router.post("/{user_id}/deactivate", response_model=User)
def deactivate_user(
    user_id: str,
    current_user: User = Depends(require_admin),
    store: OperationsStore = Depends(get_store)
):
    """Users are deactivated, never deleted"""
    user = store.get_user(user_id)
    user.active = False
    logger.log_with_context(logging.INFO, f"User deactivated: {user.name}", entity_type="user", entity_id=user.id)
    return user
