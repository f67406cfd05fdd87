"""
Staff users, their roles and capability flags
"""
import uuid
import enum
from typing import List, Optional
from pydantic import BaseModel, Field, computed_field


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    CLEANER = "CLEANER"
    HANDYMAN = "HANDYMAN"
    CONTRACTOR = "CONTRACTOR"


class Permission(BaseModel):
    """Fixed capability record for a role"""
    view_jobs: bool
    update_status: bool
    upload_media: bool
    add_comments: bool
    report_issues: bool
    adjust_inventory: bool
    create_maintenance: bool
    view_guest_details: bool

    class Config:
        frozen = True


class User(BaseModel):
    """
    A staff member. Permissions are never stored per user: they are
    looked up from the role, so two users with the same role always
    hold the same capabilities.
    """
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255)
    role: Role
    active: bool = True

    # Contact / trade metadata
    whatsapp: Optional[str] = None
    trade_tags: List[str] = Field(default_factory=list)
    rate: Optional[float] = Field(None, ge=0)
    score: Optional[float] = Field(None, ge=0, le=5)

    @computed_field
    @property
    def permissions(self) -> Permission:
        from ..services.access_policy import permissions_for
        return permissions_for(self.role)

    def __repr__(self):
        return f"<User {self.name} - {self.role.value}>"
