from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional

from ..models.user import Role


class UserCreate(BaseModel):
    """Onboard a staff member"""
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    role: Role
    whatsapp: Optional[str] = Field(None, max_length=20)
    trade_tags: List[str] = Field(default_factory=list)
    rate: Optional[float] = Field(None, ge=0, description="Hourly rate")
    score: Optional[float] = Field(None, ge=0, le=5)
