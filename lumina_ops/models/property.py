import uuid
from typing import Dict
from pydantic import BaseModel, Field, field_validator


def check_par_levels(v: Dict[str, int]) -> Dict[str, int]:
    """Consumable names must be non-blank and levels non-negative"""
    for name, level in v.items():
        if not name.strip():
            raise ValueError("Consumable name cannot be empty")
        if level < 0:
            raise ValueError(f"Par level for {name} cannot be negative")
    return v


class Property(BaseModel):
    """A managed short-let unit with its consumable par levels"""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = Field(..., min_length=1, max_length=255)
    address: str = ""
    # consumable name -> target on-hand quantity
    par_levels: Dict[str, int] = Field(default_factory=dict)

    @field_validator('par_levels')
    @classmethod
    def validate_par_levels(cls, v: Dict[str, int]) -> Dict[str, int]:
        return check_par_levels(v)
