from pydantic import BaseModel, Field, field_validator
from typing import Dict

from ..models.property import check_par_levels


class PropertyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    address: str = ""
    par_levels: Dict[str, int] = Field(default_factory=dict)
    # consumable name -> category, defaults to "Consumables"
    categories: Dict[str, str] = Field(default_factory=dict)

    @field_validator('par_levels')
    @classmethod
    def validate_par_levels(cls, v: Dict[str, int]) -> Dict[str, int]:
        return check_par_levels(v)


class ParLevelUpdate(BaseModel):
    level: int


class ConsumableCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    par_level: int
    category: str = "Consumables"


class PropertySummaryResponse(BaseModel):
    property_id: str
    summary: str
    fallback: bool
