import uuid
from pydantic import BaseModel, Field


class InventoryItem(BaseModel):
    """Stock of one consumable at one property"""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    property_id: str
    category: str = "Consumables"
    name: str = Field(..., min_length=1)
    current_count: int = Field(0, ge=0)
    par_level: int = Field(0, ge=0)
