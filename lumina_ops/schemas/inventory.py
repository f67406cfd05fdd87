from pydantic import BaseModel

from ..models.inventory import InventoryItem


class AuditRequest(BaseModel):
    observed_count: int


class ReplenishRequest(BaseModel):
    delta: int


class InventoryItemResponse(BaseModel):
    id: str
    property_id: str
    category: str
    name: str
    current_count: int
    par_level: int
    is_low: bool
    utilization_percent: float

    @classmethod
    def from_item(cls, item: InventoryItem) -> "InventoryItemResponse":
        from ..services.inventory_ledger import is_low, utilization_percent
        return cls(
            **item.model_dump(),
            is_low=is_low(item),
            utilization_percent=round(utilization_percent(item), 1),
        )
