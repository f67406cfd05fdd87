"""
Inventory API - stock health, audits and replenishment
"""
from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from ..models.user import User
from ..schemas.inventory import AuditRequest, InventoryItemResponse, ReplenishRequest
from ..services.inventory_ledger import InventoryService, low_stock_items
from ..store import OperationsStore
from ..utils.dependencies import get_store, require_capability

router = APIRouter(prefix="/api/inventory", tags=["Inventory"])


@router.get("", response_model=List[InventoryItemResponse])
@router.get("/", response_model=List[InventoryItemResponse], include_in_schema=False)
def list_inventory(
    property_id: str = Query(...),
    current_user: User = Depends(require_capability("view_jobs")),
    store: OperationsStore = Depends(get_store)
):
    rows = InventoryService(store).overview(property_id)
    return [InventoryItemResponse.from_item(row["item"]) for row in rows]


@router.get("/low-stock", response_model=List[InventoryItemResponse])
def list_low_stock(
    property_id: Optional[str] = Query(None),
    current_user: User = Depends(require_capability("view_jobs")),
    store: OperationsStore = Depends(get_store)
):
    items = (
        store.inventory_for_property(store.get_property(property_id).id)
        if property_id else list(store.inventory.values())
    )
    return [InventoryItemResponse.from_item(i) for i in low_stock_items(items)]


@router.post("/{item_id}/audit", response_model=InventoryItemResponse)
def record_audit(
    item_id: str,
    data: AuditRequest,
    current_user: User = Depends(require_capability("adjust_inventory")),
    store: OperationsStore = Depends(get_store)
):
    item = InventoryService(store).record_audit(item_id, data.observed_count)
    return InventoryItemResponse.from_item(item)


@router.post("/{item_id}/replenish", response_model=InventoryItemResponse)
def replenish(
    item_id: str,
    data: ReplenishRequest,
    current_user: User = Depends(require_capability("adjust_inventory")),
    store: OperationsStore = Depends(get_store)
):
    item = InventoryService(store).replenish(item_id, data.delta)
    return InventoryItemResponse.from_item(item)
