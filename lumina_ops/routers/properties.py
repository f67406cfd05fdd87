"""
Properties API - onboarding, par levels and AI status summary
"""
from fastapi import APIRouter, Depends
from typing import List

from ..models.property import Property
from ..models.user import User
from ..schemas.inventory import InventoryItemResponse
from ..schemas.property import ConsumableCreate, ParLevelUpdate, PropertyCreate, PropertySummaryResponse
from ..services.advice_service import AdviceService
from ..services.inventory_ledger import InventoryService
from ..store import OperationsStore
from ..utils.dependencies import (
    get_advice_service,
    get_current_user,
    get_store,
    require_admin,
    require_capability,
)

router = APIRouter(prefix="/api/properties", tags=["Properties"])


@router.get("", response_model=List[Property])
@router.get("/", response_model=List[Property], include_in_schema=False)
def list_properties(
    current_user: User = Depends(get_current_user),
    store: OperationsStore = Depends(get_store)
):
    return sorted(store.properties.values(), key=lambda p: p.name)


@router.post("", response_model=Property, status_code=201)
@router.post("/", response_model=Property, status_code=201, include_in_schema=False)
def create_property(
    data: PropertyCreate,
    current_user: User = Depends(require_admin),
    store: OperationsStore = Depends(get_store)
):
    prop = Property(name=data.name, address=data.address, par_levels=data.par_levels)
    InventoryService(store).onboard_property(prop, data.categories)
    return prop


@router.get("/{property_id}", response_model=Property)
def get_property(
    property_id: str,
    current_user: User = Depends(get_current_user),
    store: OperationsStore = Depends(get_store)
):
    return store.get_property(property_id)


@router.put("/{property_id}/par-levels/{consumable}", response_model=Property)
def update_par_level(
    property_id: str,
    consumable: str,
    data: ParLevelUpdate,
    current_user: User = Depends(require_capability("adjust_inventory")),
    store: OperationsStore = Depends(get_store)
):
    return InventoryService(store).set_par_level(property_id, consumable, data.level)


@router.post("/{property_id}/consumables", response_model=InventoryItemResponse, status_code=201)
def track_consumable(
    property_id: str,
    data: ConsumableCreate,
    current_user: User = Depends(require_capability("adjust_inventory")),
    store: OperationsStore = Depends(get_store)
):
    item = InventoryService(store).track_consumable(
        property_id, data.name, data.par_level, data.category
    )
    return InventoryItemResponse.from_item(item)


@router.get("/{property_id}/summary", response_model=PropertySummaryResponse)
def property_summary(
    property_id: str,
    current_user: User = Depends(require_capability("view_jobs")),
    store: OperationsStore = Depends(get_store),
    advice: AdviceService = Depends(get_advice_service)
):
    """Best-effort AI summary; falls back to a fixed message on any failure"""
    store.get_property(property_id)
    result = advice.property_summary(
        property_id,
        store.list_jobs(property_id=property_id),
        store.issues_for_property(property_id),
    )
    return {"property_id": property_id, "summary": result.text, "fallback": result.fallback}
