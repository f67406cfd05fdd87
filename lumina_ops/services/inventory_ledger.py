"""
Inventory Ledger

Tracks consumable stock per property against par levels.

Key rules:
- counts and par levels are non-negative integers
- "low stock" is derived on every read (current_count < par_level)
- a par level of 0 counts as fully stocked
"""

import logging
from typing import Dict, List, Optional

from ..exceptions import NotFoundError, ValidationError
from ..models import InventoryItem, NotificationType, Property
from ..store import OperationsStore
from ..utils.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_CATEGORY = "Consumables"


def _require_count(value, field: str, allow_zero: bool = True) -> int:
    # bool is an int subclass; a flag is never a count
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer")
    if value < 0 or (value == 0 and not allow_zero):
        qualifier = "non-negative" if allow_zero else "positive"
        raise ValidationError(f"{field} must be {qualifier}, got {value}")
    return value


# ======== Pure operations ========

def record_audit(item: InventoryItem, observed_count: int) -> InventoryItem:
    """Overwrite the count with what was physically counted"""
    item.current_count = _require_count(observed_count, "observed_count")
    return item


def replenish(item: InventoryItem, delta: int) -> InventoryItem:
    item.current_count += _require_count(delta, "delta", allow_zero=False)
    return item


def is_low(item: InventoryItem) -> bool:
    return item.current_count < item.par_level


def utilization_percent(item: InventoryItem) -> float:
    """Stock as a percentage of par, clamped to [0, 100]"""
    if item.par_level == 0:
        return 100.0
    percent = item.current_count / item.par_level * 100
    return max(0.0, min(100.0, percent))


def low_stock_items(items: List[InventoryItem]) -> List[InventoryItem]:
    return [item for item in items if is_low(item)]


def par_level_for(prop: Property, consumable: str) -> int:
    """Par level of a tracked consumable; untracked names are an error"""
    if consumable not in prop.par_levels:
        raise NotFoundError("Consumable", f"{consumable} at {prop.id}")
    return prop.par_levels[consumable]


def build_inventory_for_property(
    prop: Property,
    categories: Optional[Dict[str, str]] = None,
) -> List[InventoryItem]:
    """One empty stock line per tracked consumable"""
    categories = categories or {}
    return [
        InventoryItem(
            property_id=prop.id,
            category=categories.get(name, DEFAULT_CATEGORY),
            name=name,
            current_count=0,
            par_level=level,
        )
        for name, level in prop.par_levels.items()
    ]


# ======== Store-backed service ========

class InventoryService:
    """
    Service for inventory at managed properties.

    Key responsibilities:
    - Onboard properties together with their stock lines
    - Apply audits and replenishments under a per-item lock
    - Keep item par levels in step with the property's par levels
    - Raise a low-stock notification when an audit drops below par
    """

    def __init__(self, store: OperationsStore):
        self.store = store

    def onboard_property(
        self,
        prop: Property,
        categories: Optional[Dict[str, str]] = None
    ) -> List[InventoryItem]:
        self.store.add_property(prop)
        items = build_inventory_for_property(prop, categories)
        for item in items:
            self.store.add_inventory_item(item)
        logger.info(f"Onboarded property {prop.name} with {len(items)} stock lines")
        return items

    def record_audit(self, item_id: str, observed_count: int) -> InventoryItem:
        with self.store.locked_inventory_item(item_id) as item:
            old_count = item.current_count
            was_low = is_low(item)
            record_audit(item, observed_count)
            logger.stock_adjusted(item.id, item.name, old_count, item.current_count, "audit")

        if is_low(item) and not was_low:
            self.store.notify(
                NotificationType.LOW_STOCK,
                f"{item.name} below par ({item.current_count}/{item.par_level})",
                item.id,
            )
        return item

    def replenish(self, item_id: str, delta: int) -> InventoryItem:
        with self.store.locked_inventory_item(item_id) as item:
            old_count = item.current_count
            replenish(item, delta)
            logger.stock_adjusted(item.id, item.name, old_count, item.current_count, "replenish")
        return item

    def set_par_level(self, property_id: str, consumable: str, level: int) -> Property:
        """
        Change a par level. Tracked consumables only; matching stock
        lines at the property follow the new level.
        """
        prop = self.store.get_property(property_id)
        _require_count(level, "par_level")
        par_level_for(prop, consumable)

        prop.par_levels[consumable] = level
        for item in self.store.inventory_for_property(property_id):
            if item.name == consumable:
                with self.store.locked_inventory_item(item.id):
                    item.par_level = level

        logger.log_with_context(
            logging.INFO, f"Par level for {consumable} set to {level}",
            entity_type="property", entity_id=property_id
        )
        return prop

    def track_consumable(
        self,
        property_id: str,
        consumable: str,
        level: int,
        category: str = DEFAULT_CATEGORY
    ) -> InventoryItem:
        """Start tracking a new consumable at a property"""
        prop = self.store.get_property(property_id)
        _require_count(level, "par_level")
        consumable = consumable.strip()
        if not consumable:
            raise ValidationError("Consumable name cannot be empty")
        if consumable in prop.par_levels:
            raise ValidationError(f"{consumable} is already tracked at {prop.name}")

        prop.par_levels[consumable] = level
        item = self.store.add_inventory_item(InventoryItem(
            property_id=prop.id,
            category=category,
            name=consumable,
            current_count=0,
            par_level=level,
        ))
        logger.info(f"Tracking {consumable} at {prop.name} (par {level})")
        return item

    def overview(self, property_id: str) -> List[dict]:
        """Stock lines with derived health, low stock first"""
        self.store.get_property(property_id)
        rows = [
            {
                "item": item,
                "is_low": is_low(item),
                "utilization_percent": round(utilization_percent(item), 1),
            }
            for item in self.store.inventory_for_property(property_id)
        ]
        rows.sort(key=lambda r: (not r["is_low"], r["item"].name))
        return rows
