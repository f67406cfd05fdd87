"""
Tests for the Inventory Ledger

These tests verify:
- Audit overwrites and rejects negative / non-integer counts
- Replenishment adds positive deltas only
- Low-stock and utilization derivation
- Par level maintenance through the service
"""

import pytest

from lumina_ops.exceptions import NotFoundError, ValidationError
from lumina_ops.models import InventoryItem, NotificationType, Property
from lumina_ops.services import inventory_ledger as ledger
from lumina_ops.services.inventory_ledger import InventoryService


def make_item(current_count=12, par_level=10) -> InventoryItem:
    return InventoryItem(
        property_id="p1", category="Linen", name="Toilet Roll",
        current_count=current_count, par_level=par_level
    )


def item_named(store, property_id, name) -> InventoryItem:
    return next(i for i in store.inventory_for_property(property_id) if i.name == name)


class TestRecordAudit:

    def test_audit_overwrites_count(self):
        item = make_item(current_count=12)
        ledger.record_audit(item, 5)
        assert item.current_count == 5

    def test_negative_audit_is_rejected_and_count_unchanged(self):
        item = make_item(current_count=12)
        with pytest.raises(ValidationError):
            ledger.record_audit(item, -3)
        assert item.current_count == 12

    def test_zero_is_a_valid_audit(self):
        item = make_item()
        ledger.record_audit(item, 0)
        assert item.current_count == 0

    @pytest.mark.parametrize("value", [2.5, "7", None, True])
    def test_non_integer_audit_is_rejected(self, value):
        item = make_item(current_count=12)
        with pytest.raises(ValidationError):
            ledger.record_audit(item, value)
        assert item.current_count == 12


class TestReplenish:

    def test_replenish_adds_delta(self):
        item = make_item(current_count=3)
        ledger.replenish(item, 7)
        assert item.current_count == 10

    @pytest.mark.parametrize("delta", [0, -1])
    def test_non_positive_delta_is_rejected(self, delta):
        item = make_item(current_count=3)
        with pytest.raises(ValidationError):
            ledger.replenish(item, delta)
        assert item.current_count == 3


class TestStockHealth:

    def test_below_par_is_low(self):
        assert ledger.is_low(make_item(current_count=4, par_level=10))

    def test_at_par_is_not_low(self):
        assert not ledger.is_low(make_item(current_count=10, par_level=10))

    def test_zero_par_is_never_low(self):
        item = make_item(current_count=0, par_level=0)
        assert not ledger.is_low(item)
        assert ledger.utilization_percent(item) == 100.0

    def test_utilization_is_clamped(self):
        assert ledger.utilization_percent(make_item(current_count=25, par_level=10)) == 100.0
        assert ledger.utilization_percent(make_item(current_count=5, par_level=20)) == 25.0

    def test_low_stock_items_filters(self):
        low = make_item(current_count=1, par_level=10)
        ok = make_item(current_count=10, par_level=10)
        assert ledger.low_stock_items([low, ok]) == [low]

    def test_par_level_for_untracked_consumable(self):
        prop = Property(name="Loft", par_levels={"Coffee Pods": 20})
        assert ledger.par_level_for(prop, "Coffee Pods") == 20
        with pytest.raises(NotFoundError):
            ledger.par_level_for(prop, "Soap")


class TestInventoryService:

    def test_onboarding_creates_empty_stock_lines(self, store):
        items = store.inventory_for_property("p1")
        by_name = {i.name: i for i in items}

        assert set(by_name) == {"Toilet Roll", "Coffee Pods"}
        assert by_name["Toilet Roll"].category == "Linen"
        assert by_name["Coffee Pods"].category == "Consumables"
        assert all(i.current_count == 0 for i in items)

    def test_audit_below_par_notifies_once(self, store):
        service = InventoryService(store)
        item = item_named(store, "p1", "Coffee Pods")
        service.record_audit(item.id, 25)

        service.record_audit(item.id, 5)
        service.record_audit(item.id, 4)

        low_alerts = [
            n for n in store.recent_notifications() if n.type == NotificationType.LOW_STOCK
        ]
        assert len(low_alerts) == 1
        assert low_alerts[0].entity_id == item.id

    def test_audit_unknown_item(self, store):
        with pytest.raises(NotFoundError):
            InventoryService(store).record_audit("nope", 3)

    def test_set_par_level_updates_matching_items(self, store):
        service = InventoryService(store)
        service.set_par_level("p1", "Toilet Roll", 14)

        assert store.get_property("p1").par_levels["Toilet Roll"] == 14
        assert item_named(store, "p1", "Toilet Roll").par_level == 14
        # Other properties keep their own levels
        assert item_named(store, "p2", "Toilet Roll").par_level == 8

    def test_set_par_level_rejects_negative(self, store):
        with pytest.raises(ValidationError):
            InventoryService(store).set_par_level("p1", "Toilet Roll", -1)
        assert store.get_property("p1").par_levels["Toilet Roll"] == 10

    def test_set_par_level_for_untracked_consumable(self, store):
        with pytest.raises(NotFoundError):
            InventoryService(store).set_par_level("p1", "Shampoo", 4)

    def test_track_consumable(self, store):
        service = InventoryService(store)
        item = service.track_consumable("p1", " Shampoo ", 6, category="Toiletries")

        assert item.name == "Shampoo"
        assert store.get_property("p1").par_levels["Shampoo"] == 6
        with pytest.raises(ValidationError):
            service.track_consumable("p1", "Shampoo", 6)

    def test_overview_lists_low_stock_first(self, store):
        service = InventoryService(store)
        service.record_audit(item_named(store, "p1", "Toilet Roll").id, 10)
        service.record_audit(item_named(store, "p1", "Coffee Pods").id, 5)

        rows = service.overview("p1")

        assert [r["item"].name for r in rows] == ["Coffee Pods", "Toilet Roll"]
        assert rows[0]["is_low"] is True
        assert rows[0]["utilization_percent"] == 25.0
        assert rows[1]["utilization_percent"] == 100.0


# Entry point for running tests
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
