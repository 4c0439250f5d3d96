"""Tests for InventoryService."""

from __future__ import annotations

import pytest

from shopledger.infrastructure.shop import Shop
from shopledger.services.inventory import InventoryService
from tests.conftest import product, service


@pytest.fixture
def svc(shop: Shop) -> InventoryService:
    return InventoryService(shop)


def _add(svc: InventoryService, data: dict[str, object]) -> str:
    result = svc.add_item(data)
    assert result.ok, result.error
    return str(result.data["item"]["id"])


class TestAddItem:
    def test_success(self, svc: InventoryService) -> None:
        result = svc.add_item(product())
        assert result.ok
        assert result.op == "add_item"
        assert result.data["item"]["stockValue"] == 1600
        assert result.data["item"]["type"] == "product"

    def test_validation_failure(self, svc: InventoryService) -> None:
        result = svc.add_item(product(buying_price=200))
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "PRICE_ORDER"


class TestUpdateItem:
    def test_success(self, svc: InventoryService) -> None:
        item_id = _add(svc, product())
        result = svc.update_item(item_id, {"quantity": 2, "measuring_unit": "bag"})
        assert result.ok
        assert result.data["item"]["quantity"] == 2
        assert result.data["fields_changed"] == ["measuring_unit", "quantity"]

    def test_no_changes_warns(self, svc: InventoryService) -> None:
        item_id = _add(svc, product())
        result = svc.update_item(item_id, {})
        assert result.ok
        assert result.warnings == ["No changes given; item left as is"]

    def test_not_found(self, svc: InventoryService) -> None:
        result = svc.update_item("itm_0000000000", {"quantity": 1})
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"


class TestRemoveItem:
    def test_success(self, svc: InventoryService) -> None:
        item_id = _add(svc, product())
        result = svc.remove_item(item_id)
        assert result.ok
        assert result.data == {"id": item_id, "name": "Rice", "removed": True}
        assert not svc.get_item(item_id).ok

    def test_unknown_warns(self, svc: InventoryService) -> None:
        result = svc.remove_item("itm_0000000000")
        assert result.ok
        assert result.data["removed"] is False
        assert len(result.warnings) == 1


class TestRestock:
    def test_success(self, svc: InventoryService) -> None:
        item_id = _add(svc, product())
        result = svc.restock(item_id, 5)
        assert result.ok
        assert result.data["added"] == 5
        assert result.data["previous_quantity"] == 20
        assert result.data["item"]["quantity"] == 25
        assert result.warnings == []

    def test_pending_price_warns(self, svc: InventoryService) -> None:
        item_id = _add(svc, product())
        result = svc.restock(item_id, 5, selling_price=120, apply_immediately=False)
        assert result.ok
        assert result.data["item"]["pendingSellingPrice"] == 120
        assert "pending" in result.warnings[0]

    def test_service_rejected(self, svc: InventoryService) -> None:
        item_id = _add(svc, service())
        result = svc.restock(item_id, 5)
        assert result.error is not None
        assert result.error.code == "NOT_RESTOCKABLE"

    def test_unknown(self, svc: InventoryService) -> None:
        assert not svc.restock("itm_0000000000", 1).ok


class TestListItems:
    def test_filter_sort_paginate(self, svc: InventoryService) -> None:
        for n in range(12):
            _add(svc, product(f"Item {n:02d}", quantity=n))
        _add(svc, service())
        result = svc.list_items(query="item", sort="quantity", direction="desc", page_size=5)
        assert result.ok
        data = result.data
        assert data["total"] == 12
        assert data["number_of_pages"] == 3
        assert data["page_size_options"] == [5, 10]
        assert [i["quantity"] for i in data["items"]] == [11, 10, 9, 8, 7]
        assert data["sort"] == {"key": "quantity", "direction": "desc"}

    def test_category_scope(self, svc: InventoryService) -> None:
        _add(svc, product())
        _add(svc, product("Soda", category="Drinks"))
        result = svc.list_items(category="drinks")
        assert [i["name"] for i in result.data["items"]] == ["Soda"]
        assert result.data["category"] == "drinks"

    def test_default_page_size_reset(self, svc: InventoryService) -> None:
        _add(svc, product())
        result = svc.list_items()
        assert result.data["page_size"] == 5

    def test_unknown_sort_key(self, svc: InventoryService) -> None:
        result = svc.list_items(sort="colour")
        assert result.error is not None
        assert result.error.code == "UNKNOWN_SORT_KEY"

    def test_negative_page(self, svc: InventoryService) -> None:
        _add(svc, product())
        result = svc.list_items(page=-1, page_size=5)
        assert result.error is not None
        assert result.error.code == "INVALID_PAGE"


class TestSummary:
    def test_totals(self, svc: InventoryService) -> None:
        _add(svc, product())
        _add(svc, service())
        result = svc.summary()
        assert result.op == "inventory_summary"
        assert result.data["total_items"] == 2
        assert result.data["total_stock_value"] == 1600
        assert result.data["estimated_sales"] == 2000
        assert result.data["currency"] == "KES"

    def test_category(self, svc: InventoryService) -> None:
        _add(svc, product())
        _add(svc, product("Soda", category="Drinks", quantity=1))
        result = svc.summary(category="Drinks")
        assert result.data["total_items"] == 1
        assert result.data["category"] == "Drinks"
