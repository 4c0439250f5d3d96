"""Tests for BaseService and service inheritance."""

from pathlib import Path

import pytest

from shopledger.domain.errors import NotFoundError
from shopledger.infrastructure.shop import Shop
from shopledger.plugins.event_bus import EventBus
from shopledger.plugins.manager import PluginManager
from shopledger.services.base import BaseService
from shopledger.services.categories import CategoryService
from shopledger.services.customers import CustomerService
from shopledger.services.inventory import InventoryService


class TestBaseService:
    def test_shop_stored(self, shop: Shop) -> None:
        assert BaseService(shop)._shop is shop

    def test_subclass_pattern(self, shop: Shop, shop_root: Path) -> None:
        class MyService(BaseService):
            def where(self) -> str:
                return f"shop at {self._shop.root}"

        assert str(shop_root) in MyService(shop).where()

    def test_failure_maps_error(self) -> None:
        exc = NotFoundError("No item with id 'x'", detail={"id": "x"})
        result = BaseService._failure("get_item", exc)
        assert result.ok is False
        assert result.op == "get_item"
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
        assert result.error.detail == {"id": "x"}

    def test_dispatch_without_bus_is_noop(self, shop: Shop) -> None:
        warnings: list[str] = []
        BaseService(shop)._dispatch_event("post_item_change", {}, warnings)
        assert warnings == []

    def test_dispatch_failure_becomes_warning(self, shop: Shop) -> None:
        shop._event_bus = EventBus(PluginManager())
        warnings: list[str] = []
        BaseService(shop)._dispatch_event("post_nothing", {}, warnings)
        assert warnings == ["Plugin hook post_nothing failed: Unknown hook 'post_nothing'"]


# ---------------------------------------------------------------------------
# Service inheritance
# ---------------------------------------------------------------------------

ALL_SERVICES = [InventoryService, CategoryService, CustomerService]


class TestServiceInheritance:
    @pytest.mark.parametrize("service_cls", ALL_SERVICES)
    def test_extends_base(self, service_cls: type) -> None:
        assert issubclass(service_cls, BaseService)

    @pytest.mark.parametrize("service_cls", ALL_SERVICES)
    def test_accepts_shop(self, service_cls: type, shop: Shop) -> None:
        assert service_cls(shop)._shop is shop
