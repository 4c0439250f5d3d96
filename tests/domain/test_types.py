"""Tests for domain enums."""

from shopledger.domain.types import ItemKind, OrderStatus, SortDirection


class TestItemKind:
    def test_values(self) -> None:
        assert {k.value for k in ItemKind} == {"product", "service"}

    def test_compares_to_string(self) -> None:
        assert ItemKind.PRODUCT == "product"


class TestSortDirection:
    def test_flipped(self) -> None:
        assert SortDirection.ASC.flipped() is SortDirection.DESC
        assert SortDirection.DESC.flipped() is SortDirection.ASC


class TestOrderStatus:
    def test_default_status_present(self) -> None:
        assert OrderStatus("pending") is OrderStatus.PENDING
