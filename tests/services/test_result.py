"""Tests for ServiceResult and ServiceError."""

import json

import pytest
from pydantic import ValidationError

from shopledger.domain.errors import NotFoundError, ShopError
from shopledger.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success_construction(self) -> None:
        result = ServiceResult(ok=True, op="add_item", data={"id": "itm_0000000001"})
        assert result.ok is True
        assert result.op == "add_item"
        assert result.data == {"id": "itm_0000000001"}
        assert result.warnings == []
        assert result.error is None

    def test_error_construction(self) -> None:
        error = ServiceError(code="NOT_FOUND", message="No item")
        result = ServiceResult(ok=False, op="get_item", error=error)
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_json_serialization(self) -> None:
        result = ServiceResult(
            ok=True, op="list_items", data={"total": 3}, warnings=["2 items have no category"]
        )
        parsed = json.loads(result.model_dump_json())
        assert parsed["ok"] is True
        assert parsed["data"]["total"] == 3
        assert parsed["warnings"] == ["2 items have no category"]
        assert parsed["error"] is None

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="test")
        with pytest.raises(ValidationError):
            result.ok = False  # type: ignore[misc]


class TestFailureConstructors:
    def test_failure_keeps_detail(self) -> None:
        result = ServiceResult.failure(
            "lookup_customer", "NOT_FOUND", "No customer matches", phone="0712345678"
        )
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
        assert result.error.detail == {"phone": "0712345678"}

    def test_from_exception_uses_error_code(self) -> None:
        exc = NotFoundError("No item itm_9", detail={"id": "itm_9"})
        result = ServiceResult.from_exception("remove_item", exc)
        assert result.op == "remove_item"
        assert result.error == ServiceError(
            code="NOT_FOUND", message="No item itm_9", detail={"id": "itm_9"}
        )

    def test_from_exception_custom_code(self) -> None:
        exc = ShopError("Selling below cost", code="PRICE_ORDER")
        assert ServiceResult.from_exception("add_item", exc).error.code == "PRICE_ORDER"


class TestExitCode:
    def test_success_is_zero(self) -> None:
        assert ServiceResult(ok=True, op="list_items").exit_code == 0

    def test_failure_is_one(self) -> None:
        assert ServiceResult.failure("get_item", "NOT_FOUND", "No item").exit_code == 1


class TestRecordIds:
    @pytest.mark.parametrize("key", ["item", "customer", "category"])
    def test_single_record(self, key: str) -> None:
        result = ServiceResult(ok=True, op="get", data={key: {"id": "x_1", "name": "X"}})
        assert result.record_id == "x_1"

    def test_no_record(self) -> None:
        result = ServiceResult(ok=True, op="remove_item", data={"id": "itm_1", "removed": True})
        assert result.record_id is None
        assert result.record_ids == []

    def test_list_in_display_order(self) -> None:
        rows = [{"id": "itm_2"}, {"id": "itm_1"}, {"name": "no id"}]
        result = ServiceResult(ok=True, op="list_items", data={"items": rows, "total": 3})
        assert result.record_ids == ["itm_2", "itm_1"]

    def test_categories_list(self) -> None:
        data = {"categories": [{"id": "cat_1"}, {"id": "cat_2"}]}
        result = ServiceResult(ok=True, op="list_categories", data=data)
        assert result.record_ids == ["cat_1", "cat_2"]

    def test_empty_list(self) -> None:
        result = ServiceResult(ok=True, op="list_items", data={"items": [], "total": 0})
        assert result.record_ids == []


class TestServiceError:
    def test_with_detail(self) -> None:
        error = ServiceError(
            code="DUPLICATE_PHONE",
            message="Phone taken",
            detail={"existing_id": "cus_0000000001"},
        )
        assert error.detail["existing_id"] == "cus_0000000001"

    def test_default_detail(self) -> None:
        assert ServiceError(code="E001", message="bad").detail == {}

    def test_from_exception(self) -> None:
        error = ServiceError.from_exception(ShopError("Disk full"))
        assert error.code == "SHOP_ERROR"
        assert error.message == "Disk full"
        assert error.detail == {}
