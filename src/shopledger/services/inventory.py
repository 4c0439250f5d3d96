"""InventoryService — items, restocking, listing, and the stock summary.

Pipeline for mutations: VALIDATE + PERSIST (catalog) → EVENT → RESPOND.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from shopledger.domain.errors import ShopError
from shopledger.domain.query import INVENTORY_FIELDS, PageSpec, run
from shopledger.services._helpers import page_data, resolve_sort
from shopledger.services.base import BaseService
from shopledger.services.result import ServiceResult


class InventoryService(BaseService):
    """Handles inventory items for the CLI."""

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_item(self, data: Mapping[str, Any]) -> ServiceResult:
        """Add a product or service."""
        op = "add_item"
        warnings: list[str] = []
        try:
            item = self._shop.catalog.add_item(data)
        except ShopError as exc:
            return self._failure(op, exc)

        self._dispatch_event(
            "post_item_change",
            {"action": "added", "item_id": item.id, "item_type": item.type},
            warnings,
        )
        return ServiceResult(ok=True, op=op, data={"item": item.to_json_dict()}, warnings=warnings)

    def update_item(self, item_id: str, changes: Mapping[str, Any]) -> ServiceResult:
        op = "update_item"
        warnings: list[str] = []
        if not changes:
            warnings.append("No changes given; item left as is")
        try:
            item = self._shop.catalog.update_item(item_id, changes)
        except ShopError as exc:
            return self._failure(op, exc)

        self._dispatch_event(
            "post_item_change",
            {"action": "updated", "item_id": item.id, "item_type": item.type},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={"item": item.to_json_dict(), "fields_changed": sorted(changes)},
            warnings=warnings,
        )

    def remove_item(self, item_id: str) -> ServiceResult:
        """Remove an item. Removing an unknown id succeeds with a warning."""
        op = "remove_item"
        warnings: list[str] = []
        existing = self._shop.catalog.find_item(item_id)
        if existing is None:
            warnings.append(f"No item with id {item_id!r}; nothing removed")
            return ServiceResult(
                ok=True, op=op, data={"id": item_id, "removed": False}, warnings=warnings
            )
        try:
            self._shop.catalog.remove_item(item_id)
        except ShopError as exc:
            return self._failure(op, exc)

        self._dispatch_event(
            "post_item_change",
            {"action": "removed", "item_id": item_id, "item_type": existing.type},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": item_id, "name": existing.name, "removed": True},
            warnings=warnings,
        )

    def restock(
        self,
        item_id: str,
        quantity: int,
        *,
        buying_price: float | None = None,
        selling_price: float | None = None,
        apply_immediately: bool = True,
    ) -> ServiceResult:
        """Add stock to a product, optionally with new prices."""
        op = "restock"
        warnings: list[str] = []
        try:
            before = self._shop.catalog.get_item(item_id)
            item = self._shop.catalog.restock(
                item_id,
                quantity,
                buying_price=buying_price,
                selling_price=selling_price,
                apply_immediately=apply_immediately,
            )
        except ShopError as exc:
            return self._failure(op, exc)

        if item.pending_selling_price is not None and not apply_immediately:
            warnings.append(
                f"New selling price {item.pending_selling_price} is pending until "
                f"stock falls to {item.pending_price_activation_quantity}"
            )
        self._dispatch_event(
            "post_item_change",
            {"action": "restocked", "item_id": item.id, "item_type": item.type},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "item": item.to_json_dict(),
                "added": quantity,
                "previous_quantity": before.quantity,
            },
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_item(self, item_id: str) -> ServiceResult:
        op = "get_item"
        try:
            item = self._shop.catalog.get_item(item_id)
        except ShopError as exc:
            return self._failure(op, exc)
        return ServiceResult(ok=True, op=op, data={"item": item.to_json_dict()})

    def list_items(
        self,
        *,
        query: str | None = None,
        category: str | None = None,
        sort: str | None = None,
        direction: str | None = None,
        page: int = 0,
        page_size: int | None = None,
    ) -> ServiceResult:
        """One page of the inventory list: filter → sort → paginate."""
        op = "list_items"
        listing = self._shop.settings.listing
        catalog = self._shop.catalog
        records = catalog.items() if category is None else catalog.items_in_category(category)
        try:
            sort_spec = resolve_sort(sort, direction, INVENTORY_FIELDS)
            result = run(
                records,
                query,
                sort_spec,
                PageSpec(page=page, page_size=page_size or listing.default_page_size),
                INVENTORY_FIELDS,
                candidates=listing.page_size_candidates,
            )
        except ShopError as exc:
            return self._failure(op, exc)

        data = page_data(result, query=query, sort=sort_spec)
        data["category"] = category
        return ServiceResult(ok=True, op=op, data=data)

    def summary(self, *, category: str | None = None) -> ServiceResult:
        """Stock totals over the whole catalog or one category."""
        catalog = self._shop.catalog
        items = None if category is None else catalog.items_in_category(category)
        totals = catalog.summary(items)
        return ServiceResult(
            ok=True,
            op="inventory_summary",
            data={
                **totals.model_dump(),
                "category": category,
                "currency": self._shop.settings.shop.currency,
            },
        )
