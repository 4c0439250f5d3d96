"""Aggregate calculations over inventory items.

Pure functions: nothing here reads or mutates a store. Product/service
branching is an exhaustive ``isinstance`` dispatch over the item variant.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import assert_never

from pydantic import BaseModel

from shopledger.domain.models import Product, Service


class InventorySummary(BaseModel):
    """Catalog-wide totals for the inventory dashboard."""

    model_config = {"frozen": True}

    total_items: int = 0
    total_stock_count: int = 0
    estimated_sales: float = 0.0
    total_stock_value: float = 0.0


def stock_value(buying_price: float, quantity: int) -> float:
    """The single definition of stock valuation: ``buying_price * quantity``."""
    return float(buying_price) * int(quantity)


def item_stock_count(item: Product | Service) -> int:
    if isinstance(item, Product):
        return item.quantity
    if isinstance(item, Service):
        return 0
    assert_never(item)


def item_estimated_sales(item: Product | Service) -> float:
    """Selling price times stock on hand. Services hold no stock, so 0."""
    if isinstance(item, Product):
        return item.selling_price * item.quantity
    if isinstance(item, Service):
        return 0.0
    assert_never(item)


def item_stock_value(item: Product | Service) -> float:
    if isinstance(item, Product):
        return stock_value(item.buying_price, item.quantity)
    if isinstance(item, Service):
        return 0.0
    assert_never(item)


def summarize(items: Iterable[Product | Service]) -> InventorySummary:
    """Compute :class:`InventorySummary` for *items*.

    - ``total_items``: number of items (products and services).
    - ``total_stock_count``: sum of product quantities.
    - ``estimated_sales``: sum of ``selling_price * quantity`` over products.
    - ``total_stock_value``: sum of stock values.
    """
    total_items = 0
    total_stock_count = 0
    estimated_sales = 0.0
    total_stock_value = 0.0
    for item in items:
        total_items += 1
        total_stock_count += item_stock_count(item)
        estimated_sales += item_estimated_sales(item)
        total_stock_value += item_stock_value(item)

    return InventorySummary(
        total_items=total_items,
        total_stock_count=total_stock_count,
        estimated_sales=round(estimated_sales, 2),
        total_stock_value=round(total_stock_value, 2),
    )
