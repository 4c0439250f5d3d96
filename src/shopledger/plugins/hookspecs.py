"""Pluggy hook specifications for shopledger lifecycle events.

Every event fires after the change it describes has been written, so a
plugin always observes committed state. Plugins implement any subset::

    from shopledger.plugins import hookimpl

    class LowStockAlert:
        @hookimpl
        def post_item_change(self, action, item_id, item_type):
            ...
"""

from __future__ import annotations

import pluggy

PROJECT_NAME = "shopledger"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class ShopLedgerHookSpec:
    """Hook specifications for the shopledger plugin system."""

    @hookspec
    def post_item_change(self, action: str, item_id: str, item_type: str) -> None:
        """Called after an item is added, updated, restocked, or removed."""

    @hookspec
    def post_category_change(self, action: str, category_id: str, name: str) -> None:
        """Called after a category is added, renamed, or removed."""

    @hookspec
    def post_customer_change(self, action: str, customer_id: str, customer_count: int) -> None:
        """Called after a customer is created, updated, or deleted."""

    @hookspec
    def post_order_recorded(self, customer_id: str, order_id: str, total_orders: int) -> None:
        """Called after an order is added to a customer's history."""
