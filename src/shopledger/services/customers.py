"""CustomerService — the customer book, identity lookup, and order history.

Pipeline for mutations: VALIDATE + PERSIST (registry) → EVENT → RESPOND.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from shopledger.domain.errors import ShopError
from shopledger.domain.identity import format_phone
from shopledger.domain.query import CUSTOMER_FIELDS, PageSpec, run
from shopledger.services._helpers import page_data, resolve_sort
from shopledger.services.base import BaseService
from shopledger.services.result import ServiceResult


class CustomerService(BaseService):
    """Handles customers for the CLI."""

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_customer(self, data: Mapping[str, Any]) -> ServiceResult:
        op = "create_customer"
        warnings: list[str] = []
        registry = self._shop.registry
        try:
            customer = registry.create_customer(data)
        except ShopError as exc:
            return self._failure(op, exc)

        self._dispatch_event(
            "post_customer_change",
            {"action": "created", "customer_id": customer.id, "customer_count": len(registry)},
            warnings,
        )
        return ServiceResult(
            ok=True, op=op, data={"customer": customer.to_json_dict()}, warnings=warnings
        )

    def update_customer(self, customer_id: str, changes: Mapping[str, Any]) -> ServiceResult:
        op = "update_customer"
        warnings: list[str] = []
        registry = self._shop.registry
        try:
            customer = registry.update_customer(customer_id, changes)
        except ShopError as exc:
            return self._failure(op, exc)

        self._dispatch_event(
            "post_customer_change",
            {"action": "updated", "customer_id": customer.id, "customer_count": len(registry)},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={"customer": customer.to_json_dict(), "fields_changed": sorted(changes)},
            warnings=warnings,
        )

    def delete_customer(self, customer_id: str) -> ServiceResult:
        """Delete a customer. Deleting an unknown id succeeds with a warning."""
        op = "delete_customer"
        warnings: list[str] = []
        registry = self._shop.registry
        if registry.find(customer_id) is None:
            warnings.append(f"No customer with id {customer_id!r}; nothing deleted")
            return ServiceResult(
                ok=True, op=op, data={"id": customer_id, "removed": False}, warnings=warnings
            )
        try:
            registry.delete_customer(customer_id)
        except ShopError as exc:
            return self._failure(op, exc)

        self._dispatch_event(
            "post_customer_change",
            {"action": "deleted", "customer_id": customer_id, "customer_count": len(registry)},
            warnings,
        )
        return ServiceResult(
            ok=True, op=op, data={"id": customer_id, "removed": True}, warnings=warnings
        )

    def record_order(self, customer_id: str, order: Mapping[str, Any]) -> ServiceResult:
        """Add an order summary to a customer's history."""
        op = "record_order"
        warnings: list[str] = []
        try:
            customer = self._shop.registry.add_order_to_customer(customer_id, order)
        except ShopError as exc:
            return self._failure(op, exc)

        latest = customer.recent_orders[0]
        self._dispatch_event(
            "post_order_recorded",
            {
                "customer_id": customer.id,
                "order_id": latest.id,
                "total_orders": customer.total_orders,
            },
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={"customer": customer.to_json_dict(), "order": latest.to_json_dict()},
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_customer(self, customer_id: str) -> ServiceResult:
        op = "get_customer"
        try:
            customer = self._shop.registry.get(customer_id)
        except ShopError as exc:
            return self._failure(op, exc)
        return ServiceResult(ok=True, op=op, data={"customer": customer.to_json_dict()})

    def lookup(self, *, phone: str | None = None, email: str | None = None) -> ServiceResult:
        """Find a customer by phone (any punctuation) or email (any case)."""
        op = "lookup_customer"
        registry = self._shop.registry
        if not phone and not email:
            return ServiceResult.failure(
                op, "MISSING_QUERY", "Give a phone number or an email address"
            )
        customer = registry.get_by_phone(phone) if phone else registry.get_by_email(email)
        if customer is None:
            query = {"phone": phone} if phone else {"email": email}
            return ServiceResult.failure(
                op, "NOT_FOUND", f"No customer matches {next(iter(query.values()))!r}", **query
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "customer": customer.to_json_dict(),
                "formatted_phone": format_phone(customer.phone),
            },
        )

    def list_customers(
        self,
        *,
        query: str | None = None,
        sort: str | None = None,
        direction: str | None = None,
        page: int = 0,
        page_size: int | None = None,
    ) -> ServiceResult:
        """One page of the customer list: filter → sort → paginate."""
        op = "list_customers"
        listing = self._shop.settings.listing
        try:
            sort_spec = resolve_sort(sort, direction, CUSTOMER_FIELDS)
            result = run(
                self._shop.registry.customers(),
                query,
                sort_spec,
                PageSpec(page=page, page_size=page_size or listing.default_page_size),
                CUSTOMER_FIELDS,
                candidates=listing.page_size_candidates,
            )
        except ShopError as exc:
            return self._failure(op, exc)
        return ServiceResult(ok=True, op=op, data=page_data(result, query=query, sort=sort_spec))
