"""Item kinds and listing enums shared across the domain."""

from __future__ import annotations

from enum import StrEnum


class ItemKind(StrEnum):
    """Discriminator values for inventory items."""

    PRODUCT = "product"
    SERVICE = "service"


class SortDirection(StrEnum):
    """Sort direction for list views."""

    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> SortDirection:
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


class OrderStatus(StrEnum):
    """Status values carried by recent-order summaries."""

    PENDING = "pending"
    PAID = "paid"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
