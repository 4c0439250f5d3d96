"""Typed errors raised by the core stores.

Validation and not-found errors are raised before any mutation is
applied. Persistence errors are raised after a validated mutation failed
to reach durable storage; in-memory state is left unchanged in that case.

The service layer maps every :class:`ShopError` onto a ``ServiceError``
using :attr:`ShopError.code` and :attr:`ShopError.detail`.
"""

from __future__ import annotations

from typing import Any


class ShopError(Exception):
    """Base class for all shopledger core errors."""

    default_code = "SHOP_ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail: dict[str, Any] = detail or {}


class ValidationError(ShopError):
    """Input rejected: duplicate name or phone, price ordering, bad shape."""

    default_code = "VALIDATION_FAILED"


class NotFoundError(ShopError):
    """An id referenced by update/remove is absent from the store."""

    default_code = "NOT_FOUND"


class PersistenceError(ShopError):
    """The durable storage collaborator failed to read or write."""

    default_code = "PERSISTENCE_FAILED"
