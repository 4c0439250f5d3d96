"""BaseService — foundation for all shopledger services.

Every service receives a :class:`Shop` at construction time and reaches
the catalog, registry, and event bus through it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from shopledger.services.result import ServiceResult

if TYPE_CHECKING:
    from shopledger.domain.errors import ShopError
    from shopledger.infrastructure.shop import Shop

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class InventoryService(BaseService):
            def add_item(self, data) -> ServiceResult:
                try:
                    item = self._shop.catalog.add_item(data)
                except ShopError as exc:
                    return self._failure("add_item", exc)
                ...
    """

    def __init__(self, shop: Shop) -> None:
        self._shop = shop

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Dispatch a lifecycle event. No-op if the event bus is not initialized.

        Plugin failures become warnings, never errors.
        """
        bus = self._shop.event_bus
        if bus is None:
            return
        record = bus.dispatch(hook_name, payload)
        if not record.ok:
            warnings.append(f"Plugin hook {hook_name} failed: {record.error}")

    @staticmethod
    def _failure(op: str, exc: ShopError) -> ServiceResult:
        """Convert a core error into a failed result."""
        logger.debug("%s failed: [%s] %s", op, exc.code, exc.message)
        return ServiceResult.from_exception(op, exc)
