"""Shop — the service container built once per process.

The Shop owns the storage collaborator, the inventory catalog, the
customer registry, and the plugin event bus. It is constructed from
:class:`ShopSettings` by the CLI context and handed to every service via
the :class:`BaseService` constructor; nothing in the package reaches for
a global instance.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from shopledger.domain.ids import generate_id
from shopledger.infrastructure.catalog import InventoryCatalog
from shopledger.infrastructure.database.engine import init_database
from shopledger.infrastructure.registry import CustomerRegistry
from shopledger.infrastructure.storage import KeyValueStorage, MemoryStorage, SqliteStorage

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from shopledger.config.settings import ShopSettings
    from shopledger.plugins.event_bus import EventBus

logger = logging.getLogger(__name__)


class Shop:
    """Container for the stores and their collaborators.

    Args:
        settings: Resolved settings.
        storage: Inject a storage collaborator instead of building one
            from ``settings.storage``.
        id_factory: Id generator shared by every store.
    """

    def __init__(
        self,
        settings: ShopSettings,
        *,
        storage: KeyValueStorage | None = None,
        id_factory: Callable[[str], str] = generate_id,
    ) -> None:
        self._settings = settings
        self._engine: Engine | None = None
        if storage is None:
            storage = self._build_storage()
        self._storage = storage

        catalog_storage = storage if settings.storage.persist_inventory else None
        self._catalog = InventoryCatalog(catalog_storage, id_factory=id_factory)
        self._registry = CustomerRegistry(
            storage,
            id_factory=id_factory,
            recent_orders_limit=settings.customers.recent_orders_limit,
            validate_phone_format=settings.customers.validate_phone_format,
        )
        self._catalog.load()
        self._registry.load()
        self._event_bus: EventBus | None = None

    @property
    def root(self) -> Path:
        return self._settings.shop_root

    @property
    def settings(self) -> ShopSettings:
        return self._settings

    @property
    def storage(self) -> KeyValueStorage:
        return self._storage

    @property
    def catalog(self) -> InventoryCatalog:
        return self._catalog

    @property
    def registry(self) -> CustomerRegistry:
        return self._registry

    @property
    def event_bus(self) -> EventBus | None:
        """The plugin event bus (None until :meth:`init_event_bus`)."""
        return self._event_bus

    def init_event_bus(self) -> None:
        """Discover entry-point plugins and wire up the EventBus."""
        from shopledger.plugins.event_bus import EventBus
        from shopledger.plugins.manager import PluginManager

        pm = PluginManager()
        names = pm.discover_and_load()
        logger.debug("Loaded plugins: %s", names)
        self._event_bus = EventBus(pm)

    def close(self) -> None:
        """Release the database engine, if one was opened."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    def _build_storage(self) -> KeyValueStorage:
        config = self._settings.storage
        if config.backend == "memory":
            return MemoryStorage()
        self._engine = init_database(self.root, config.db_name)
        return SqliteStorage(self._engine)
