"""InventoryCatalog — inventory items and categories.

Owns the product/service rules:

- a product's selling price must not be below its buying price;
- a service has no stock: quantity, buying price, and stock value are 0
  and its charge is its selling price;
- category names are unique under case-insensitive comparison.

Every check runs before the backing :class:`EntityStore` changes, so a
rejected call leaves the catalog exactly as it was.

Persistence: when constructed with a storage collaborator the catalog is
write-through. Each mutation runs inside an EntityStore transaction and
writes the whole collection; if the write fails the transaction restores
the previous contents and :class:`PersistenceError` propagates. Without
storage the catalog lives in process memory only.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from shopledger.domain.aggregates import InventorySummary, summarize
from shopledger.domain.errors import ValidationError
from shopledger.domain.ids import TYPE_PREFIXES, generate_id
from shopledger.domain.models import (
    CATEGORY_LIST_ADAPTER,
    ITEM_LIST_ADAPTER,
    Category,
    Product,
    Service,
    build_item,
    normalize_keys,
)
from shopledger.domain.types import ItemKind
from shopledger.infrastructure.entity_store import EntityStore, input_fields
from shopledger.infrastructure.storage import (
    CATEGORIES_KEY,
    ITEMS_KEY,
    read_records,
    write_records,
)

if TYPE_CHECKING:
    from shopledger.infrastructure.storage import KeyValueStorage

logger = logging.getLogger(__name__)

InventoryItem = Product | Service

# Input keys that belong to one variant only; dropped when the type changes.
_PRODUCT_ONLY = frozenset(
    {
        "quantity",
        "buying_price",
        "selling_price",
        "measuring_unit",
        "pending_selling_price",
        "pending_price_activation_quantity",
    }
)
_SERVICE_ONLY = frozenset({"charges"})
_DERIVED = frozenset({"stock_value"})


def check_price_order(buying_price: float, selling_price: float, *, name: str = "") -> None:
    """Reject a product priced below cost.

    Raises:
        ValidationError: If ``selling_price < buying_price``.
    """
    if selling_price < buying_price:
        label = f" for {name!r}" if name else ""
        msg = (
            f"Selling price{label} ({selling_price}) cannot be lower "
            f"than buying price ({buying_price})"
        )
        raise ValidationError(
            msg,
            code="PRICE_ORDER",
            detail={"buying_price": buying_price, "selling_price": selling_price},
        )


def category_key(name: str) -> str:
    return name.strip().casefold()


class InventoryCatalog:
    """Inventory items plus categories, with validation and summaries."""

    def __init__(
        self,
        storage: KeyValueStorage | None = None,
        *,
        id_factory: Callable[[str], str] = generate_id,
    ) -> None:
        self._storage = storage
        self._items: EntityStore[InventoryItem] = EntityStore(
            build_item, prefix=TYPE_PREFIXES["item"], id_factory=id_factory, name="item"
        )
        self._categories: EntityStore[Category] = EntityStore(
            Category.model_validate,
            prefix=TYPE_PREFIXES["category"],
            id_factory=id_factory,
            name="category",
        )

    def load(self) -> None:
        """Hydrate both stores from storage (no-op without storage)."""
        if self._storage is None:
            return
        self._items.load(read_records(self._storage, ITEMS_KEY, ITEM_LIST_ADAPTER))
        self._categories.load(read_records(self._storage, CATEGORIES_KEY, CATEGORY_LIST_ADAPTER))
        logger.debug(
            "Loaded %d items and %d categories", len(self._items), len(self._categories)
        )

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def add_item(self, data: Mapping[str, Any]) -> InventoryItem:
        """Validate and add a product or service.

        Raises:
            ValidationError: Unknown ``type``, blank name, bad field values,
                or a product priced below cost.
            PersistenceError: The durable write failed (catalog unchanged).
        """
        fields = self._prepare(normalize_keys(dict(data)))
        with self._write(items=True):
            item = self._items.add(fields)
        logger.debug("Added %s %s (%s)", item.type, item.id, item.name)
        return item

    def update_item(self, item_id: str, data: Mapping[str, Any]) -> InventoryItem:
        """Merge *data* into an existing item and re-validate the result.

        The ``type`` may change; fields of the old variant that do not apply
        to the new one are dropped.

        Raises:
            NotFoundError: *item_id* is not in the catalog.
            ValidationError: The merged item breaks a rule.
            PersistenceError: The durable write failed (catalog unchanged).
        """
        existing = self._items.get(item_id)
        changes = normalize_keys(dict(data))
        merged = {**input_fields(existing), **changes}
        merged.pop("id", None)
        fields = self._prepare(merged)
        with self._write(items=True):
            return self._items.update(item_id, fields)

    def remove_item(self, item_id: str) -> None:
        """Remove *item_id*; removing an absent id is a no-op."""
        if item_id not in self._items:
            return
        with self._write(items=True):
            self._items.remove(item_id)

    def restock(
        self,
        item_id: str,
        quantity: int,
        *,
        buying_price: float | None = None,
        selling_price: float | None = None,
        apply_immediately: bool = True,
    ) -> Product:
        """Add *quantity* units to a product, optionally repricing it.

        A new buying price replaces the old one. A new selling price takes
        effect now when *apply_immediately* is true; otherwise it is parked
        as ``pending_selling_price`` together with the stock level at which
        it activates (the stock on hand before this restock).

        Raises:
            NotFoundError: *item_id* is not in the catalog.
            ValidationError: Non-positive quantity, the item is a service,
                or the effective prices break the price-order rule.
        """
        existing = self._items.get(item_id)
        if not isinstance(existing, Product):
            msg = f"{existing.name!r} is a service and cannot be restocked"
            raise ValidationError(msg, code="NOT_RESTOCKABLE", detail={"id": item_id})
        if quantity <= 0:
            msg = f"Restock quantity must be positive, got {quantity}"
            raise ValidationError(msg, code="INVALID_QUANTITY", detail={"quantity": quantity})

        new_buying = existing.buying_price if buying_price is None else buying_price
        patch: dict[str, Any] = {
            "quantity": existing.quantity + quantity,
            "buying_price": new_buying,
        }
        if selling_price is None:
            check_price_order(new_buying, existing.selling_price, name=existing.name)
        elif apply_immediately:
            check_price_order(new_buying, selling_price, name=existing.name)
            patch.update(
                selling_price=selling_price,
                pending_selling_price=None,
                pending_price_activation_quantity=None,
            )
        else:
            check_price_order(new_buying, existing.selling_price, name=existing.name)
            check_price_order(new_buying, selling_price, name=existing.name)
            patch.update(
                pending_selling_price=selling_price,
                pending_price_activation_quantity=existing.quantity,
            )

        with self._write(items=True):
            item = self._items.update(item_id, patch)
        assert isinstance(item, Product)
        return item

    def get_item(self, item_id: str) -> InventoryItem:
        return self._items.get(item_id)

    def find_item(self, item_id: str) -> InventoryItem | None:
        return self._items.find(item_id)

    def items(self) -> list[InventoryItem]:
        return self._items.list()

    def items_in_category(self, name: str) -> list[InventoryItem]:
        key = category_key(name)
        return [i for i in self._items.list() if category_key(i.category) == key]

    def summary(self, items: list[InventoryItem] | None = None) -> InventorySummary:
        """Catalog totals over *items* (default: every item in the catalog)."""
        return summarize(self._items.list() if items is None else items)

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def add_category(self, name: str) -> Category:
        """Add a category with a name not already taken (ignoring case)."""
        clean = self._check_category_name(name)
        with self._write(categories=True):
            return self._categories.add({"name": clean})

    def edit_category(self, category_id: str, name: str) -> Category:
        """Rename a category. Items tagged with the old name keep it.

        Raises:
            NotFoundError: *category_id* is not in the catalog.
            ValidationError: Blank name or another category already uses it.
        """
        self._categories.get(category_id)
        clean = self._check_category_name(name, exclude_id=category_id)
        with self._write(categories=True):
            return self._categories.update(category_id, {"name": clean})

    def remove_category(self, category_id: str) -> None:
        if category_id not in self._categories:
            return
        with self._write(categories=True):
            self._categories.remove(category_id)

    def get_category(self, category_id: str) -> Category:
        return self._categories.get(category_id)

    def find_category(self, category_id: str) -> Category | None:
        return self._categories.find(category_id)

    def categories(self) -> list[Category]:
        return self._categories.list()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _prepare(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Apply the product/service rules to input *fields*."""
        kind = fields.get("type", ItemKind.PRODUCT)
        name = str(fields.get("name") or "").strip()
        if not name:
            raise ValidationError("Item name is required", code="MISSING_NAME")

        prepared = {k: v for k, v in fields.items() if k not in _DERIVED}
        prepared["name"] = name
        prepared["category"] = str(fields.get("category") or "").strip()

        if kind == ItemKind.PRODUCT:
            prepared = {k: v for k, v in prepared.items() if k not in _SERVICE_ONLY}
            prepared["type"] = ItemKind.PRODUCT.value
            check_price_order(
                _as_price(prepared.get("buying_price")),
                _as_price(prepared.get("selling_price")),
                name=name,
            )
            pending = prepared.get("pending_selling_price")
            if pending is not None:
                check_price_order(
                    _as_price(prepared.get("buying_price")), _as_price(pending), name=name
                )
        elif kind == ItemKind.SERVICE:
            if prepared.get("charges") is None and prepared.get("selling_price") is not None:
                prepared["charges"] = prepared["selling_price"]
            prepared = {k: v for k, v in prepared.items() if k not in _PRODUCT_ONLY}
            prepared["type"] = ItemKind.SERVICE.value
        else:
            msg = f"Unknown item type {kind!r}; expected 'product' or 'service'"
            raise ValidationError(msg, code="UNKNOWN_TYPE", detail={"type": kind})
        return prepared

    def _check_category_name(self, name: str, *, exclude_id: str | None = None) -> str:
        clean = name.strip()
        if not clean:
            raise ValidationError("Category name is required", code="MISSING_NAME")
        key = category_key(clean)
        for category in self._categories.list():
            if category.id != exclude_id and category_key(category.name) == key:
                msg = f"Category {category.name!r} already exists"
                raise ValidationError(
                    msg,
                    code="DUPLICATE_CATEGORY",
                    detail={"name": clean, "existing_id": category.id},
                )
        return clean

    @contextmanager
    def _write(self, *, items: bool = False, categories: bool = False) -> Iterator[None]:
        """Run a store mutation and persist it; undo the mutation if the write fails."""
        with self._items.transaction(), self._categories.transaction():
            yield
            if self._storage is None:
                return
            if items:
                write_records(self._storage, ITEMS_KEY, list(self._items.list()))
            if categories:
                write_records(self._storage, CATEGORIES_KEY, list(self._categories.list()))


def _as_price(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError) as exc:
        msg = f"Invalid price: {value!r}"
        raise ValidationError(msg, code="INVALID_PRICE") from exc
