"""Record models — inventory items, categories, customers, order summaries.

Records are frozen Pydantic models. Python attributes are snake_case; the
serialized JSON form (durable storage, ``--json`` output) uses camelCase
aliases such as ``buyingPrice`` and ``totalOrders``. Both spellings are
accepted on input.

Inventory items form a tagged variant discriminated by ``type``:

- :class:`Product` carries stock: quantity, buying/selling price, unit.
- :class:`Service` carries only ``charges``; its selling price is the
  charge and its quantity, buying price, and stock value are always 0.

``stock_value`` is a computed field on both variants. It is never an
input: a ``stockValue`` key in incoming data is ignored and the value is
recomputed through :func:`~shopledger.domain.aggregates.stock_value`.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    Field,
    NonNegativeFloat,
    NonNegativeInt,
    TypeAdapter,
    computed_field,
)
from pydantic.alias_generators import to_camel, to_snake

from shopledger.domain.identity import email_key, phone_key

RECENT_ORDERS_LIMIT = 5


def utc_now() -> datetime:
    return datetime.now(UTC)


def normalize_keys(data: dict[str, Any]) -> dict[str, Any]:
    """Return *data* with camelCase keys rewritten to snake_case."""
    return {to_snake(key): value for key, value in data.items()}


class Record(BaseModel):
    """Base for every stored record: frozen, camelCase on the wire."""

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    id: str

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON shape used by storage and ``--json``."""
        return self.model_dump(mode="json", by_alias=True)


# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------


class ItemBase(Record):
    """Fields shared by products and services."""

    name: str = Field(min_length=1)
    category: str = ""
    created_at: datetime = Field(default_factory=utc_now)


class Product(ItemBase):
    """A stock-bearing item."""

    type: Literal["product"] = "product"
    quantity: NonNegativeInt = 0
    buying_price: NonNegativeFloat = 0.0
    selling_price: NonNegativeFloat = 0.0
    measuring_unit: str = ""
    pending_selling_price: NonNegativeFloat | None = None
    pending_price_activation_quantity: NonNegativeInt | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def stock_value(self) -> float:
        from shopledger.domain.aggregates import stock_value

        return stock_value(self.buying_price, self.quantity)


class Service(ItemBase):
    """A charge-only item with no stock."""

    type: Literal["service"] = "service"
    charges: NonNegativeFloat = 0.0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def selling_price(self) -> float:
        return self.charges

    @computed_field  # type: ignore[prop-decorator]
    @property
    def quantity(self) -> int:
        return 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def buying_price(self) -> float:
        return 0.0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def stock_value(self) -> float:
        return 0.0


InventoryItem = Annotated[Product | Service, Field(discriminator="type")]

ITEM_ADAPTER: TypeAdapter[Product | Service] = TypeAdapter(InventoryItem)
ITEM_LIST_ADAPTER: TypeAdapter[list[Product | Service]] = TypeAdapter(list[InventoryItem])


def build_item(data: dict[str, Any]) -> Product | Service:
    """Validate *data* into the variant named by its ``type`` tag."""
    return ITEM_ADAPTER.validate_python(data)


class Category(Record):
    """An inventory category; items refer to it by name."""

    name: str = Field(min_length=1)


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------


class OrderSummary(Record):
    """A compact entry in a customer's recent-order history."""

    date: datetime = Field(default_factory=utc_now)
    grand_total: NonNegativeFloat = 0.0
    status: str = "pending"
    items: NonNegativeInt | None = None


class Customer(Record):
    """A customer identified by a canonical phone key."""

    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    email: str | None = None
    address: str | None = None
    total_orders: NonNegativeInt = 0
    recent_orders: list[OrderSummary] = Field(default_factory=list)

    @property
    def phone_key(self) -> str:
        return phone_key(self.phone)

    @property
    def email_key(self) -> str | None:
        return email_key(self.email)


CUSTOMER_LIST_ADAPTER: TypeAdapter[list[Customer]] = TypeAdapter(list[Customer])
CATEGORY_LIST_ADAPTER: TypeAdapter[list[Category]] = TypeAdapter(list[Category])
