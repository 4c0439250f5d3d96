"""CustomerRegistry — the customer book with canonical identity lookup.

Every mutation funnels into :meth:`CustomerRegistry.save_customers`, which
runs in three steps:

1. VALIDATE the complete candidate list (required fields, email shape,
   canonical phone uniqueness);
2. PERSIST the whole list as one JSON document;
3. COMMIT: replace the in-memory records and rebuild the phone and email
   indices.

A validation failure stops at step 1 and a storage failure at step 2, so
in either case memory, indices, and storage still agree with each other.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from shopledger.domain.errors import ValidationError
from shopledger.domain.identity import email_key, phone_key, validate_email, validate_phone
from shopledger.domain.ids import TYPE_PREFIXES, generate_id
from shopledger.domain.models import (
    CUSTOMER_LIST_ADAPTER,
    RECENT_ORDERS_LIMIT,
    Customer,
    OrderSummary,
    normalize_keys,
)
from shopledger.infrastructure.entity_store import (
    EntityStore,
    describe_validation_error,
    input_fields,
)
from shopledger.infrastructure.storage import (
    CUSTOMERS_KEY,
    MemoryStorage,
    read_records,
    write_records,
)

if TYPE_CHECKING:
    from shopledger.infrastructure.storage import KeyValueStorage

logger = logging.getLogger(__name__)

# Order history is only changed through add_order_to_customer.
_HISTORY_FIELDS = ("total_orders", "recent_orders")


class CustomerRegistry:
    """Customers keyed by id, looked up by canonical phone or email.

    Args:
        storage: Durable storage; defaults to a fresh :class:`MemoryStorage`.
        id_factory: Produces candidate ids (see :class:`EntityStore`).
        recent_orders_limit: Length cap of ``recent_orders``.
        validate_phone_format: Also enforce the local digit-count rule of
            :func:`~shopledger.domain.identity.validate_phone`.
    """

    def __init__(
        self,
        storage: KeyValueStorage | None = None,
        *,
        id_factory: Callable[[str], str] = generate_id,
        recent_orders_limit: int = RECENT_ORDERS_LIMIT,
        validate_phone_format: bool = False,
    ) -> None:
        self._storage: KeyValueStorage = storage if storage is not None else MemoryStorage()
        self._id_factory = id_factory
        self._recent_orders_limit = recent_orders_limit
        self._validate_phone_format = validate_phone_format
        self._store: EntityStore[Customer] = EntityStore(
            Customer.model_validate,
            prefix=TYPE_PREFIXES["customer"],
            id_factory=id_factory,
            name="customer",
        )
        self._by_phone: dict[str, Customer] = {}
        self._by_email: dict[str, Customer] = {}

    def load(self) -> None:
        """Hydrate from storage. A missing document means an empty book.

        Raises:
            PersistenceError: The stored document is unreadable or corrupt.
        """
        self._commit(read_records(self._storage, CUSTOMERS_KEY, CUSTOMER_LIST_ADAPTER))
        logger.debug("Loaded %d customers", len(self._store))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def customers(self) -> list[Customer]:
        return self._store.list()

    def get(self, customer_id: str) -> Customer:
        return self._store.get(customer_id)

    def find(self, customer_id: str) -> Customer | None:
        return self._store.find(customer_id)

    def get_by_phone(self, phone: str | None) -> Customer | None:
        """Find a customer by phone in any punctuation (``0712-345-678``)."""
        key = phone_key(phone)
        if not key:
            return None
        return self._by_phone.get(key)

    def get_by_email(self, email: str | None) -> Customer | None:
        key = email_key(email)
        if key is None:
            return None
        return self._by_email.get(key)

    def __len__(self) -> int:
        return len(self._store)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_customer(self, data: Mapping[str, Any]) -> Customer:
        """Add a customer with a fresh id and an empty order history.

        Raises:
            ValidationError: Bad fields or the phone is already registered.
            PersistenceError: The durable write failed (registry unchanged).
        """
        fields = normalize_keys(dict(data))
        fields.pop("id", None)
        for name in _HISTORY_FIELDS:
            fields.pop(name, None)
        customer = self._store.build_record(
            {**fields, "id": self._store.issue_id(), "total_orders": 0, "recent_orders": []}
        )
        self.save_customers([*self._store.list(), customer])
        logger.info("Created customer %s", customer.id)
        return customer

    def update_customer(self, customer_id: str, changes: Mapping[str, Any]) -> Customer:
        """Merge *changes* into a customer's contact fields.

        ``total_orders`` and ``recent_orders`` in *changes* are ignored.

        Raises:
            NotFoundError: *customer_id* is not registered.
            ValidationError: The merged record is invalid or its phone
                belongs to another customer.
            PersistenceError: The durable write failed (registry unchanged).
        """
        existing = self._store.get(customer_id)
        patch = {k: v for k, v in normalize_keys(dict(changes)).items() if k not in _HISTORY_FIELDS}
        updated = self._store.build_record({**input_fields(existing), **patch, "id": customer_id})
        self.save_customers(
            [updated if c.id == customer_id else c for c in self._store.list()]
        )
        return updated

    def delete_customer(self, customer_id: str) -> None:
        """Remove a customer; an unknown id is a no-op."""
        if customer_id not in self._store:
            return
        self.save_customers([c for c in self._store.list() if c.id != customer_id])
        logger.info("Deleted customer %s", customer_id)

    def add_order_to_customer(
        self, customer_id: str, order: OrderSummary | Mapping[str, Any]
    ) -> Customer:
        """Record *order* as the customer's most recent one.

        The order is prepended to ``recent_orders`` (trimmed to the most
        recent entries) and ``total_orders`` goes up by one.

        Raises:
            NotFoundError: *customer_id* is not registered.
            PersistenceError: The durable write failed (registry unchanged).
        """
        existing = self._store.get(customer_id)
        summary = self._as_order(order)
        recent = [summary, *existing.recent_orders][: self._recent_orders_limit]
        updated = self._store.build_record(
            {
                **input_fields(existing),
                "total_orders": existing.total_orders + 1,
                "recent_orders": recent,
            }
        )
        self.save_customers(
            [updated if c.id == customer_id else c for c in self._store.list()]
        )
        logger.debug("Recorded order %s for customer %s", summary.id, customer_id)
        return updated

    def save_customers(self, updated: Sequence[Customer]) -> None:
        """Replace the whole customer book with *updated*.

        Raises:
            ValidationError: A record is invalid or two records share a
                canonical phone. Nothing is written.
            PersistenceError: The durable write failed. Memory and indices
                keep their previous contents.
        """
        customers = list(updated)
        self._validate(customers)
        write_records(self._storage, CUSTOMERS_KEY, list(customers))
        self._commit(customers)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _validate(self, customers: list[Customer]) -> None:
        seen_ids: set[str] = set()
        phones: dict[str, Customer] = {}
        for customer in customers:
            if customer.id in seen_ids:
                msg = f"Customer id {customer.id!r} appears more than once"
                raise ValidationError(msg, code="DUPLICATE_ID", detail={"id": customer.id})
            seen_ids.add(customer.id)

            if not customer.name.strip():
                raise ValidationError("Customer name is required", code="MISSING_NAME")
            key = customer.phone_key
            if not key:
                msg = f"Customer phone {customer.phone!r} contains no digits"
                raise ValidationError(msg, code="INVALID_PHONE", detail={"phone": customer.phone})
            if self._validate_phone_format and not validate_phone(customer.phone):
                msg = f"Phone number {customer.phone!r} has too many digits"
                raise ValidationError(msg, code="INVALID_PHONE", detail={"phone": customer.phone})
            if not validate_email(customer.email):
                msg = f"Invalid email address {customer.email!r}"
                raise ValidationError(msg, code="INVALID_EMAIL", detail={"email": customer.email})

            other = phones.get(key)
            if other is not None:
                msg = f"Phone {customer.phone!r} is already registered to {other.name!r}"
                raise ValidationError(
                    msg,
                    code="DUPLICATE_PHONE",
                    detail={"phone": customer.phone, "existing_id": other.id},
                )
            phones[key] = customer

    def _commit(self, customers: list[Customer]) -> None:
        self._store.load(customers)
        self._by_phone = {}
        self._by_email = {}
        for customer in customers:
            self._by_phone[customer.phone_key] = customer
            key = customer.email_key
            if key is not None:
                self._by_email[key] = customer

    def _as_order(self, order: OrderSummary | Mapping[str, Any]) -> OrderSummary:
        if isinstance(order, OrderSummary):
            return order
        fields = normalize_keys(dict(order))
        if not fields.get("id"):
            fields["id"] = self._id_factory(TYPE_PREFIXES["order"])
        try:
            return OrderSummary.model_validate(fields)
        except PydanticValidationError as exc:
            msg = f"Invalid order: {describe_validation_error(exc)}"
            raise ValidationError(msg, code="INVALID_ORDER") from exc
