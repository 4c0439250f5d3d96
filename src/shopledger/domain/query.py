"""Query pipeline — filter, sort, and paginate any record list.

Every list view runs the same three read-only stages::

    run(records, query, sort, page, fields) -> Page

The pipeline is generic: a :class:`QueryFields` table tells it which
strings a record can be searched by and how each sort key is read.
Two tables ship with the package, :data:`INVENTORY_FIELDS` and
:data:`CUSTOMER_FIELDS`.

Comparator policy for numeric keys that do not apply to a record (a
service has no quantity, buying price, or stock value): the accessor
returns ``None`` and absent values sort before every present value when
ascending and after every present value when descending. Sorting is
stable in both directions.
"""

from __future__ import annotations

import math
import unicodedata
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Generic, Literal, TypeVar, assert_never

from pydantic import BaseModel
from pydantic.alias_generators import to_snake

from shopledger.domain.errors import ValidationError
from shopledger.domain.models import Product, Service
from shopledger.domain.types import SortDirection

T = TypeVar("T")

PAGE_SIZE_CANDIDATES: tuple[int, ...] = (5, 10, 15, 20)
ALWAYS_OFFERED_PAGE_SIZE = 5

SortKind = Literal["text", "number", "timestamp"]


# ---------------------------------------------------------------------------
# Field tables
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SortField:
    """How to read one sort key from a record."""

    kind: SortKind
    value: Callable[[Any], Any]
    default_direction: SortDirection = SortDirection.ASC


@dataclass(frozen=True)
class QueryFields:
    """Search accessors and sort keys for one record type."""

    search: tuple[Callable[[Any], str | None], ...]
    sort: dict[str, SortField] = field(default_factory=dict)

    def sort_field(self, key: str) -> SortField:
        """Look up a sort key, accepting camelCase or snake_case spelling."""
        spec = self.sort.get(to_snake(key))
        if spec is None:
            msg = f"Unknown sort key {key!r}; expected one of {sorted(self.sort)}"
            raise ValidationError(msg, code="UNKNOWN_SORT_KEY", detail={"key": key})
        return spec


def number_text(value: float | int) -> str:
    """String form of a number for search: ``100.0`` reads as ``100``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _product_only(getter: Callable[[Product], Any]) -> Callable[[Product | Service], Any]:
    """Wrap *getter* so services read as absent (``None``)."""

    def read(item: Product | Service) -> Any:
        if isinstance(item, Product):
            return getter(item)
        if isinstance(item, Service):
            return None
        assert_never(item)

    return read


def _product_number_text(getter: Callable[[Product], float | int]) -> Callable[[Any], str | None]:
    read = _product_only(getter)

    def text(item: Product | Service) -> str | None:
        value = read(item)
        return None if value is None else number_text(value)

    return text


INVENTORY_FIELDS = QueryFields(
    search=(
        lambda item: item.name,
        lambda item: item.category,
        _product_number_text(lambda p: p.quantity),
        _product_number_text(lambda p: p.selling_price),
    ),
    sort={
        "name": SortField("text", lambda item: item.name),
        "category": SortField("text", lambda item: item.category),
        "quantity": SortField("number", _product_only(lambda p: p.quantity)),
        "buying_price": SortField("number", _product_only(lambda p: p.buying_price)),
        "stock_value": SortField("number", _product_only(lambda p: p.stock_value)),
        "selling_price": SortField("number", lambda item: item.selling_price),
        "created_at": SortField(
            "timestamp", lambda item: item.created_at, default_direction=SortDirection.DESC
        ),
    },
)

CUSTOMER_FIELDS = QueryFields(
    search=(
        lambda c: c.name,
        lambda c: c.email,
        lambda c: c.phone,
        lambda c: c.address,
    ),
    sort={
        "name": SortField("text", lambda c: c.name),
        "phone": SortField("text", lambda c: c.phone_key),
        "email": SortField("text", lambda c: c.email_key),
        "address": SortField("text", lambda c: c.address or None),
        "total_orders": SortField("number", lambda c: c.total_orders),
    },
)


# ---------------------------------------------------------------------------
# Filter
# ---------------------------------------------------------------------------


def filter_records(records: Sequence[T], query: str | None, fields: QueryFields) -> list[T]:
    """Keep records where any searchable string contains *query* (case-insensitive)."""
    if not query or not query.strip():
        return list(records)
    needle = query.casefold()
    return [r for r in records if _matches(r, needle, fields)]


def _matches(record: Any, needle: str, fields: QueryFields) -> bool:
    for accessor in fields.search:
        text = accessor(record)
        if text and needle in text.casefold():
            return True
    return False


# ---------------------------------------------------------------------------
# Sort
# ---------------------------------------------------------------------------


class SortSpec(BaseModel):
    """Current sort key and direction of a list view."""

    model_config = {"frozen": True}

    key: str = "name"
    direction: SortDirection = SortDirection.ASC

    def select(self, key: str, fields: QueryFields) -> SortSpec:
        """Return the spec after the user picks *key*.

        Picking the current key again flips the direction. Picking a new
        key resets to that key's default direction (ascending for all keys
        except ``created_at``, which defaults to most recent first).
        """
        spec = fields.sort_field(key)
        normalized = to_snake(key)
        if normalized == to_snake(self.key):
            return SortSpec(key=normalized, direction=self.direction.flipped())
        return SortSpec(key=normalized, direction=spec.default_direction)


def text_sort_key(value: str) -> tuple[str, str, str]:
    """Locale-style collation key.

    Compares base letters first (accents and case ignored), then accents,
    then case with lowercase first.
    """
    decomposed = unicodedata.normalize("NFKD", value)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()
    return base, decomposed.casefold(), value.swapcase()


def _sort_key(spec: SortField) -> Callable[[Any], tuple[int, Any]]:
    def key(record: Any) -> tuple[int, Any]:
        value = spec.value(record)
        if value is None:
            return (0, 0)
        if spec.kind == "text":
            return (1, text_sort_key(str(value)))
        if spec.kind == "timestamp":
            return (1, value.timestamp() if isinstance(value, datetime) else float(value))
        return (1, value)

    return key


def sort_records(
    records: Sequence[T],
    key: str,
    direction: SortDirection | str,
    fields: QueryFields,
) -> list[T]:
    """Stable sort of *records* by *key*; see the module docstring for absent values."""
    spec = fields.sort_field(key)
    descending = SortDirection(direction) is SortDirection.DESC
    return sorted(records, key=_sort_key(spec), reverse=descending)


# ---------------------------------------------------------------------------
# Paginate
# ---------------------------------------------------------------------------


class PageSpec(BaseModel):
    """Requested page (0-based) and page size."""

    model_config = {"frozen": True}

    page: int = 0
    page_size: int = 10


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a list view plus the numbers the pager control needs."""

    items: list[T]
    page: int
    page_size: int
    total: int
    number_of_pages: int
    page_size_options: list[int]

    @property
    def first(self) -> int:
        """1-based position of the first item on the page (0 when empty)."""
        return self.page * self.page_size + 1 if self.items else 0

    @property
    def last(self) -> int:
        """1-based position of the last item on the page (0 when empty)."""
        return self.page * self.page_size + len(self.items) if self.items else 0

    def label(self) -> str:
        return f"{self.first}-{self.last} of {self.total}"


def page_size_options(
    total: int,
    candidates: Sequence[int] = PAGE_SIZE_CANDIDATES,
) -> list[int]:
    """Page sizes offered for *total* items.

    Candidates not larger than *total*, with 5 always offered, e.g.
    ``page_size_options(3) == [5]`` and ``page_size_options(12) == [5, 10]``.
    """
    offered = {c for c in candidates if c <= total}
    offered.add(ALWAYS_OFFERED_PAGE_SIZE)
    return sorted(offered)


def resolve_page_size(
    current: int,
    total: int,
    candidates: Sequence[int] = PAGE_SIZE_CANDIDATES,
) -> int:
    """Keep *current* if it is still offered for *total*, else the first option."""
    options = page_size_options(total, candidates)
    return current if current in options else options[0]


def paginate(
    records: Sequence[T],
    page: int,
    page_size: int,
    candidates: Sequence[int] = PAGE_SIZE_CANDIDATES,
) -> Page[T]:
    """Slice ``[page*page_size, min((page+1)*page_size, total))`` out of *records*."""
    if page_size <= 0:
        msg = f"Page size must be positive, got {page_size}"
        raise ValidationError(msg, code="INVALID_PAGE", detail={"page_size": page_size})
    if page < 0:
        msg = f"Page must not be negative, got {page}"
        raise ValidationError(msg, code="INVALID_PAGE", detail={"page": page})

    total = len(records)
    start = page * page_size
    end = min(start + page_size, total)
    return Page(
        items=list(records[start:end]),
        page=page,
        page_size=page_size,
        total=total,
        number_of_pages=math.ceil(total / page_size),
        page_size_options=page_size_options(total, candidates),
    )


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


def run(
    records: Sequence[T],
    query: str | None,
    sort: SortSpec | None,
    page: PageSpec | None,
    fields: QueryFields,
    *,
    candidates: Sequence[int] = PAGE_SIZE_CANDIDATES,
) -> Page[T]:
    """Filter, sort, then paginate *records*. Never mutates the input.

    The requested page size is re-validated against the filtered total and
    falls back to the first offered size when no longer offered; the page
    index then restarts at 0. A page past the end is clamped to the last
    page.
    """
    page = page or PageSpec()
    selected = filter_records(records, query, fields)
    if sort is not None:
        selected = sort_records(selected, sort.key, sort.direction, fields)

    total = len(selected)
    page_size = resolve_page_size(page.page_size, total, candidates)
    index = page.page if page_size == page.page_size else 0
    last_index = max(math.ceil(total / page_size) - 1, 0)
    return paginate(selected, min(index, last_index), page_size, candidates)
