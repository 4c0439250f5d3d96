"""Shared service-layer helper functions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from shopledger.domain.errors import ValidationError
from shopledger.domain.query import QueryFields, SortSpec
from shopledger.domain.types import SortDirection

if TYPE_CHECKING:
    from shopledger.domain.models import Record
    from shopledger.domain.query import Page


def resolve_sort(
    key: str | None,
    direction: str | None,
    fields: QueryFields,
) -> SortSpec | None:
    """Build the sort spec for a list request.

    With no *key* the list keeps insertion order. With a key but no
    *direction*, the key's default direction applies.

    Raises:
        ValidationError: Unknown sort key or direction.
    """
    if key is None:
        return None
    spec = SortSpec(key="", direction=SortDirection.ASC).select(key, fields)
    if direction is None:
        return spec
    try:
        chosen = SortDirection(direction)
    except ValueError as exc:
        msg = f"Unknown sort direction {direction!r}; expected 'asc' or 'desc'"
        raise ValidationError(
            msg, code="INVALID_DIRECTION", detail={"direction": direction}
        ) from exc
    return SortSpec(key=spec.key, direction=chosen)


def page_data(page: Page[Record], *, query: str | None, sort: SortSpec | None) -> dict[str, Any]:
    """Result payload for one page of a list view."""
    return {
        "items": [record.to_json_dict() for record in page.items],
        "page": page.page,
        "page_size": page.page_size,
        "total": page.total,
        "number_of_pages": page.number_of_pages,
        "page_size_options": page.page_size_options,
        "first": page.first,
        "last": page.last,
        "query": query or "",
        "sort": None if sort is None else {"key": sort.key, "direction": sort.direction.value},
    }
