"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults live here, ``shopledger.toml`` only holds
overrides. An empty file (or none at all) is a valid configuration.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from shopledger.domain.models import RECENT_ORDERS_LIMIT
from shopledger.domain.query import PAGE_SIZE_CANDIDATES

# --- shopledger.toml sections ---


class ShopConfig(BaseModel):
    """[shop] section."""

    model_config = {"frozen": True}

    name: str = "my-shop"
    currency: str = "KES"


class StorageConfig(BaseModel):
    """[storage] section."""

    model_config = {"frozen": True}

    backend: Literal["sqlite", "memory"] = "sqlite"
    db_name: str = "shopledger.db"
    persist_inventory: bool = True


class ListingConfig(BaseModel):
    """[listing] section."""

    model_config = {"frozen": True}

    page_size_candidates: tuple[int, ...] = PAGE_SIZE_CANDIDATES
    default_page_size: int = Field(default=10, ge=1)

    @field_validator("page_size_candidates")
    @classmethod
    def _positive_sizes(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        if not value or any(size <= 0 for size in value):
            msg = "page_size_candidates must be a non-empty list of positive sizes"
            raise ValueError(msg)
        return tuple(sorted(set(value)))


class CustomersConfig(BaseModel):
    """[customers] section."""

    model_config = {"frozen": True}

    recent_orders_limit: int = Field(default=RECENT_ORDERS_LIMIT, ge=1)
    validate_phone_format: bool = False
