"""Durable key-value storage collaborator.

The stores persist whole collections as JSON documents: one key per
collection. Two implementations satisfy :class:`KeyValueStorage`:

- :class:`SqliteStorage` — SQLAlchemy Core over the ``kv_entries`` table.
- :class:`MemoryStorage` — a dict, for tests and ``backend = "memory"``.

``set`` either succeeds or raises :class:`PersistenceError`; callers treat
a raise as "nothing was written".
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Protocol, TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError

from shopledger.domain.errors import PersistenceError
from shopledger.infrastructure.database.schema import kv_entries

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from shopledger.domain.models import Record

logger = logging.getLogger(__name__)

T = TypeVar("T")

CUSTOMERS_KEY = "customers"
ITEMS_KEY = "inventory.items"
CATEGORIES_KEY = "inventory.categories"


class KeyValueStorage(Protocol):
    """Durable string-to-string storage."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class SqliteStorage:
    """Key-value storage backed by the ``kv_entries`` SQLite table."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get(self, key: str) -> str | None:
        stmt = select(kv_entries.c.value).where(kv_entries.c.key == key)
        try:
            with self._engine.connect() as conn:
                value = conn.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as exc:
            msg = f"Failed to read {key!r} from storage: {exc}"
            raise PersistenceError(msg, detail={"key": key}) from exc
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        modified = datetime.now(UTC).isoformat()
        stmt = sqlite_insert(kv_entries).values(key=key, value=value, modified=modified)
        stmt = stmt.on_conflict_do_update(
            index_elements=[kv_entries.c.key],
            set_={"value": value, "modified": modified},
        )
        try:
            with self._engine.begin() as conn:
                conn.execute(stmt)
        except SQLAlchemyError as exc:
            msg = f"Failed to write {key!r} to storage: {exc}"
            raise PersistenceError(msg, detail={"key": key}) from exc
        logger.debug("Stored %s (%d bytes)", key, len(value))


class MemoryStorage:
    """In-process key-value storage.

    Set ``fail_writes`` to make every ``set`` raise, which lets tests
    exercise the persistence-failure path.
    """

    def __init__(self, initial: dict[str, str] | None = None, *, fail_writes: bool = False) -> None:
        self.data: dict[str, str] = dict(initial or {})
        self.fail_writes = fail_writes
        self.writes = 0

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            msg = f"Failed to write {key!r} to storage: writes disabled"
            raise PersistenceError(msg, detail={"key": key})
        self.data[key] = value
        self.writes += 1


# ---------------------------------------------------------------------------
# JSON document helpers
# ---------------------------------------------------------------------------


def dump_records(records: list[Record]) -> str:
    """Serialize records to the camelCase JSON document stored under a key."""
    payload: list[dict[str, Any]] = [r.to_json_dict() for r in records]
    return json.dumps(payload, ensure_ascii=False)


def write_records(storage: KeyValueStorage, key: str, records: list[Record]) -> None:
    storage.set(key, dump_records(records))


def read_records(storage: KeyValueStorage, key: str, adapter: TypeAdapter[list[T]]) -> list[T]:
    """Load and validate the JSON document under *key* (missing key -> empty list).

    Raises:
        PersistenceError: If the stored document is not valid JSON or does
            not match the record schema.
    """
    raw = storage.get(key)
    if raw is None:
        return []
    try:
        return adapter.validate_json(raw)
    except PydanticValidationError as exc:
        msg = f"Stored document {key!r} is corrupt: {exc.error_count()} error(s)"
        raise PersistenceError(msg, code="CORRUPT_DOCUMENT", detail={"key": key}) from exc
