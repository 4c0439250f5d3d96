"""EntityStore — generic id-assigning record collection.

The store knows how to build a record from a dict and nothing about the
domain rules of what it holds. It guarantees:

- ids handed out by :meth:`EntityStore.add` never repeat within the
  process, including ids of records that were since removed;
- :meth:`EntityStore.list` returns records in insertion order, and an
  update keeps the record in its original position;
- a failed build (schema violation) raises before anything changes.

:meth:`EntityStore.transaction` snapshots the contents and restores them
if the block raises, so callers can pair a store mutation with a durable
write and undo the mutation when the write fails.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from shopledger.domain.errors import NotFoundError, ValidationError
from shopledger.domain.ids import generate_id
from shopledger.domain.models import normalize_keys

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)

_MAX_ID_ATTEMPTS = 16


def input_fields(record: BaseModel) -> dict[str, Any]:
    """Declared fields of *record*, without computed fields."""
    return record.model_dump(include=set(type(record).model_fields))


def describe_validation_error(exc: PydanticValidationError) -> str:
    """Flatten a Pydantic error into ``field: message; ...`` form."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "record"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


class EntityStore(Generic[R]):
    """Insertion-ordered collection of records keyed by id.

    Args:
        build: Turns a full data dict (including ``id``) into a record.
        prefix: Id prefix passed to *id_factory*.
        id_factory: Produces candidate ids; defaults to
            :func:`~shopledger.domain.ids.generate_id`.
        name: Label used in error messages and logs.
    """

    def __init__(
        self,
        build: Callable[[dict[str, Any]], R],
        *,
        prefix: str,
        id_factory: Callable[[str], str] = generate_id,
        name: str = "record",
    ) -> None:
        self._build = build
        self._prefix = prefix
        self._id_factory = id_factory
        self._name = name
        self._records: dict[str, R] = {}
        self._issued: set[str] = set()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, data: Mapping[str, Any]) -> R:
        """Assign a fresh id, store the built record, and return it."""
        fields = normalize_keys(dict(data))
        fields.pop("id", None)
        record_id = self.issue_id()
        record = self.build_record({**fields, "id": record_id})
        self._records[record_id] = record
        logger.debug("Added %s %s", self._name, record_id)
        return record

    def update(self, record_id: str, patch: Mapping[str, Any]) -> R:
        """Merge *patch* into the record and rebuild it.

        Raises:
            NotFoundError: If *record_id* is not in the store.
        """
        existing = self.get(record_id)
        merged = {**input_fields(existing), **normalize_keys(dict(patch)), "id": record_id}
        record = self.build_record(merged)
        self._records[record_id] = record
        logger.debug("Updated %s %s", self._name, record_id)
        return record

    def remove(self, record_id: str) -> None:
        """Remove *record_id* if present. Removing an absent id is a no-op."""
        if self._records.pop(record_id, None) is not None:
            logger.debug("Removed %s %s", self._name, record_id)

    def load(self, records: list[R]) -> None:
        """Replace the whole contents with *records* (in the given order)."""
        self._records = {self._record_id(r): r for r in records}
        self._issued.update(self._records)

    @contextmanager
    def transaction(self) -> Iterator[EntityStore[R]]:
        """Restore the pre-block contents if the block raises."""
        snapshot = dict(self._records)
        try:
            yield self
        except BaseException:
            self._records = snapshot
            logger.debug("Rolled back %s store", self._name)
            raise

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, record_id: str) -> R:
        """Return the record with *record_id*.

        Raises:
            NotFoundError: If *record_id* is not in the store.
        """
        record = self._records.get(record_id)
        if record is None:
            msg = f"No {self._name} with id {record_id!r}"
            raise NotFoundError(msg, detail={"id": record_id})
        return record

    def find(self, record_id: str) -> R | None:
        return self._records.get(record_id)

    def list(self) -> list[R]:
        """Snapshot of all records in insertion order."""
        return list(self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def __iter__(self) -> Iterator[R]:
        return iter(self.list())

    # ------------------------------------------------------------------
    # Building blocks
    # ------------------------------------------------------------------

    def issue_id(self) -> str:
        """Reserve an id that this store has never handed out or loaded."""
        for _ in range(_MAX_ID_ATTEMPTS):
            candidate = self._id_factory(self._prefix)
            if candidate not in self._issued:
                self._issued.add(candidate)
                return candidate
        msg = f"Could not allocate a unique {self._name} id after {_MAX_ID_ATTEMPTS} attempts"
        raise RuntimeError(msg)

    def build_record(self, data: dict[str, Any]) -> R:
        """Build a record from *data* without storing it.

        Raises:
            ValidationError: If *data* violates the record schema.
        """
        try:
            return self._build(data)
        except PydanticValidationError as exc:
            msg = f"Invalid {self._name}: {describe_validation_error(exc)}"
            raise ValidationError(msg, code="INVALID_RECORD") from exc

    @staticmethod
    def _record_id(record: R) -> str:
        return str(record.id)  # type: ignore[attr-defined]
