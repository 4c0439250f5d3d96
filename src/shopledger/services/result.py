"""ServiceResult and ServiceError — what every shop operation returns.

Services never raise :class:`~shopledger.domain.errors.ShopError` to the
CLI. A failure comes back as ``ServiceResult(ok=False)`` carrying the
error's code and detail; a success carries the operation's payload. Both
serialize unchanged for ``--json``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from shopledger.domain.errors import ShopError

# Payload keys that hold the single record an operation touched.
RECORD_KEYS = ("item", "customer", "category")
# Payload keys that hold a page or list of records.
LIST_KEYS = ("items", "categories")


class ServiceError(BaseModel):
    """Error payload: a stable ``code`` for scripts, a message for people."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: ShopError) -> ServiceError:
        return cls(code=exc.code, message=exc.message, detail=exc.detail)


class ServiceResult(BaseModel):
    """Outcome of one shop operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Operation name (``add_item``, ``record_order``, ...).
        data: Operation payload; records use their camelCase JSON form.
        warnings: Non-fatal notes (plugin failures, no-op removals,
            pending prices).
        error: Set when ``ok`` is False.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None

    @classmethod
    def failure(cls, op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        """A failed result that did not originate from a raised error."""
        return cls(ok=False, op=op, error=ServiceError(code=code, message=message, detail=detail))

    @classmethod
    def from_exception(cls, op: str, exc: ShopError) -> ServiceResult:
        return cls(ok=False, op=op, error=ServiceError.from_exception(exc))

    @property
    def exit_code(self) -> int:
        """Process exit status for the CLI: 0 on success, 1 on failure."""
        return 0 if self.ok else 1

    @property
    def record_id(self) -> str | None:
        """Id of the record this operation added, changed, or looked up."""
        for key in RECORD_KEYS:
            record = self.data.get(key)
            if isinstance(record, dict) and "id" in record:
                return str(record["id"])
        return None

    @property
    def record_ids(self) -> list[str]:
        """Ids in a list payload, in display order (empty for other ops)."""
        for key in LIST_KEYS:
            rows = self.data.get(key)
            if isinstance(rows, list):
                return [str(row["id"]) for row in rows if isinstance(row, dict) and "id" in row]
        return []
