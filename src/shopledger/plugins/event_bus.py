"""Synchronous lifecycle event dispatch via pluggy.

Each dispatch runs every registered hook implementation in-process before
returning. A failing plugin is logged and reported back to the caller,
which turns it into a warning on the service result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from shopledger.domain.models import utc_now

if TYPE_CHECKING:
    from datetime import datetime

    from shopledger.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchRecord:
    """Outcome of one dispatched event."""

    hook_name: str
    payload: dict[str, Any]
    dispatched_at: datetime
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class EventBus:
    """Dispatch lifecycle events to plugins.

    Parameters:
        plugin_manager: Loaded PluginManager for hook dispatch.
        history_limit: How many recent dispatch records to keep.
    """

    def __init__(self, plugin_manager: PluginManager, *, history_limit: int = 100) -> None:
        self._pm = plugin_manager
        self._history_limit = history_limit
        self._history: list[DispatchRecord] = []

    def dispatch(self, hook_name: str, payload: dict[str, Any]) -> DispatchRecord:
        """Call *hook_name* on every plugin with *payload* as keyword arguments.

        Never raises for plugin failures; the returned record carries the
        error text instead.
        """
        error: str | None = None
        hook_fn = getattr(self._pm.hook, hook_name, None)
        if hook_fn is None:
            error = f"Unknown hook {hook_name!r}"
            logger.warning(error)
        else:
            try:
                hook_fn(**payload)
            except Exception as exc:
                logger.warning("Hook %s failed: %s", hook_name, exc, exc_info=True)
                error = f"{type(exc).__name__}: {exc}"

        record = DispatchRecord(
            hook_name=hook_name,
            payload=dict(payload),
            dispatched_at=utc_now(),
            error=error,
        )
        self._history.append(record)
        del self._history[: -self._history_limit]
        return record

    @property
    def history(self) -> list[DispatchRecord]:
        """Recent dispatch records, oldest first."""
        return list(self._history)
