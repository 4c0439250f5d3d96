"""Output-mode dispatch for ServiceResult.

The CLI renders a ServiceResult for humans (Rich tables and panels), for
scripts (``--quiet``: ids only), or for machines (``--json``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from shopledger.output.money import DEFAULT_CURRENCY

if TYPE_CHECKING:
    from shopledger.services.result import ServiceResult


class OutputSettings(BaseModel):
    """How a result should be written."""

    model_config = {"frozen": True}

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    currency: str = DEFAULT_CURRENCY


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display according to *settings*."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)

    from shopledger.output.renderers import render_quiet, render_result

    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose, currency=settings.currency)
