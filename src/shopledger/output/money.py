"""Compact money formatting for display (``KES 1.60K``, ``KES 2.50M``)."""

from __future__ import annotations

import math

DEFAULT_CURRENCY = "KES"


def format_money(amount: float | int | None, currency: str = DEFAULT_CURRENCY) -> str:
    """Format *amount* with a K/M suffix and two decimals.

    >>> format_money(1600)
    'KES 1.60K'
    >>> format_money(-2_500_000)
    'KES -2.50M'
    >>> format_money(None)
    'KES 0.00'
    """
    if not amount or not isinstance(amount, (int, float)) or math.isnan(amount):
        return f"{currency} 0.00"

    magnitude = abs(amount)
    if magnitude >= 1_000_000:
        text = f"{magnitude / 1_000_000:,.2f}M"
    elif magnitude >= 1_000:
        text = f"{magnitude / 1_000:,.2f}K"
    else:
        text = f"{magnitude:,.2f}"
    sign = "-" if amount < 0 else ""
    return f"{currency} {sign}{text}"
