"""ID patterns, validation, and generation.

Every record id is ``{prefix}{10 lowercase hex chars}``. Ids are opaque to
the stores: the only guarantee the stores add on top of generation is
that a freshly assigned id never collides with a live one.

INVARIANT: IDs are permanent. Once assigned, an ID never changes.
"""

from __future__ import annotations

import re
import secrets

ID_PATTERNS: dict[str, re.Pattern[str]] = {
    "item": re.compile(r"^itm_[0-9a-f]{10}$"),
    "category": re.compile(r"^cat_[0-9a-f]{10}$"),
    "customer": re.compile(r"^cus_[0-9a-f]{10}$"),
    "order": re.compile(r"^ord_[0-9a-f]{10}$"),
}

TYPE_PREFIXES: dict[str, str] = {
    "item": "itm_",
    "category": "cat_",
    "customer": "cus_",
    "order": "ord_",
}

_HEX_LENGTH = 10


def generate_id(prefix: str) -> str:
    """Return ``{prefix}`` followed by 10 random lowercase hex characters."""
    return f"{prefix}{secrets.token_hex(_HEX_LENGTH // 2)}"


def validate_id(record_id: str, record_type: str) -> bool:
    """Check whether *record_id* matches the expected pattern for *record_type*."""
    pattern = ID_PATTERNS.get(record_type)
    if pattern is None:
        return False
    return pattern.match(record_id) is not None
