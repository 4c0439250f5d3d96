"""Customer identity resolution — canonical keys and input checks.

Canonical keys are the normalized forms of natural identifiers used for
uniqueness checks and lookup:

- phone: every non-digit character stripped (``"0712-345-678"`` and
  ``"0712345678"`` share the key ``"0712345678"``). Leading zeros and
  country-code prefixes are NOT normalized, so ``"712345678"`` is a
  different key.
- email: lowercased; blank addresses have no key.
"""

from __future__ import annotations

import re

_NON_DIGIT = re.compile(r"\D")
_EMAIL_SHAPE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def phone_key(phone: str | None) -> str:
    """Digits-only canonical form of *phone* (empty string when blank)."""
    if not phone:
        return ""
    return _NON_DIGIT.sub("", phone)


def email_key(email: str | None) -> str | None:
    """Lowercased canonical form of *email*, or None when blank."""
    if not email or not email.strip():
        return None
    return email.strip().lower()


def validate_email(email: str | None) -> bool:
    """True for a blank address or one shaped like ``local@domain.tld``."""
    if not email or not email.strip():
        return True
    return _EMAIL_SHAPE.match(email.strip()) is not None


def validate_phone(phone: str) -> bool:
    """Check the digit count of a local phone number.

    At most 10 digits, or 9 when the number starts with ``9`` (no trunk
    prefix). Numbers without any digit are rejected.
    """
    digits = phone_key(phone)
    if not digits:
        return False
    if digits.startswith("9"):
        return len(digits) <= 9
    return len(digits) <= 10


def format_phone(phone: str) -> str:
    """Group the digits of *phone* with dashes for display.

    ``0712345678`` -> ``0712-345-678``; ``712345678`` -> ``712-345-678``.
    Digits beyond the allowed length are dropped.
    """
    digits = phone_key(phone)
    if digits.startswith("9"):
        digits = digits[:9]
        cuts = (3, 6)
    elif digits.startswith("0"):
        digits = digits[:10]
        cuts = (4, 7)
    else:
        digits = digits[:10]
        cuts = (3, 6)

    parts = [digits[: cuts[0]], digits[cuts[0] : cuts[1]], digits[cuts[1] :]]
    return "-".join(p for p in parts if p)
