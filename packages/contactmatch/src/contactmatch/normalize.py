"""Value normalization for contact field comparison."""

from __future__ import annotations

import re
from typing import Any

_NON_DIGIT = re.compile(r"\D")


def normalize_for_comparison(value: Any) -> str:
    """Lowercase, trim and collapse internal whitespace to single spaces.

    None and empty values normalize to "".
    """
    if value is None:
        return ""
    return " ".join(str(value).lower().split())


def values_match(a: Any, b: Any) -> bool:
    """Case-insensitive, whitespace-collapsed equality. Blank never matches."""
    na = normalize_for_comparison(a)
    nb = normalize_for_comparison(b)
    if not na or not nb:
        return False
    return na == nb


def phone_digits(value: Any) -> str:
    """Strip every non-digit character from a phone number."""
    if value is None:
        return ""
    return _NON_DIGIT.sub("", str(value))


def is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def mask_value(value: Any) -> str | None:
    """Mask an email or phone number for log output."""
    if is_blank(value):
        return None
    s = str(value).strip()
    if "@" in s:
        local, _, domain = s.partition("@")
        return f"{local[:1]}***@{domain}"
    digits = phone_digits(s)
    if digits:
        return f"***{digits[-4:]}"
    return f"{s[:1]}***"
