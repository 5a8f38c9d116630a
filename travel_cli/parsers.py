from __future__ import annotations

import re
from typing import Optional

# "2 hr 30 min", "3 hr", "11 hr 5min"
_DURATION_RE = re.compile(r"(\d+)\s*hr\s*(\d+)?\s*(?:min)?")
# first run starting with a digit, thousands separators allowed
_PRICE_RE = re.compile(r"\d[\d,]*")

UNAVAILABLE_PRICES = frozenset({"price unavailable", "unavailable"})


def parse_duration_minutes(text: Optional[str]) -> Optional[int]:
    """Return the duration in minutes, or ``None`` if *text* is unparseable."""
    if not text:
        return None
    match = _DURATION_RE.search(text)
    if not match:
        return None
    hours = int(match.group(1))
    minutes = int(match.group(2)) if match.group(2) else 0
    return hours * 60 + minutes


def is_unavailable_price(text: Optional[str]) -> bool:
    """Return ``True`` for empty prices and the upstream "unavailable" marker."""
    if text is None:
        return True
    cleaned = text.strip()
    return not cleaned or cleaned.lower() in UNAVAILABLE_PRICES


def normalize_price(text: Optional[str]) -> Optional[str]:
    """Map the "unavailable" marker to ``None`` and keep real prices as-is."""
    if is_unavailable_price(text):
        return None
    return text.strip()


def parse_price_amount(text: Optional[str]) -> Optional[int]:
    """Return the integer amount of a display price such as ``"₹12,345"``.

    ``None`` is returned when the price is missing, marked unavailable or
    contains no digits.
    """
    if is_unavailable_price(text):
        return None
    match = _PRICE_RE.search(text)
    if not match:
        return None
    return int(match.group(0).replace(",", ""))


def format_minutes(total_minutes: Optional[int]) -> str:
    """Convert minutes to a compact string, e.g. 85 -> ``"1h 25m"``."""
    if total_minutes is None or total_minutes < 0:
        return ""
    hours, mins = divmod(total_minutes, 60)
    return f"{hours}h {mins}m"


__all__ = [
    "UNAVAILABLE_PRICES",
    "parse_duration_minutes",
    "is_unavailable_price",
    "normalize_price",
    "parse_price_amount",
    "format_minutes",
]
