"""Build :class:`FlightQuery` objects from command parameters.

Every builder validates its input and raises :class:`ValidationError`
before any service call is attempted.
"""

from __future__ import annotations

import datetime as dt
import re
from typing import Optional

from .models import FlightQuery, SearchKind

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_ROUTE_SPLIT_RE = re.compile(r"-+")


class ValidationError(ValueError):
    """Invalid search parameters."""


def parse_iso_date(value: str, *, field: str = "date") -> str:
    """Return *value* if it is a strict ``YYYY-MM-DD`` calendar date."""
    text = (value or "").strip()
    if not _ISO_DATE_RE.match(text):
        raise ValidationError(
            f"Invalid {field} {value!r}. Use YYYY-MM-DD format"
        )
    try:
        dt.date.fromisoformat(text)
    except ValueError as exc:
        raise ValidationError(f"Invalid {field} {value!r}: {exc}") from exc
    return text


def _airport(code: str, field: str) -> str:
    cleaned = (code or "").strip().upper()
    if not cleaned:
        raise ValidationError(f"Missing {field} airport code")
    return cleaned


def _adults(adults: int) -> int:
    if adults < 1:
        raise ValidationError("Number of passengers must be at least 1")
    return adults


def build_one_way(
    origin: str,
    destination: str,
    date: str,
    *,
    adults: int = 1,
    seat_type: str = "economy",
    cheapest_only: bool = False,
) -> FlightQuery:
    return FlightQuery(
        kind=SearchKind.ONE_WAY,
        origin=_airport(origin, "origin"),
        destination=_airport(destination, "destination"),
        date=parse_iso_date(date),
        adults=_adults(adults),
        seat_type=seat_type,
        cheapest_only=cheapest_only,
    )


def build_round_trip(
    origin: str,
    destination: str,
    departure_date: str,
    return_date: str,
    *,
    adults: int = 1,
    seat_type: str = "economy",
    cheapest_only: bool = False,
) -> FlightQuery:
    return FlightQuery(
        kind=SearchKind.ROUND_TRIP,
        origin=_airport(origin, "origin"),
        destination=_airport(destination, "destination"),
        departure_date=parse_iso_date(departure_date, field="departure date"),
        return_date=parse_iso_date(return_date, field="return date"),
        adults=_adults(adults),
        seat_type=seat_type,
        cheapest_only=cheapest_only,
    )


def build_date_range(
    origin: str,
    destination: str,
    start_date: str,
    end_date: str,
    *,
    min_stay_days: Optional[int] = None,
    max_stay_days: Optional[int] = None,
    adults: int = 1,
    seat_type: str = "economy",
    cheapest_only: bool = False,
) -> FlightQuery:
    """Query comparing every date pair between *start_date* and *end_date*.

    Stay bounds are passed through only when given; ``0`` is a valid bound.
    """
    for name, bound in (("minimum", min_stay_days), ("maximum", max_stay_days)):
        if bound is not None and bound < 0:
            raise ValidationError(f"The {name} stay cannot be negative")
    return FlightQuery(
        kind=SearchKind.DATE_RANGE,
        origin=_airport(origin, "origin"),
        destination=_airport(destination, "destination"),
        start_date=parse_iso_date(start_date, field="start date"),
        end_date=parse_iso_date(end_date, field="end date"),
        min_stay_days=min_stay_days,
        max_stay_days=max_stay_days,
        adults=_adults(adults),
        seat_type=seat_type,
        cheapest_only=cheapest_only,
    )


def resolve_date_token(token: str, today: Optional[dt.date] = None) -> str:
    """Resolve ``today``/``tomorrow`` or a strict ISO date to ``YYYY-MM-DD``."""
    base = today or dt.date.today()
    word = token.strip().lower()
    if word == "today":
        return base.isoformat()
    if word == "tomorrow":
        return (base + dt.timedelta(days=1)).isoformat()
    if not _ISO_DATE_RE.match(word):
        raise ValidationError(
            'Invalid date. Use YYYY-MM-DD format or "today"/"tomorrow"'
        )
    return parse_iso_date(word)


def build_quick(route: str, today: Optional[dt.date] = None) -> FlightQuery:
    """Build a one-way query from shorthand such as ``"blr-del tomorrow"``."""
    parts = []
    for token in (route or "").lower().split():
        if _ISO_DATE_RE.match(token):
            parts.append(token)
        else:
            parts.extend(p for p in _ROUTE_SPLIT_RE.split(token) if p)
    if len(parts) < 2:
        raise ValidationError("Usage: travel-cli quick <from>-<to> [date]")

    date = resolve_date_token(parts[2] if len(parts) > 2 else "today", today)
    return build_one_way(parts[0], parts[1], date)


__all__ = [
    "ValidationError",
    "parse_iso_date",
    "build_one_way",
    "build_round_trip",
    "build_date_range",
    "resolve_date_token",
    "build_quick",
]
