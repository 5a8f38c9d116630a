"""Result processing: deduplicate, rank, select and summarize flights.

Everything here is pure and works on in-memory lists; unparseable prices
and durations never raise, they sort last and are left out of aggregates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import pandas as pd

from .models import FlightListing, FlightRecord, FlightSummary, SortBy, TruncationNotice
from .query_builder import ValidationError

logger = logging.getLogger(__name__)

FASTEST = "fastest"
TOP = "top"
ALL = "all"


# ────────────────────────────────────────────────────────────────
# Deduplication and ranking
# ────────────────────────────────────────────────────────────────


def dedupe(records: Iterable[FlightRecord]) -> List[FlightRecord]:
    """Keep the first record for every (airline, departure, arrival)."""
    seen = set()
    out: List[FlightRecord] = []
    for rec in records:
        key = rec.dedupe_key
        if key in seen:
            continue
        seen.add(key)
        out.append(rec)
    return out


def _sort_value(rec: FlightRecord, criterion: SortBy) -> Optional[int]:
    if criterion is SortBy.PRICE:
        return rec.price_amount
    return rec.duration_minutes


def _as_sort_by(criterion: Union[SortBy, str, None]) -> Optional[SortBy]:
    if isinstance(criterion, SortBy):
        return criterion
    try:
        return SortBy(criterion)
    except ValueError:
        return None


def rank(
    records: Sequence[FlightRecord], criterion: Union[SortBy, str, None]
) -> List[FlightRecord]:
    """Return *records* sorted ascending by price or duration.

    The sort is stable and unparseable values go after every parseable
    one. Any other *criterion* keeps the input order.
    """
    sort_by = _as_sort_by(criterion)
    if sort_by is None:
        logger.debug("No known sort criterion %r, keeping input order", criterion)
        return list(records)

    def key(rec: FlightRecord) -> Tuple[bool, int]:
        value = _sort_value(rec, sort_by)
        return (value is None, value if value is not None else 0)

    return sorted(records, key=key)


# ────────────────────────────────────────────────────────────────
# View selection
# ────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class ViewMode:
    kind: str
    limit: Optional[int] = None

    @classmethod
    def fastest(cls) -> "ViewMode":
        return cls(FASTEST)

    @classmethod
    def top(cls, limit: int) -> "ViewMode":
        if limit < 1:
            raise ValidationError("Number of results to show must be at least 1")
        return cls(TOP, limit)

    @classmethod
    def all(cls) -> "ViewMode":
        return cls(ALL)


def resolve_view_mode(
    *,
    fastest: bool = False,
    show_all: bool = False,
    limit: Optional[int] = None,
    quick: bool = False,
    default_limit: int = 10,
    quick_limit: int = 5,
) -> ViewMode:
    """Pick the view: fastest wins over all, otherwise the top N."""
    if fastest:
        return ViewMode.fastest()
    if show_all:
        return ViewMode.all()
    if limit is None:
        limit = quick_limit if quick else default_limit
    return ViewMode.top(limit)


def select_view(
    records: Sequence[FlightRecord], mode: ViewMode
) -> Tuple[List[FlightRecord], Optional[TruncationNotice]]:
    """Apply *mode* and return the visible records plus a truncation notice."""
    if mode.kind == FASTEST:
        best = rank(records, SortBy.DURATION)[:1]
        return best, None
    if mode.kind == ALL or mode.limit is None:
        return list(records), None
    if len(records) <= mode.limit:
        return list(records), None
    notice = TruncationNotice(
        shown=mode.limit, total=len(records), limit=mode.limit
    )
    return list(records[: mode.limit]), notice


# ────────────────────────────────────────────────────────────────
# Summary
# ────────────────────────────────────────────────────────────────


def _int_or_none(series: pd.Series, how: str) -> Optional[int]:
    values = series.dropna()
    if values.empty:
        return None
    return int(getattr(values, how)())


def summarize(records: Sequence[FlightRecord]) -> FlightSummary:
    """Aggregate counts, price range and fastest duration over *records*."""
    df = pd.DataFrame(
        {
            "stops": [rec.stops for rec in records],
            "price": pd.array([rec.price_amount for rec in records], dtype="Int64"),
            "minutes": pd.array([rec.duration_minutes for rec in records], dtype="Int64"),
        },
        columns=["stops", "price", "minutes"],
    )
    return FlightSummary(
        total=len(df),
        non_stop=int((df["stops"] == 0).sum()),
        min_price=_int_or_none(df["price"], "min"),
        max_price=_int_or_none(df["price"], "max"),
        fastest_minutes=_int_or_none(df["minutes"], "min"),
    )


# ────────────────────────────────────────────────────────────────
# Pipeline
# ────────────────────────────────────────────────────────────────


def process_flights(
    records: Sequence[FlightRecord],
    *,
    sort_by: Union[SortBy, str, None],
    mode: ViewMode,
) -> FlightListing:
    """Run dedupe, rank and view selection; summarize the full deduplicated list."""
    unique = dedupe(records)
    if len(unique) != len(records):
        logger.info("Dropped %d duplicate offers", len(records) - len(unique))

    if mode.kind == FASTEST:
        shown, notice = select_view(unique, mode)
    else:
        shown, notice = select_view(rank(unique, sort_by), mode)

    return FlightListing(
        flights=shown,
        summary=summarize(unique),
        notice=notice,
        total_raw=len(records),
    )


__all__ = [
    "dedupe",
    "rank",
    "ViewMode",
    "resolve_view_mode",
    "select_view",
    "summarize",
    "process_flights",
]
