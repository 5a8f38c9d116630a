"""Data models used throughout the project."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .parsers import parse_duration_minutes, parse_price_amount


class SearchKind(str, Enum):
    ONE_WAY = "one_way"
    ROUND_TRIP = "round_trip"
    DATE_RANGE = "date_range"


class SortBy(str, Enum):
    PRICE = "price"
    DURATION = "duration"


TOOL_NAMES = {
    SearchKind.ONE_WAY: "get_flights_on_date",
    SearchKind.ROUND_TRIP: "get_round_trip_flights",
    SearchKind.DATE_RANGE: "find_all_flights_in_range",
}


@dataclass(frozen=True, slots=True)
class FlightRecord:
    airline: str
    departure: str
    arrival: str
    duration: str
    stops: int
    price: Optional[str]
    arrival_day_offset: Optional[str] = None

    @property
    def dedupe_key(self) -> Tuple[str, str, str]:
        return (self.airline, self.departure, self.arrival)

    @property
    def price_amount(self) -> Optional[int]:
        return parse_price_amount(self.price)

    @property
    def duration_minutes(self) -> Optional[int]:
        return parse_duration_minutes(self.duration)


@dataclass(frozen=True, slots=True)
class FlightQuery:
    """Structured request for the flight-query service.

    Only the date fields matching ``kind`` are set; the stay bounds are
    ``None`` unless the caller supplied them.
    """

    kind: SearchKind
    origin: str
    destination: str
    adults: int = 1
    seat_type: str = "economy"
    cheapest_only: bool = False
    date: Optional[str] = None
    departure_date: Optional[str] = None
    return_date: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    min_stay_days: Optional[int] = None
    max_stay_days: Optional[int] = None

    @property
    def tool_name(self) -> str:
        return TOOL_NAMES[self.kind]

    def to_arguments(self) -> Dict[str, Any]:
        """Return the tool arguments understood by the flights MCP server."""
        args: Dict[str, Any] = {
            "origin": self.origin,
            "destination": self.destination,
        }
        if self.kind is SearchKind.ONE_WAY:
            args["date"] = self.date
        elif self.kind is SearchKind.ROUND_TRIP:
            args["departure_date"] = self.departure_date
            args["return_date"] = self.return_date
        else:
            args["start_date_str"] = self.start_date
            args["end_date_str"] = self.end_date
        args["adults"] = self.adults
        args["seat_type"] = self.seat_type
        args["return_cheapest_only"] = self.cheapest_only

        if self.min_stay_days is not None:
            args["min_stay_days"] = self.min_stay_days
        if self.max_stay_days is not None:
            args["max_stay_days"] = self.max_stay_days
        return args


@dataclass(frozen=True, slots=True)
class FlightSummary:
    total: int
    non_stop: int
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    fastest_minutes: Optional[int] = None

    @property
    def price_range(self) -> Optional[Tuple[int, int]]:
        if self.min_price is None or self.max_price is None:
            return None
        return (self.min_price, self.max_price)


@dataclass(frozen=True, slots=True)
class TruncationNotice:
    shown: int
    total: int
    limit: int


@dataclass(slots=True)
class FlightListing:
    flights: List[FlightRecord]
    summary: FlightSummary
    notice: Optional[TruncationNotice] = None
    total_raw: int = 0


__all__ = [
    "SearchKind",
    "SortBy",
    "TOOL_NAMES",
    "FlightRecord",
    "FlightQuery",
    "FlightSummary",
    "TruncationNotice",
    "FlightListing",
]
