from datetime import date

import pytest

from travel_cli.models import SearchKind
from travel_cli.query_builder import (
    ValidationError,
    build_date_range,
    build_one_way,
    build_quick,
    build_round_trip,
    resolve_date_token,
)

TODAY = date(2025, 3, 31)


def test_one_way_arguments():
    query = build_one_way("blr", "sfo", "2025-12-15", adults=2, seat_type="business", cheapest_only=True)
    assert query.kind is SearchKind.ONE_WAY
    assert query.tool_name == "get_flights_on_date"
    assert query.to_arguments() == {
        "origin": "BLR",
        "destination": "SFO",
        "date": "2025-12-15",
        "adults": 2,
        "seat_type": "business",
        "return_cheapest_only": True,
    }


def test_round_trip_arguments():
    query = build_round_trip("del", "bom", "2025-12-15", "2025-12-20")
    assert query.tool_name == "get_round_trip_flights"
    args = query.to_arguments()
    assert args["departure_date"] == "2025-12-15"
    assert args["return_date"] == "2025-12-20"
    assert "date" not in args
    assert args["return_cheapest_only"] is False


def test_date_range_omits_missing_stay_bounds():
    query = build_date_range("BLR", "DEL", "2025-12-01", "2025-12-10")
    args = query.to_arguments()
    assert query.tool_name == "find_all_flights_in_range"
    assert args["start_date_str"] == "2025-12-01"
    assert args["end_date_str"] == "2025-12-10"
    assert "min_stay_days" not in args
    assert "max_stay_days" not in args


def test_date_range_keeps_zero_stay_bound():
    query = build_date_range("BLR", "DEL", "2025-12-01", "2025-12-10", min_stay_days=0, max_stay_days=4)
    args = query.to_arguments()
    assert args["min_stay_days"] == 0
    assert args["max_stay_days"] == 4


def test_date_range_rejects_negative_stay():
    with pytest.raises(ValidationError):
        build_date_range("BLR", "DEL", "2025-12-01", "2025-12-10", max_stay_days=-1)


@pytest.mark.parametrize("bad", ["15-12-2025", "2025/12/15", "2025-13-01", "2025-02-30", ""])
def test_invalid_dates_rejected(bad):
    with pytest.raises(ValidationError):
        build_one_way("BLR", "DEL", bad)


def test_passenger_count_validated():
    with pytest.raises(ValidationError):
        build_one_way("BLR", "DEL", "2025-12-15", adults=0)


def test_missing_airport_rejected():
    with pytest.raises(ValidationError):
        build_one_way(" ", "DEL", "2025-12-15")


def test_query_is_immutable():
    query = build_one_way("BLR", "DEL", "2025-12-15")
    with pytest.raises(AttributeError):
        query.origin = "SFO"


@pytest.mark.parametrize(
    "route, expected",
    [
        ("blr-del tomorrow", ("BLR", "DEL", "2025-04-01")),
        ("blr-del", ("BLR", "DEL", "2025-03-31")),
        ("blr del today", ("BLR", "DEL", "2025-03-31")),
        ("BLR-DEL 2025-05-02", ("BLR", "DEL", "2025-05-02")),
        ("blr - del   tomorrow", ("BLR", "DEL", "2025-04-01")),
    ],
)
def test_quick_routes(route, expected):
    query = build_quick(route, today=TODAY)
    assert (query.origin, query.destination, query.date) == expected
    assert query.adults == 1
    assert query.seat_type == "economy"
    assert query.cheapest_only is False


@pytest.mark.parametrize("route", ["blr", "", "blr-del yesterday", "blr-del 2025-5-2", "blr-del 2025-02-30"])
def test_quick_invalid(route):
    with pytest.raises(ValidationError):
        build_quick(route, today=TODAY)


def test_resolve_date_token_uses_today():
    assert resolve_date_token("Tomorrow", today=date(2025, 12, 31)) == "2026-01-01"
