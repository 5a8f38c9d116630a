import json
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from travel_cli.config import Settings
from travel_cli.flight_service import (
    FlightService,
    FlightServiceError,
    decode_flights,
    record_from_payload,
)
from travel_cli.query_builder import build_one_way


def make_payload():
    return {
        "flights": [
            {
                "is_best": True,
                "name": "IndiGo",
                "departure": "6:00 AM on Mon, Oct 20",
                "arrival": "8:45 AM on Mon, Oct 20",
                "arrival_time_ahead": "",
                "duration": "2 hr 45 min",
                "stops": 0,
                "delay": None,
                "price": "₹5,200",
            },
            {
                "is_best": False,
                "name": "Air India",
                "departure": "11:30 PM on Mon, Oct 20",
                "arrival": "2:10 AM on Tue, Oct 21",
                "arrival_time_ahead": "+1",
                "duration": "2 hr 40 min",
                "stops": 1,
                "delay": None,
                "price": "Price unavailable",
            },
        ]
    }


def tool_result(text, is_error=False):
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=text)], isError=is_error)


class FakeClient:
    """Async context manager standing in for ``fastmcp.Client``."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []
        self.entered = False
        self.exited = False

    async def __aenter__(self):
        self.entered = True
        return self

    async def __aexit__(self, *exc):
        self.exited = True
        return False

    async def call_tool_mcp(self, name, arguments):
        self.calls.append((name, arguments))
        if self.error:
            raise self.error
        return self.result


def test_search_decodes_records_and_closes_session():
    client = FakeClient(tool_result(json.dumps(make_payload())))
    service = FlightService(client_factory=lambda: client)

    query = build_one_way("blr", "del", "2025-10-20")
    flights = service.search(query)

    assert client.entered and client.exited
    assert client.calls == [("get_flights_on_date", query.to_arguments())]
    assert [f.airline for f in flights] == ["IndiGo", "Air India"]
    assert flights[0].arrival_day_offset is None
    assert flights[1].arrival_day_offset == "+1"
    assert flights[1].price is None
    assert flights[0].price_amount == 5200


def test_transport_failure_is_wrapped():
    client = FakeClient(error=ConnectionError("npx not found"))
    service = FlightService(client_factory=lambda: client)
    with pytest.raises(FlightServiceError, match="npx not found"):
        service.search(build_one_way("BLR", "DEL", "2025-10-20"))


def test_tool_error_result():
    client = FakeClient(tool_result("Invalid airport code", is_error=True))
    service = FlightService(client_factory=lambda: client)
    with pytest.raises(FlightServiceError, match="Invalid airport code"):
        service.call_tool("get_flights_on_date", {})


def test_invalid_json_result():
    client = FakeClient(tool_result("<html>oops</html>"))
    service = FlightService(client_factory=lambda: client)
    with pytest.raises(FlightServiceError, match="invalid JSON"):
        service.call_tool("get_flights_on_date", {})


def test_empty_content_result():
    client = FakeClient(SimpleNamespace(content=[], isError=False))
    service = FlightService(client_factory=lambda: client)
    with pytest.raises(FlightServiceError, match="no content"):
        service.call_tool("get_flights_on_date", {})


@pytest.mark.parametrize("payload", [{}, {"data": []}, {"flights": "none"}, []])
def test_decode_flights_requires_flights_list(payload):
    with pytest.raises(FlightServiceError):
        decode_flights(payload)


def test_decode_empty_flights():
    assert decode_flights({"flights": []}) == []


@pytest.mark.parametrize("stops", ["1", -1, None, 1.5, True])
def test_record_requires_integer_stops(stops):
    item = make_payload()["flights"][0]
    item["stops"] = stops
    with pytest.raises(FlightServiceError):
        record_from_payload(item)


def test_record_requires_airline():
    item = make_payload()["flights"][0]
    del item["name"]
    with pytest.raises(FlightServiceError, match="name"):
        record_from_payload(item)


def test_record_without_price_is_unavailable():
    item = make_payload()["flights"][0]
    del item["price"]
    assert record_from_payload(item).price is None


def test_from_settings_uses_configured_command():
    settings = Settings(mcp_command="node", mcp_args="server.js --stdio", timeout_s=30)
    service = FlightService.from_settings(settings)
    assert service.command == "node"
    assert service.args == ["server.js", "--stdio"]
    assert service.timeout_s == 30


@patch("travel_cli.flight_service.Client")
@patch("travel_cli.flight_service.StdioTransport")
def test_default_client_uses_stdio_transport(mock_transport, mock_client):
    service = FlightService("npx", ["-y", "flights-mcp"], timeout_s=15)
    service._default_client()
    mock_transport.assert_called_once_with(command="npx", args=["-y", "flights-mcp"])
    mock_client.assert_called_once_with(mock_transport.return_value, timeout=15)
