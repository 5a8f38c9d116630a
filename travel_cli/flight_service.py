from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Callable, Dict, List, Optional

from fastmcp import Client
from fastmcp.client.transports import StdioTransport

from .config import DEFAULT_MCP_ARGS, get_settings
from .models import FlightQuery, FlightRecord
from .parsers import normalize_price

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "departure", "arrival", "duration", "stops")


class FlightServiceError(RuntimeError):
    """Failure talking to the flights MCP server or decoding its answer."""


class FlightService:
    """
    Client for the Google Flights MCP server, spoken to over stdio.

    Every :meth:`search` opens the server process, calls one tool and
    closes the session again.
    """

    def __init__(
        self,
        command: str = "npx",
        args: Optional[List[str]] = None,
        *,
        timeout_s: float = 120.0,
        client_factory: Optional[Callable[[], Any]] = None,
    ) -> None:
        self.command = command
        self.args = list(args if args is not None else DEFAULT_MCP_ARGS)
        self.timeout_s = timeout_s
        self._client_factory = client_factory or self._default_client

    @classmethod
    def from_settings(cls, settings=None) -> "FlightService":
        settings = settings or get_settings()
        return cls(
            settings.mcp_command,
            settings.mcp_args,
            timeout_s=settings.timeout_s,
        )

    # ──────────────────────────────────────────────────────────

    def search(self, query: FlightQuery) -> List[FlightRecord]:
        """Run *query* and return the raw, undeduplicated flight records."""
        logger.info(
            "Calling %s for %s ➔ %s", query.tool_name, query.origin, query.destination
        )
        payload = self.call_tool(query.tool_name, query.to_arguments())
        flights = decode_flights(payload)
        logger.info("Service returned %d flights", len(flights))
        return flights

    def call_tool(self, name: str, arguments: Dict[str, Any]) -> Any:
        """Call tool *name* and return its decoded JSON result."""
        logger.debug("Tool %s arguments: %s", name, arguments)
        try:
            result = asyncio.run(self._call_tool_async(name, arguments))
        except FlightServiceError:
            raise
        except Exception as exc:
            raise FlightServiceError(f"{name} failed: {exc}") from exc
        return _result_payload(name, result)

    async def _call_tool_async(self, name: str, arguments: Dict[str, Any]) -> Any:
        async with self._client_factory() as client:
            return await client.call_tool_mcp(name, arguments)

    def _default_client(self) -> Client:
        transport = StdioTransport(command=self.command, args=self.args)
        return Client(transport, timeout=self.timeout_s)


def _result_payload(name: str, result: Any) -> Any:
    texts = [
        item.text for item in (getattr(result, "content", None) or [])
        if getattr(item, "text", None) is not None
    ]
    if getattr(result, "isError", False):
        detail = texts[0] if texts else "unknown error"
        raise FlightServiceError(f"{name} returned an error: {detail}")
    if not texts:
        raise FlightServiceError(f"{name} returned no content")
    try:
        return json.loads(texts[0])
    except json.JSONDecodeError as exc:
        raise FlightServiceError(
            f"{name} returned invalid JSON: {texts[0][:120]}"
        ) from exc


def record_from_payload(item: Dict[str, Any]) -> FlightRecord:
    """Map one flight object of the service response to a FlightRecord."""
    if not isinstance(item, dict):
        raise FlightServiceError(f"Malformed flight entry: {item!r}")
    missing = [key for key in REQUIRED_FIELDS if item.get(key) is None]
    if missing:
        raise FlightServiceError(f"Flight entry missing {', '.join(missing)}")

    stops = item["stops"]
    if isinstance(stops, bool) or not isinstance(stops, int) or stops < 0:
        raise FlightServiceError(f"Invalid stop count: {stops!r}")

    price = item.get("price")
    return FlightRecord(
        airline=str(item["name"]),
        departure=str(item["departure"]),
        arrival=str(item["arrival"]),
        duration=str(item["duration"]),
        stops=stops,
        price=normalize_price(str(price)) if price is not None else None,
        arrival_day_offset=item.get("arrival_time_ahead") or None,
    )


def decode_flights(payload: Any) -> List[FlightRecord]:
    """Decode a ``{"flights": [...]}`` response."""
    if not isinstance(payload, dict) or "flights" not in payload:
        raise FlightServiceError("Response has no 'flights' list")
    flights = payload["flights"]
    if not isinstance(flights, list):
        raise FlightServiceError("Response 'flights' is not a list")
    return [record_from_payload(item) for item in flights]


__all__ = [
    "FlightService",
    "FlightServiceError",
    "decode_flights",
    "record_from_payload",
]
