from __future__ import annotations

import logging
from typing import Callable, Optional

import click

from .config import Settings, get_settings
from .display import show_listing
from .flight_service import FlightService, FlightServiceError
from .models import FlightQuery
from .query_builder import (
    ValidationError,
    build_date_range,
    build_one_way,
    build_quick,
    build_round_trip,
)
from .results import ViewMode, process_flights, resolve_view_mode

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(settings: Settings, verbose: int = 0) -> None:
    """Set up root logging on stderr (and a log file if configured)."""
    level = logging.getLevelName(settings.log_level)
    if verbose == 1:
        level = min(level, logging.INFO)
    elif verbose > 1:
        level = logging.DEBUG

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file))
    logging.basicConfig(level=level, handlers=handlers, format=LOG_FORMAT)


def _fail(ctx: click.Context, headline: str, exc: Exception) -> None:
    click.echo(click.style(headline, fg="red"), err=True)
    click.echo(click.style(str(exc), fg="red"), err=True)
    ctx.exit(1)


def _run_search(
    ctx: click.Context,
    build: Callable[[], FlightQuery],
    heading: Callable[[FlightQuery], str],
    *,
    sort_by: Optional[str],
    mode: Callable[[Settings], ViewMode],
) -> None:
    """Build the query, call the service and print the processed listing."""
    settings: Settings = ctx.obj["settings"]
    try:
        query = build()
        view = mode(settings)
    except ValidationError as exc:
        logger.warning("Invalid search: %s", exc)
        _fail(ctx, "Invalid search parameters", exc)
        return

    service: FlightService = ctx.obj.get("service") or FlightService.from_settings(settings)
    click.echo(
        click.style(
            f"Searching flights from {query.origin} to {query.destination}...",
            fg="bright_black",
        ),
        err=True,
    )
    try:
        records = service.search(query)
    except FlightServiceError as exc:
        logger.warning("Flight search failed: %s", exc)
        _fail(ctx, "Failed to search flights", exc)
        return

    listing = process_flights(records, sort_by=sort_by, mode=view)
    click.echo(click.style(f"Found {listing.total_raw} flights\n", fg="green"))
    click.echo(heading(query) + "\n")
    show_listing(listing, settings.currency_symbol)


def _route(query: FlightQuery, arrow: str = "→") -> str:
    return (
        f"{click.style(query.origin, fg='cyan')} {arrow} "
        f"{click.style(query.destination, fg='cyan')}"
    )


def _top_or_all(show_all: bool, limit: Optional[int], fastest: bool = False, quick: bool = False):
    def mode(settings: Settings) -> ViewMode:
        return resolve_view_mode(
            fastest=fastest,
            show_all=show_all,
            limit=limit,
            quick=quick,
            default_limit=settings.default_limit,
            quick_limit=settings.quick_limit,
        )

    return mode


# Shared options
def _common_options(func):
    func = click.option(
        "-c", "--class", "seat_class", default="economy", show_default=True,
        help="Seat class (economy/business)",
    )(func)
    func = click.option(
        "-p", "--passengers", default=1, type=int, show_default=True,
        help="Number of passengers",
    )(func)
    func = click.option("-t", "--to", "destination", required=True, help="Destination airport code (e.g., SFO)")(func)
    func = click.option("-f", "--from", "origin", required=True, help="Origin airport code (e.g., BLR)")(func)
    return func


def _listing_options(func):
    func = click.option(
        "-l", "--limit", type=click.IntRange(min=1), default=None,
        help="Number of results to show  [default: 10]",
    )(func)
    func = click.option("-a", "--all", "show_all", is_flag=True, help="Show all flights")(func)
    func = click.option("--cheapest", is_flag=True, help="Ask the service for the cheapest option only")(func)
    func = click.option(
        "-s", "--sort", "sort_by", default="price", show_default=True,
        help="Sort by (price/duration)",
    )(func)
    return func


@click.group()
@click.version_option(package_name="travel-cli")
@click.option("-v", "--verbose", count=True, help="Increase log verbosity (-v, -vv)")
@click.pass_context
def cli(ctx: click.Context, verbose: int) -> None:
    """Search flights through the Google Flights MCP server."""
    ctx.ensure_object(dict)
    if "settings" not in ctx.obj:
        ctx.obj["settings"] = get_settings()
    configure_logging(ctx.obj["settings"], verbose)


@cli.command()
@_common_options
@click.option("-d", "--date", required=True, help="Travel date (YYYY-MM-DD)")
@_listing_options
@click.option("--fastest", is_flag=True, help="Show only the fastest flight")
@click.pass_context
def search(ctx, origin, destination, passengers, seat_class, date, sort_by, cheapest, show_all, limit, fastest) -> None:
    """Search for one-way flights."""
    _run_search(
        ctx,
        lambda: build_one_way(
            origin, destination, date,
            adults=passengers, seat_type=seat_class, cheapest_only=cheapest,
        ),
        lambda q: click.style(
            f"✈️  Flights from {_route(q, 'to')} on {click.style(q.date, fg='yellow')}",
            bold=True,
        ),
        sort_by=sort_by.lower(),
        mode=_top_or_all(show_all, limit, fastest=fastest),
    )


@cli.command()
@_common_options
@click.option("-d", "--depart", "depart", required=True, help="Departure date (YYYY-MM-DD)")
@click.option("-r", "--return", "return_date", required=True, help="Return date (YYYY-MM-DD)")
@_listing_options
@click.pass_context
def roundtrip(ctx, origin, destination, passengers, seat_class, depart, return_date, sort_by, cheapest, show_all, limit) -> None:
    """Search for round-trip flights."""
    _run_search(
        ctx,
        lambda: build_round_trip(
            origin, destination, depart, return_date,
            adults=passengers, seat_type=seat_class, cheapest_only=cheapest,
        ),
        lambda q: click.style(f"✈️  Round-trip: {_route(q, '↔')}", bold=True)
        + "\n"
        + click.style(
            f"   Depart: {q.departure_date} | Return: {q.return_date}", fg="bright_black"
        ),
        sort_by=sort_by.lower(),
        mode=_top_or_all(show_all, limit),
    )


@cli.command()
@_common_options
@click.option("--start", "start", required=True, help="Start date of range (YYYY-MM-DD)")
@click.option("--end", "end", required=True, help="End date of range (YYYY-MM-DD)")
@click.option("--min-stay", type=int, default=None, help="Minimum stay duration in days")
@click.option("--max-stay", type=int, default=None, help="Maximum stay duration in days")
@click.option("-s", "--sort", "sort_by", default="price", show_default=True, help="Sort by (price/duration)")
@click.option("--cheapest", is_flag=True, help="Show only cheapest for each date pair")
@click.pass_context
def compare(ctx, origin, destination, passengers, seat_class, start, end, min_stay, max_stay, sort_by, cheapest) -> None:
    """Compare flights across a date range."""
    _run_search(
        ctx,
        lambda: build_date_range(
            origin, destination, start, end,
            min_stay_days=min_stay, max_stay_days=max_stay,
            adults=passengers, seat_type=seat_class, cheapest_only=cheapest,
        ),
        lambda q: click.style(f"✈️  Flights: {_route(q)}", bold=True)
        + "\n"
        + click.style(f"   Date range: {q.start_date} to {q.end_date}", fg="bright_black"),
        sort_by=sort_by.lower(),
        mode=lambda settings: ViewMode.all(),
    )


@cli.command()
@click.argument("route")
@click.pass_context
def quick(ctx, route: str) -> None:
    """Quick search for common routes (e.g., "blr-del tomorrow")."""
    _run_search(
        ctx,
        lambda: build_quick(route),
        lambda q: click.style(
            f"✈️  {_route(q)} on {click.style(q.date, fg='yellow')}", bold=True
        ),
        sort_by="price",
        mode=_top_or_all(False, None, quick=True),
    )


if __name__ == "__main__":
    cli()
