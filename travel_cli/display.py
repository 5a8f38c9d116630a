"""Terminal rendering of flight listings with ``click`` styling."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import click

from .models import FlightListing, FlightRecord, FlightSummary, TruncationNotice
from .parsers import format_minutes

HEADERS = ("Airline", "Departure", "Arrival", "Duration", "Stops", "Price")

# (plain text, rendered text) – widths are computed on the plain text
Cell = Tuple[str, str]


def _cell(text: str, **style) -> Cell:
    return text, click.style(text, **style) if style else text


def _stops_cell(stops: int) -> Cell:
    if stops == 0:
        return _cell("Non-stop", fg="green")
    if stops == 1:
        return _cell("1 stop", fg="yellow")
    return _cell(f"{stops} stops", fg="red")


def _price_cell(price: Optional[str]) -> Cell:
    if price is None:
        return _cell("N/A", fg="bright_black")
    return _cell(price, fg="green")


def _arrival_cell(rec: FlightRecord) -> Cell:
    if not rec.arrival_day_offset:
        return _cell(rec.arrival)
    offset = f" {rec.arrival_day_offset}"
    return rec.arrival + offset, rec.arrival + click.style(offset, fg="red")


def _row(rec: FlightRecord) -> List[Cell]:
    return [
        _cell(rec.airline, fg="white"),
        _cell(rec.departure),
        _arrival_cell(rec),
        _cell(rec.duration, fg="cyan"),
        _stops_cell(rec.stops),
        _price_cell(rec.price),
    ]


def format_table(records: Sequence[FlightRecord]) -> str:
    rows = [_row(rec) for rec in records]
    widths = [len(h) for h in HEADERS]
    for row in rows:
        for i, (text, _) in enumerate(row):
            widths[i] = max(widths[i], len(text))

    sep = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
    lines = [sep]
    lines.append(
        "| "
        + " | ".join(click.style(h.ljust(w), bold=True) for h, w in zip(HEADERS, widths))
        + " |"
    )
    lines.append(sep)
    for row in rows:
        cells = [
            rendered + " " * (w - len(text))
            for (text, rendered), w in zip(row, widths)
        ]
        lines.append("| " + " | ".join(cells) + " |")
    lines.append(sep)
    return "\n".join(lines)


def format_notice(notice: TruncationNotice) -> str:
    return click.style(
        f"Showing {notice.shown} of {notice.total} flights. "
        "Use --all to see all results.",
        fg="bright_black",
    )


def format_summary(summary: FlightSummary, currency_symbol: str = "₹") -> str:
    lines = [click.style("Summary", bold=True, underline=True)]
    lines.append(f"  Total flights found: {click.style(str(summary.total), fg='cyan')}")
    lines.append(f"  Non-stop flights: {click.style(str(summary.non_stop), fg='green')}")
    if summary.price_range is not None:
        low, high = summary.price_range
        lines.append(
            "  Price range: "
            f"{click.style(f'{currency_symbol}{low:,}', fg='green')} - "
            f"{click.style(f'{currency_symbol}{high:,}', fg='yellow')}"
        )
    if summary.fastest_minutes is not None:
        lines.append(
            "  Fastest flight: "
            f"{click.style(format_minutes(summary.fastest_minutes), fg='cyan')}"
        )
    return "\n".join(lines)


def show_listing(listing: FlightListing, currency_symbol: str = "₹") -> None:
    """Print table, optional truncation notice and summary."""
    if listing.flights:
        click.echo(format_table(listing.flights))
    else:
        click.echo(click.style("No flights found.", fg="yellow"))
    if listing.notice is not None:
        click.echo("\n" + format_notice(listing.notice))
    click.echo("\n" + format_summary(listing.summary, currency_symbol))


__all__ = ["format_table", "format_notice", "format_summary", "show_listing"]
