"""End-to-end job that fetches one instrument's price series and summarizes it."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from jobs.config import DEFAULT_INTERVAL, DEFAULT_PERIOD
from pipelines.analytics import build_snapshot, snapshot_payload
from pipelines.formatting import format_currency, format_volume, price_axis_domain, trend
from pipelines.model import DashboardSnapshot, InstrumentMeta
from pipelines.sources.gold import ProviderError, fetch_price_records
from storage.exports import export_series

load_dotenv()

logger = logging.getLogger(__name__)

_TREND_STYLES = {"up": "green", "down": "red", "flat": "white"}


async def load_snapshot_async(
    instrument: InstrumentMeta,
    *,
    period: str = DEFAULT_PERIOD,
    interval: str = DEFAULT_INTERVAL,
    start_date: str | None = None,
    end_date: str | None = None,
) -> DashboardSnapshot:
    """Fetch raw rows for ``instrument`` and build a fresh snapshot."""

    logger.info("Fetching %s (%s)...", instrument.label, instrument.symbol)
    records = await fetch_price_records(
        instrument.symbol,
        period=period,
        interval=interval,
        start_date=start_date,
        end_date=end_date,
    )
    return build_snapshot(records, instrument, period=period)


def render_table(snapshot: DashboardSnapshot, console: Console | None = None) -> None:
    console = console or Console()
    summary = snapshot.summary
    if summary is None:
        console.print(f"No data available for {snapshot.symbol}. Try a different period or range.")
        return

    currency = summary.currency
    direction = trend(summary.change)
    table = Table(title=summary.instrument, show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Price", format_currency(summary.price, currency))
    table.add_row(
        "Change",
        f"[{_TREND_STYLES[direction]}]{format_currency(summary.change, currency)}"
        f" ({summary.change_percent:.2f}%)[/]",
    )
    table.add_row(
        "High / Low",
        f"{format_currency(summary.period_high, currency)} / "
        f"{format_currency(summary.period_low, currency)}",
    )
    table.add_row("Volume", format_volume(summary.volume))
    table.add_row("Avg Volume", format_volume(summary.avg_volume))
    table.add_row("Dividends", format_currency(summary.total_dividends, currency))
    domain = price_axis_domain(snapshot.series, summary)
    if domain is not None:
        table.add_row(
            "Price Axis",
            f"{format_currency(domain[0], currency)} to {format_currency(domain[1], currency)}",
        )
    table.add_row("Points", str(len(snapshot.series)))
    table.add_row("Last updated", snapshot.last_updated.strftime("%Y-%m-%d %H:%M:%S %Z"))
    console.print(table)


def main(
    instrument: InstrumentMeta,
    *,
    period: str = DEFAULT_PERIOD,
    interval: str = DEFAULT_INTERVAL,
    start_date: str | None = None,
    end_date: str | None = None,
    output_format: str = "table",
    output: str | None = None,
    console: Console | None = None,
) -> int:
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
    console = console or Console()
    try:
        snapshot = asyncio.run(
            load_snapshot_async(
                instrument,
                period=period,
                interval=interval,
                start_date=start_date,
                end_date=end_date,
            )
        )
    except ProviderError as exc:
        console.print(f"[red]{exc}[/red]")
        return 1

    if output_format == "json":
        console.print_json(json.dumps(snapshot_payload(snapshot)))
    else:
        render_table(snapshot, console)

    if output:
        written = export_series(snapshot.series, Path(output))
        logger.info("Exported %s points to %s.", len(snapshot.series), written)

    logger.info("Snapshot job finished (points=%s).", len(snapshot.series))
    return 0


__all__ = ["load_snapshot_async", "main", "render_table"]
