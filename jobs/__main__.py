"""Command-line entrypoint for gold price jobs."""

from __future__ import annotations

import argparse
import os
from pathlib import Path

from jobs.config import (
    DEFAULT_INTERVAL,
    DEFAULT_PERIOD,
    DEFAULT_SYMBOL,
    INSTRUMENTS,
    PERIOD_OPTIONS,
    get_instrument,
    is_valid_period,
)
from jobs.snapshot import main as run_snapshot
from pipelines.model import InstrumentMeta
from storage.exports import EXPORT_FORMATS


def _format_instrument(instrument: InstrumentMeta) -> str:
    return f"{instrument.symbol}: {instrument.label} currency={instrument.currency}"


def _resolve_instrument_from_cli(symbol: str) -> InstrumentMeta:
    instrument = get_instrument(symbol)
    if instrument is None:
        known = ", ".join(item.symbol for item in INSTRUMENTS)
        raise SystemExit(f"Unknown symbol '{symbol}'. Known symbols: {known}")
    return instrument


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Gold price signals job runner")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list-instruments", help="Show configured instruments")
    subparsers.add_parser("list-periods", help="Show supported lookback periods")

    snapshot_parser = subparsers.add_parser(
        "snapshot", help="Fetch a price series and print its key metrics"
    )
    snapshot_parser.add_argument("--symbol", default=DEFAULT_SYMBOL)
    snapshot_parser.add_argument("--period", default=DEFAULT_PERIOD)
    snapshot_parser.add_argument("--interval", default=DEFAULT_INTERVAL)
    snapshot_parser.add_argument("--start-date", help="Custom range start (YYYY-MM-DD)")
    snapshot_parser.add_argument("--end-date", help="Custom range end (YYYY-MM-DD)")
    snapshot_parser.add_argument("--format", choices=("table", "json"), default="table")
    snapshot_parser.add_argument(
        "--output", help="Export the series to a .csv or .parquet file"
    )
    snapshot_parser.add_argument(
        "--log-level",
        help="Override LOG_LEVEL for this invocation (e.g. DEBUG, INFO)",
    )

    args = parser.parse_args(argv)

    if args.command == "list-instruments":
        for instrument in INSTRUMENTS:
            print(_format_instrument(instrument))
        return 0

    if args.command == "list-periods":
        for option in PERIOD_OPTIONS:
            print(f"{option.value}: {option.label}")
        return 0

    if args.command == "snapshot":
        instrument = _resolve_instrument_from_cli(args.symbol)
        if not is_valid_period(args.period):
            parser.error(f"Unsupported period '{args.period}'.")
        if bool(args.start_date) != bool(args.end_date):
            parser.error("--start-date and --end-date must be given together.")
        if args.output and Path(args.output).suffix.lower() not in EXPORT_FORMATS:
            parser.error("--output must end with .csv or .parquet.")
        if args.log_level:
            os.environ["LOG_LEVEL"] = args.log_level
        try:
            return run_snapshot(
                instrument,
                period=args.period,
                interval=args.interval,
                start_date=args.start_date,
                end_date=args.end_date,
                output_format=args.format,
                output=args.output,
            )
        except ValueError as exc:
            parser.error(str(exc))

    parser.error("Unknown command")
    return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
