"""FastAPI service exposing normalized gold price series and KPI summaries."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from dotenv import load_dotenv
from fastapi import BackgroundTasks, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from jobs.config import DEFAULT_SYMBOL, INSTRUMENTS, PERIOD_OPTIONS, get_instrument, is_valid_period
from pipelines.analytics import build_snapshot, snapshot_payload
from pipelines.sources.gold import DEFAULT_INTERVAL, DEFAULT_PERIOD, ProviderError, fetch_price_records
from storage.exports import export_series

ALLOWED_FORMATS = {"json", "csv", "parquet"}
load_dotenv()

logger = logging.getLogger(__name__)

app = FastAPI(title="Gold Price Signals API", version="0.1.0")


def _configure_cors() -> None:
    raw_origins = os.getenv("API_CORS_ORIGINS", "*")
    origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials=True,
    )


_configure_cors()


def _cleanup(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/instruments")
def list_instruments() -> list[dict[str, str]]:
    return [
        {"symbol": item.symbol, "label": item.label, "currency": item.currency}
        for item in INSTRUMENTS
    ]


@app.get("/periods")
def list_periods() -> list[dict[str, str]]:
    return [{"value": option.value, "label": option.label} for option in PERIOD_OPTIONS]


@app.get("/prices")
async def get_prices(
    background_tasks: BackgroundTasks,
    symbol: str = Query(DEFAULT_SYMBOL, description="Instrument symbol"),
    period: str = Query(DEFAULT_PERIOD, description="Relative lookback period (e.g. 1mo, 1y)"),
    interval: str = Query(DEFAULT_INTERVAL, description="Bar interval requested from the provider"),
    start_date: str | None = Query(None, description="Custom range start (YYYY-MM-DD)"),
    end_date: str | None = Query(None, description="Custom range end (YYYY-MM-DD)"),
    format: str = Query("json", description="Response format: json, csv, or parquet"),
):
    fmt = format.lower()
    if fmt not in ALLOWED_FORMATS:
        raise HTTPException(status_code=400, detail=f"Unsupported format '{format}'.")
    if not is_valid_period(period):
        raise HTTPException(status_code=400, detail=f"Unsupported period '{period}'.")

    instrument = get_instrument(symbol)
    if instrument is None:
        raise HTTPException(status_code=404, detail=f"Unknown symbol '{symbol}'")

    try:
        records = await fetch_price_records(
            instrument.symbol,
            period=period,
            interval=interval,
            start_date=start_date,
            end_date=end_date,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ProviderError as exc:
        logger.error("%s", exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    snapshot = build_snapshot(records, instrument, period=period)

    if fmt == "json":
        return JSONResponse(content=snapshot_payload(snapshot))

    suffix = f".{fmt}"
    media_type = "text/csv" if fmt == "csv" else "application/vnd.apache.parquet"
    filename = f"{instrument.symbol.replace('=', '_').lower()}_prices{suffix}"
    with tempfile.NamedTemporaryFile(suffix=suffix, delete=False) as tmp:
        dest = Path(tmp.name)

    try:
        export_series(snapshot.series, dest)
    except Exception:
        _cleanup(dest)
        raise

    background_tasks.add_task(_cleanup, dest)
    return FileResponse(dest, media_type=media_type, filename=filename, background=background_tasks)
