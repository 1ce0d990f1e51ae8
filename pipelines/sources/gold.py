"""Historical gold price provider client.

Builds the stock-data query for an instrument and returns the provider's raw
price rows untouched; normalization happens in ``pipelines.normalize``.
"""

from __future__ import annotations

import logging
import os
from datetime import date
from typing import Any, Mapping

import httpx

from pipelines.common import fetch_json

GOLD_API_BASE_URL_ENV = "GOLD_API_BASE_URL"
DEFAULT_GOLD_API_BASE_URL = "https://backend.jeevandharadigital.in"
STOCK_DATA_PATH = "/api/gold/stock-data"

DEFAULT_PERIOD = "1y"
DEFAULT_INTERVAL = "1d"

logger = logging.getLogger(__name__)


class ProviderError(RuntimeError):
    """Raised when the price provider is unreachable or reports a failure."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Failed to fetch gold data: {detail}")


def _resolve_base_url(base_url: str | None) -> str:
    resolved = base_url or os.getenv(GOLD_API_BASE_URL_ENV) or DEFAULT_GOLD_API_BASE_URL
    return resolved.rstrip("/")


def _parse_iso_date(raw: str, name: str) -> date:
    try:
        return date.fromisoformat(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an ISO date (YYYY-MM-DD), got {raw!r}.") from exc


def build_query_params(
    symbol: str,
    *,
    period: str | None = None,
    interval: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
) -> dict[str, str]:
    """Build provider query parameters for either an explicit range or a period.

    An explicit range is used only when both ``start_date`` and ``end_date``
    are given; otherwise the relative ``period``/``interval`` pair is sent.
    """

    if not symbol or not symbol.strip():
        raise ValueError("symbol is required.")

    params: dict[str, str] = {"symbol": symbol.strip()}
    if start_date and end_date:
        start = _parse_iso_date(start_date, "start_date")
        end = _parse_iso_date(end_date, "end_date")
        if start > end:
            raise ValueError(f"start_date {start_date} is after end_date {end_date}.")
        params["start_date"] = start.isoformat()
        params["end_date"] = end.isoformat()
        return params

    params["period"] = period or DEFAULT_PERIOD
    params["interval"] = interval or DEFAULT_INTERVAL
    return params


def _extract_records(payload: Any) -> list[Mapping[str, Any]]:
    if not isinstance(payload, Mapping):
        return []
    if payload.get("status") == "error":
        raise ProviderError(str(payload.get("message") or "provider reported an error"))
    data = payload.get("data")
    if not isinstance(data, list):
        return []
    return [record for record in data if isinstance(record, Mapping)]


async def fetch_price_records(
    symbol: str,
    *,
    period: str | None = None,
    interval: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    base_url: str | None = None,
    timeout: float | None = None,
) -> list[Mapping[str, Any]]:
    """Fetch raw price rows for ``symbol`` from the provider.

    Raises ``ProviderError`` for transport failures, non-success statuses and
    error payloads. Returns an empty list when the payload has no data array.
    """

    params = build_query_params(
        symbol,
        period=period,
        interval=interval,
        start_date=start_date,
        end_date=end_date,
    )
    url = f"{_resolve_base_url(base_url)}{STOCK_DATA_PATH}"

    try:
        payload = await fetch_json(url, params=params, timeout=timeout)
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code if exc.response is not None else "?"
        logger.warning("Price provider returned HTTP %s for %s.", status, symbol)
        raise ProviderError(f"HTTP {status}") from exc
    except httpx.HTTPError as exc:
        logger.warning("Price provider request failed for %s: %s", symbol, exc)
        raise ProviderError(str(exc) or exc.__class__.__name__) from exc
    except ValueError as exc:
        raise ProviderError("response was not valid JSON") from exc

    records = _extract_records(payload)
    logger.info("Fetched %s raw price records for %s.", len(records), symbol)
    return records


__all__ = [
    "DEFAULT_GOLD_API_BASE_URL",
    "ProviderError",
    "build_query_params",
    "fetch_price_records",
]
