"""Derived key metrics over a canonical price series."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, tzinfo
from typing import Any, Iterable, Mapping, Sequence

from pipelines.model import CanonicalPoint, DashboardSnapshot, InstrumentMeta, Summary
from pipelines.normalize import normalize, period_kind_for

logger = logging.getLogger(__name__)


def summarize(points: Sequence[CanonicalPoint], instrument: InstrumentMeta) -> Summary | None:
    """Reduce a time-ordered series to its KPI summary.

    Returns ``None`` for an empty series. Change is measured against the
    second-to-last close (zero for a single point) and the percentage is
    guarded to ``0`` when that close is zero.
    """

    if not points:
        return None

    latest = points[-1]
    previous = points[-2] if len(points) > 1 else latest

    price = latest.close
    change = price - previous.close
    change_percent = (change / previous.close) * 100 if previous.close else 0.0

    closes = [point.close for point in points]
    period_high = max(closes)
    period_low = min(closes)

    total_volume = sum(point.volume or 0.0 for point in points)

    return Summary(
        symbol=instrument.symbol,
        instrument=instrument.label,
        currency=instrument.currency,
        price=price,
        change=change,
        change_percent=change_percent,
        period_high=period_high,
        period_low=period_low,
        volume=latest.volume or 0.0,
        avg_volume=total_volume / len(points),
        total_dividends=sum(point.dividends or 0.0 for point in points),
        same_price_domain=period_high == period_low,
    )


def build_snapshot(
    raw_records: Iterable[Mapping[str, Any]] | None,
    instrument: InstrumentMeta,
    *,
    period: str | None = None,
    display_tz: tzinfo | str | None = None,
) -> DashboardSnapshot:
    """Normalize raw provider rows and pair the series with its summary."""

    series = normalize(raw_records, period_kind_for(period), display_tz=display_tz)
    summary = summarize(series, instrument)
    logger.debug("Built snapshot for %s with %s points.", instrument.symbol, len(series))
    return DashboardSnapshot(
        symbol=instrument.symbol,
        period=period,
        series=tuple(series),
        summary=summary,
        last_updated=datetime.now(UTC),
    )


def snapshot_payload(snapshot: DashboardSnapshot) -> dict[str, Any]:
    """JSON-ready payload with camelCase keys for the rendering layer."""

    payload = snapshot.model_dump(mode="json", by_alias=True)
    payload["count"] = len(snapshot.series)
    return payload


__all__ = ["build_snapshot", "snapshot_payload", "summarize"]
