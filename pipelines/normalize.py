"""Normalizer turning loosely-keyed provider rows into a canonical price series."""

from __future__ import annotations

import logging
import math
import os
from datetime import UTC, datetime, timedelta, tzinfo
from email.utils import parsedate_to_datetime
from typing import Any, Iterable, Mapping
from zoneinfo import ZoneInfo

from pipelines.model import CanonicalPoint, PeriodKind

DISPLAY_TIMEZONE_ENV = "DISPLAY_TIMEZONE"
DEFAULT_DISPLAY_TIMEZONE = "Asia/Kolkata"

INTRADAY_PERIODS = frozenset({"1d", "5d"})

# Canonical field -> provider keys, most preferred first.
FIELD_ALIASES: Mapping[str, tuple[str, ...]] = {
    "time": ("timestamp", "Date", "date", "index"),
    "open": ("open", "Open"),
    "high": ("high", "High"),
    "low": ("low", "Low"),
    "close": ("close", "Close"),
    "volume": ("volume", "Volume"),
    "dividends": ("dividends", "Dividends"),
    "stock_splits": ("stockSplits", "Stock Splits"),
}

_NUMERIC_FIELDS = ("open", "high", "low", "close", "volume", "dividends", "stock_splits")

_FALLBACK_FORMATS = (
    "%Y-%m-%d %H:%M:%S%z",
    "%Y/%m/%d",
    "%d-%m-%Y",
    "%d/%m/%Y",
    "%d %b %Y",
)

_MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

logger = logging.getLogger(__name__)


def period_kind_for(period: str | None) -> PeriodKind:
    """Map a relative lookback period (``"1d"``, ``"1y"``...) to its display kind."""

    if period and period.strip().lower() in INTRADAY_PERIODS:
        return PeriodKind.INTRADAY
    return PeriodKind.OTHER


def _resolve_display_tz(display_tz: tzinfo | str | None) -> tzinfo:
    if isinstance(display_tz, tzinfo):
        return display_tz
    name = display_tz or os.getenv(DISPLAY_TIMEZONE_ENV) or DEFAULT_DISPLAY_TIMEZONE
    return ZoneInfo(name)


def _has_time_marker(value: Any) -> bool:
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value != 0
    return True


def _marker_text(marker: Any) -> str:
    if isinstance(marker, str):
        return marker
    if isinstance(marker, float) and marker.is_integer():
        return str(int(marker))
    return str(marker)


def _resolve(record: Mapping[str, Any], field: str) -> Any:
    for key in FIELD_ALIASES[field]:
        value = record.get(key)
        if value is None:
            continue
        if field == "time" and not _has_time_marker(value):
            continue
        return value
    return None


def _coerce_float(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        if isinstance(value, (int, float)):
            numeric = float(value)
        elif isinstance(value, str):
            numeric = float(value.strip())
        else:
            return 0.0
    except (ValueError, OverflowError):
        return 0.0

    if math.isnan(numeric) or math.isinf(numeric):
        return 0.0
    return numeric


def _parse_time_marker(marker: Any) -> datetime | None:
    if marker is None or isinstance(marker, bool):
        return None
    if isinstance(marker, (int, float)):
        # Numeric markers are epoch milliseconds.
        if math.isnan(marker) or math.isinf(marker):
            return None
        try:
            return _EPOCH + timedelta(milliseconds=marker)
        except OverflowError:
            return None
    if not isinstance(marker, str):
        return None

    text = marker.strip()
    parsed: datetime | None = None
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        try:
            parsed = parsedate_to_datetime(text)
        except (TypeError, ValueError, IndexError):
            for fmt in _FALLBACK_FORMATS:
                try:
                    parsed = datetime.strptime(text, fmt)
                    break
                except ValueError:
                    continue

    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _to_epoch_millis(moment: datetime) -> int:
    return (moment - _EPOCH) // timedelta(milliseconds=1)


def format_display_date(moment: datetime, period_kind: PeriodKind, display_tz: tzinfo) -> str:
    """Render ``DD Mon YYYY`` for intraday periods and ``DD Mon YY`` otherwise."""

    local = moment.astimezone(display_tz)
    if period_kind is PeriodKind.INTRADAY:
        year = f"{local.year}"
    else:
        year = f"{local.year % 100:02d}"
    return f"{local.day:02d} {_MONTH_ABBREVIATIONS[local.month - 1]} {year}"


def _normalize_record(
    record: Mapping[str, Any], period_kind: PeriodKind, display_tz: tzinfo
) -> CanonicalPoint | None:
    marker = _resolve(record, "time")
    moment = _parse_time_marker(marker)
    if moment is None:
        return None

    try:
        timestamp = _to_epoch_millis(moment)
        display_date = format_display_date(moment, period_kind, display_tz)
    except (OverflowError, ValueError):
        # Instants at the edges of the datetime range cannot be shifted.
        return None

    values = {field: _coerce_float(_resolve(record, field)) for field in _NUMERIC_FIELDS}
    return CanonicalPoint(
        date=_marker_text(marker),
        timestamp=timestamp,
        display_date=display_date,
        **values,
    )


def normalize(
    raw_records: Iterable[Mapping[str, Any]] | None,
    period_kind: PeriodKind = PeriodKind.OTHER,
    *,
    display_tz: tzinfo | str | None = None,
) -> list[CanonicalPoint]:
    """Convert raw provider rows into canonical points sorted by timestamp.

    Missing or non-numeric price fields degrade to ``0.0`` instead of failing
    the batch. Rows whose time marker cannot be resolved or parsed are dropped
    (and counted in a warning) so every returned point carries a real instant.
    The input is never mutated.
    """

    if not raw_records:
        return []

    tz = _resolve_display_tz(display_tz)
    points: list[CanonicalPoint] = []
    dropped = 0
    total = 0
    for record in raw_records:
        total += 1
        point = None
        if isinstance(record, Mapping):
            point = _normalize_record(record, period_kind, tz)
        if point is None:
            dropped += 1
            continue
        points.append(point)

    if dropped:
        logger.warning(
            "Dropped %s of %s records with a missing or unparsable time marker.",
            dropped,
            total,
        )

    points.sort(key=lambda point: point.timestamp)
    return points


__all__ = [
    "FIELD_ALIASES",
    "INTRADAY_PERIODS",
    "format_display_date",
    "normalize",
    "period_kind_for",
]
