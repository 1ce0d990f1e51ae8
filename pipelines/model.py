"""Canonical data model for normalized gold price series and their summaries."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class InstrumentMeta:
    """Display metadata for a tradable instrument."""

    symbol: str
    label: str
    currency: str


class PeriodKind(str, Enum):
    """Controls how point dates are rendered on the category axis."""

    INTRADAY = "intraday"
    OTHER = "other"


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class CanonicalPoint(_FrozenModel):
    """Normalized representation of a single price/volume observation."""

    date: str = Field(..., description="Time marker exactly as the provider sent it.")
    timestamp: int = Field(..., description="Observation instant in epoch milliseconds (UTC).")
    open: float = 0.0
    high: float = 0.0
    low: float = 0.0
    close: float = 0.0
    volume: float = 0.0
    dividends: float = 0.0
    stock_splits: float = Field(0.0, alias="stockSplits")
    display_date: str = Field(
        ..., alias="displayDate", description="Short date label for chart axes."
    )


class Summary(_FrozenModel):
    """Derived key metrics for one canonical series."""

    symbol: str
    instrument: str = Field(..., description="Human-readable instrument label.")
    currency: str
    price: float
    change: float
    change_percent: float = Field(..., alias="changePercent")
    period_high: float = Field(..., alias="periodHigh")
    period_low: float = Field(..., alias="periodLow")
    volume: float = Field(..., description="Volume of the latest point.")
    avg_volume: float = Field(..., alias="avgVolume")
    total_dividends: float = Field(..., alias="totalDividends")
    same_price_domain: bool = Field(
        ...,
        alias="samePriceDomain",
        description="True when every close is equal and the price axis needs widening.",
    )


class DashboardSnapshot(_FrozenModel):
    """A canonical series paired with its summary, recomputed on every fetch."""

    symbol: str
    period: Optional[str] = None
    series: tuple[CanonicalPoint, ...] = ()
    summary: Optional[Summary] = None
    last_updated: datetime = Field(..., alias="lastUpdated")


__all__ = [
    "CanonicalPoint",
    "DashboardSnapshot",
    "InstrumentMeta",
    "PeriodKind",
    "Summary",
]
