"""Static configuration for supported instruments and lookback periods."""

from __future__ import annotations

from dataclasses import dataclass
from pipelines.model import InstrumentMeta
from pipelines.sources.gold import DEFAULT_INTERVAL, DEFAULT_PERIOD


@dataclass(frozen=True)
class PeriodOption:
    """A relative lookback window offered to users."""

    value: str
    label: str


INSTRUMENTS: tuple[InstrumentMeta, ...] = (
    InstrumentMeta(
        symbol="GOLDBEES.NS",
        label="Gold ETF (NSE, INR, per 0.01 gram)",
        currency="INR",
    ),
    InstrumentMeta(
        symbol="GC=F",
        label="COMEX Gold Futures (USD/oz)",
        currency="USD",
    ),
)

DEFAULT_SYMBOL = "GOLDBEES.NS"

PERIOD_OPTIONS: tuple[PeriodOption, ...] = (
    PeriodOption("1d", "1 Day"),
    PeriodOption("5d", "5 Days"),
    PeriodOption("1mo", "1 Month"),
    PeriodOption("3mo", "3 Months"),
    PeriodOption("6mo", "6 Months"),
    PeriodOption("1y", "1 Year"),
    PeriodOption("2y", "2 Years"),
    PeriodOption("5y", "5 Years"),
)


def get_instrument(symbol: str) -> InstrumentMeta | None:
    for instrument in INSTRUMENTS:
        if instrument.symbol == symbol:
            return instrument
    return None


def is_valid_period(period: str) -> bool:
    return any(option.value == period for option in PERIOD_OPTIONS)


__all__ = [
    "DEFAULT_INTERVAL",
    "DEFAULT_PERIOD",
    "DEFAULT_SYMBOL",
    "INSTRUMENTS",
    "PERIOD_OPTIONS",
    "PeriodOption",
    "get_instrument",
    "is_valid_period",
]
