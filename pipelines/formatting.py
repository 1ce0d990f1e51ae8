"""Display helpers for rendering KPI fields and chart axes."""

from __future__ import annotations

from typing import Sequence

from pipelines.model import CanonicalPoint, Summary

CURRENCY_SYMBOLS = {"INR": "₹", "USD": "$"}

SAME_PRICE_PADDING = 1.0
PRICE_PADDING = 10.0


def _indian_grouping(whole: int) -> str:
    digits = str(whole)
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_currency(value: float | None, currency: str = "INR") -> str:
    """Format ``value`` with two decimals and the currency's symbol.

    INR amounts use lakh/crore digit grouping (``₹1,23,456.70``); other
    currencies use thousands grouping.
    """

    amount = float(value or 0.0)
    sign = "-" if amount < 0 else ""
    magnitude = round(abs(amount), 2)
    code = (currency or "INR").upper()
    prefix = CURRENCY_SYMBOLS.get(code, f"{code} ")

    if code == "INR":
        whole = int(magnitude)
        cents = round((magnitude - whole) * 100)
        if cents == 100:
            whole, cents = whole + 1, 0
        body = f"{_indian_grouping(whole)}.{cents:02d}"
    else:
        body = f"{magnitude:,.2f}"
    return f"{sign}{prefix}{body}"


def format_volume(value: float | None) -> str:
    """Abbreviate volume into crore (Cr), lakh (L) and thousand (K) units."""

    if not value:
        return "0"
    if value >= 1e7:
        return f"{value / 1e7:.1f} Cr"
    if value >= 1e5:
        return f"{value / 1e5:.1f} L"
    if value >= 1e3:
        return f"{value / 1e3:.1f} K"
    if float(value).is_integer():
        return f"{int(value)}"
    return f"{value}"


def price_axis_domain(
    points: Sequence[CanonicalPoint], summary: Summary | None
) -> tuple[float, float] | None:
    if not points:
        return None
    closes = [point.close for point in points]
    padding = PRICE_PADDING
    if summary is not None and summary.same_price_domain:
        padding = SAME_PRICE_PADDING
    return min(closes) - padding, max(closes) + padding


def trend(change: float) -> str:
    if change > 0:
        return "up"
    if change < 0:
        return "down"
    return "flat"


__all__ = ["format_currency", "format_volume", "price_axis_domain", "trend"]
