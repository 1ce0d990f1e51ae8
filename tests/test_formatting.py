import pytest

from pipelines.analytics import summarize
from pipelines.formatting import format_currency, format_volume, price_axis_domain, trend
from pipelines.model import CanonicalPoint, InstrumentMeta

USD_FUTURES = InstrumentMeta(symbol="GC=F", label="COMEX Gold Futures (USD/oz)", currency="USD")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (0, "0"),
        (None, "0"),
        (999, "999"),
        (12.5, "12.5"),
        (1_500, "1.5 K"),
        (250_000, "2.5 L"),
        (12_000_000, "1.2 Cr"),
    ],
)
def test_format_volume(value, expected):
    assert format_volume(value) == expected


@pytest.mark.parametrize(
    ("value", "currency", "expected"),
    [
        (1234567.7, "INR", "₹12,34,567.70"),
        (61.25, "INR", "₹61.25"),
        (-5, "INR", "-₹5.00"),
        (0.999, "INR", "₹1.00"),
        (1234.5, "USD", "$1,234.50"),
        (10, "EUR", "EUR 10.00"),
    ],
)
def test_format_currency(value, currency, expected):
    assert format_currency(value, currency) == expected


def _points(closes):
    return [
        CanonicalPoint(date=str(i), timestamp=i, close=close, display_date=str(i))
        for i, close in enumerate(closes)
    ]


def test_price_axis_domain_widens_flat_series_by_one():
    points = _points([120.0, 120.0, 120.0])

    assert price_axis_domain(points, summarize(points, USD_FUTURES)) == (119.0, 121.0)


def test_price_axis_domain_pads_varied_series_by_ten():
    points = _points([100.0, 110.0])

    assert price_axis_domain(points, summarize(points, USD_FUTURES)) == (90.0, 120.0)


def test_price_axis_domain_empty_series():
    assert price_axis_domain([], None) is None


def test_trend():
    assert trend(1.2) == "up"
    assert trend(-0.1) == "down"
    assert trend(0) == "flat"
