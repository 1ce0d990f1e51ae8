import asyncio

import httpx
import pytest

from pipelines.sources import gold
from pipelines.sources.gold import ProviderError, build_query_params, fetch_price_records


def test_build_query_params_defaults_to_period():
    assert build_query_params("GOLDBEES.NS") == {
        "symbol": "GOLDBEES.NS",
        "period": "1y",
        "interval": "1d",
    }


def test_build_query_params_prefers_complete_custom_range():
    params = build_query_params(
        "GC=F", period="1mo", start_date="2024-01-01", end_date="2024-03-31"
    )

    assert params == {"symbol": "GC=F", "start_date": "2024-01-01", "end_date": "2024-03-31"}


def test_build_query_params_ignores_half_open_range():
    params = build_query_params("GC=F", period="6mo", start_date="2024-01-01")

    assert params["period"] == "6mo"
    assert "start_date" not in params


@pytest.mark.parametrize(
    ("start", "end"),
    [("2024-13-01", "2024-12-31"), ("2024-03-01", "2024-01-01")],
)
def test_build_query_params_rejects_bad_ranges(start, end):
    with pytest.raises(ValueError):
        build_query_params("GC=F", start_date=start, end_date=end)


def _install_fake(monkeypatch, result):
    calls = []

    async def fake_fetch_json(url, *, params=None, timeout=None, headers=None):
        calls.append((url, dict(params or {})))
        if isinstance(result, Exception):
            raise result
        return result

    monkeypatch.setattr(gold, "fetch_json", fake_fetch_json)
    return calls


def test_fetch_price_records_returns_mapping_rows(monkeypatch):
    monkeypatch.setenv("GOLD_API_BASE_URL", "https://prices.example.test/")
    calls = _install_fake(
        monkeypatch,
        {"status": "success", "data": [{"Date": "2024-01-02", "Close": 61.0}, "junk"]},
    )

    records = asyncio.run(fetch_price_records("GOLDBEES.NS", period="5d"))

    assert records == [{"Date": "2024-01-02", "Close": 61.0}]
    url, params = calls[0]
    assert url == "https://prices.example.test/api/gold/stock-data"
    assert params == {"symbol": "GOLDBEES.NS", "period": "5d", "interval": "1d"}


def test_fetch_price_records_without_data_array(monkeypatch):
    _install_fake(monkeypatch, {"status": "success", "data": None})

    assert asyncio.run(fetch_price_records("GC=F")) == []


def test_error_payload_raises_provider_error(monkeypatch):
    _install_fake(monkeypatch, {"status": "error", "message": "No data found for symbol"})

    with pytest.raises(ProviderError) as excinfo:
        asyncio.run(fetch_price_records("GC=F"))

    assert str(excinfo.value) == "Failed to fetch gold data: No data found for symbol"


def test_http_status_error_raises_provider_error(monkeypatch):
    request = httpx.Request("GET", "https://prices.example.test/api/gold/stock-data")
    response = httpx.Response(503, request=request)
    _install_fake(monkeypatch, httpx.HTTPStatusError("unavailable", request=request, response=response))

    with pytest.raises(ProviderError) as excinfo:
        asyncio.run(fetch_price_records("GC=F"))

    assert str(excinfo.value) == "Failed to fetch gold data: HTTP 503"
    assert isinstance(excinfo.value.__cause__, httpx.HTTPStatusError)


def test_transport_error_raises_provider_error(monkeypatch):
    _install_fake(monkeypatch, httpx.ConnectError("connection refused"))

    with pytest.raises(ProviderError, match="connection refused"):
        asyncio.run(fetch_price_records("GC=F"))
