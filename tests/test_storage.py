import duckdb
import pytest

from pipelines.normalize import normalize
from storage.db import PRICE_POINTS_TABLE, connect, load_price_points
from storage.exports import export_series


def _points():
    return normalize(
        [
            {"Date": "2024-01-03", "Close": 62.0, "Volume": 10},
            {"Date": "2024-01-02", "Close": 60.0, "Volume": 20},
        ],
        display_tz="UTC",
    )


def test_load_price_points_stages_rows():
    points = _points()
    conn = connect()
    try:
        assert load_price_points(conn, points) == 2
        assert load_price_points(conn, []) == 0
        rows = conn.execute(
            f'SELECT "date", close FROM {PRICE_POINTS_TABLE} WHERE close > ?', [61.0]
        ).fetchall()
    finally:
        conn.close()

    assert rows == [("2024-01-03", 62.0)]


def test_connections_do_not_share_state():
    first = connect()
    try:
        load_price_points(first, _points())
    finally:
        first.close()

    second = connect()
    try:
        assert second.execute(f"SELECT count(*) FROM {PRICE_POINTS_TABLE}").fetchone() == (0,)
    finally:
        second.close()


def test_export_series_rejects_unknown_suffix(tmp_path):
    with pytest.raises(ValueError):
        export_series(_points(), tmp_path / "series.xlsx")


def test_export_series_parquet(tmp_path):
    destination = export_series(_points(), tmp_path / "series.parquet")

    assert destination.exists()
    assert destination.stat().st_size > 0


def test_export_series_csv_is_sorted_with_header(tmp_path):
    destination = export_series(_points(), tmp_path / "nested" / "series.csv")

    lines = destination.read_text().splitlines()
    assert lines[0].split(",")[:2] == ["date", "timestamp"]
    assert [line.split(",")[0] for line in lines[1:]] == ["2024-01-02", "2024-01-03"]


def test_export_series_parquet_round_trips_columns(tmp_path):
    destination = export_series(_points(), tmp_path / "series.parquet")

    conn = duckdb.connect()
    try:
        rows = conn.execute(
            "SELECT display_date, close FROM read_parquet(?)", [str(destination)]
        ).fetchall()
    finally:
        conn.close()

    assert rows == [("02 Jan 24", 60.0), ("03 Jan 24", 62.0)]
