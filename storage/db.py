"""In-memory DuckDB staging for a canonical price series.

Series are loaded per request for export only; nothing is kept on disk
between invocations.
"""

from __future__ import annotations

from typing import Iterable

import duckdb

from pipelines.model import CanonicalPoint

PRICE_POINTS_TABLE = "price_points"

_COLUMNS = (
    "date",
    "timestamp",
    "display_date",
    "open",
    "high",
    "low",
    "close",
    "volume",
    "dividends",
    "stock_splits",
)

_QUOTED_COLUMNS = ", ".join(f'"{column}"' for column in _COLUMNS)


def connect() -> duckdb.DuckDBPyConnection:
    """Open a private in-memory DuckDB connection with the staging table created."""

    conn = duckdb.connect(":memory:")
    ensure_price_points_table(conn)
    return conn


def ensure_price_points_table(conn: duckdb.DuckDBPyConnection) -> None:
    conn.execute(
        f"""
        CREATE TABLE IF NOT EXISTS {PRICE_POINTS_TABLE} (
            "date" TEXT NOT NULL,
            "timestamp" BIGINT NOT NULL,
            display_date TEXT NOT NULL,
            open DOUBLE,
            high DOUBLE,
            low DOUBLE,
            close DOUBLE,
            volume DOUBLE,
            dividends DOUBLE,
            stock_splits DOUBLE
        )
        """
    )


def _serialize_point(point: CanonicalPoint) -> tuple:
    return (
        point.date,
        point.timestamp,
        point.display_date,
        point.open,
        point.high,
        point.low,
        point.close,
        point.volume,
        point.dividends,
        point.stock_splits,
    )


def load_price_points(
    conn: duckdb.DuckDBPyConnection, points: Iterable[CanonicalPoint]
) -> int:
    """Insert a batch of ``CanonicalPoint`` records.

    Returns
    -------
    int
        Number of records staged.
    """

    serialized = [_serialize_point(point) for point in points]
    if not serialized:
        return 0

    placeholders = ", ".join("?" for _ in _COLUMNS)
    conn.executemany(
        f"INSERT INTO {PRICE_POINTS_TABLE} ({_QUOTED_COLUMNS}) VALUES ({placeholders})",
        serialized,
    )
    return len(serialized)


__all__ = [
    "PRICE_POINTS_TABLE",
    "connect",
    "ensure_price_points_table",
    "load_price_points",
]
