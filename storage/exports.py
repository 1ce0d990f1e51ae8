"""Export helpers for a staged price series."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import duckdb

from pipelines.model import CanonicalPoint
from storage.db import PRICE_POINTS_TABLE, connect, load_price_points

EXPORT_FORMATS = {".csv": "FORMAT CSV, HEADER TRUE", ".parquet": "FORMAT PARQUET"}

_SERIES_QUERY = f'SELECT * FROM {PRICE_POINTS_TABLE} ORDER BY "timestamp"'


def _copy_series(conn: duckdb.DuckDBPyConnection, destination: Path, options: str) -> Path:
    destination.parent.mkdir(parents=True, exist_ok=True)
    sanitized_path = str(destination).replace("'", "''")
    conn.execute(f"COPY ({_SERIES_QUERY}) TO '{sanitized_path}' ({options})")
    return destination


def export_series(points: Iterable[CanonicalPoint], destination: str | Path) -> Path:
    """Stage ``points`` in a fresh in-memory database and write them by file suffix.

    ``.csv`` files carry a header row; ``.parquet`` files keep column types.
    """

    dest_path = Path(destination)
    options = EXPORT_FORMATS.get(dest_path.suffix.lower())
    if options is None:
        raise ValueError(
            f"Unsupported export suffix '{dest_path.suffix}'. Use one of: {', '.join(EXPORT_FORMATS)}."
        )

    conn = connect()
    try:
        load_price_points(conn, points)
        return _copy_series(conn, dest_path, options)
    finally:
        conn.close()


__all__ = ["EXPORT_FORMATS", "export_series"]
