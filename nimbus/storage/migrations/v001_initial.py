"""Initial schema: the per-city weather cache."""

import sqlite3

DDL = [
    # Last known weather per city, newest first for offline display
    """
    CREATE TABLE IF NOT EXISTS weather_cache (
        city_name TEXT PRIMARY KEY,
        temperature REAL NOT NULL,
        is_day INTEGER NOT NULL CHECK (is_day IN (0, 1)),
        timestamp INTEGER NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_weather_cache_timestamp ON weather_cache(timestamp)",
]


def up(conn: sqlite3.Connection) -> None:
    for stmt in DDL:
        conn.execute(stmt)
