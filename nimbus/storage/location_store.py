"""Durable store of saved locations keyed by city name."""

import logging
import sqlite3
import threading

from nimbus.models.location import SavedLocation

logger = logging.getLogger(__name__)


class LocationStore:
    """SQLite-backed saved-location table.

    A single lock serializes every statement, so upserts and deletes issued
    from worker threads never interleave.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self._lock = threading.Lock()

    def get_most_recent(self) -> SavedLocation | None:
        with self._lock:
            row = self.conn.execute(
                "SELECT * FROM weather_cache ORDER BY timestamp DESC LIMIT 1"
            ).fetchone()
        return _row_to_location(row) if row is not None else None

    def list_all(self) -> list[SavedLocation]:
        with self._lock:
            rows = self.conn.execute(
                "SELECT * FROM weather_cache ORDER BY timestamp DESC"
            ).fetchall()
        return [_row_to_location(r) for r in rows]

    def get(self, city_name: str) -> SavedLocation | None:
        with self._lock:
            row = self.conn.execute(
                "SELECT * FROM weather_cache WHERE city_name = ?", (city_name,)
            ).fetchone()
        return _row_to_location(row) if row is not None else None

    def upsert(self, location: SavedLocation) -> None:
        """Insert or replace the row for location.city_name."""
        with self._lock:
            self.conn.execute(
                "INSERT OR REPLACE INTO weather_cache "
                "(city_name, temperature, is_day, timestamp) VALUES (?, ?, ?, ?)",
                (
                    location.city_name,
                    location.last_temperature_celsius,
                    1 if location.was_daytime else 0,
                    location.saved_at_epoch_millis,
                ),
            )
            self.conn.commit()
        logger.debug("Saved %s (%.1f C)", location.city_name, location.last_temperature_celsius)

    def delete(self, location: SavedLocation) -> bool:
        """Delete the row for location.city_name. Returns True if a row was removed."""
        with self._lock:
            cursor = self.conn.execute(
                "DELETE FROM weather_cache WHERE city_name = ?", (location.city_name,)
            )
            self.conn.commit()
        return cursor.rowcount > 0


def _row_to_location(row: sqlite3.Row) -> SavedLocation:
    return SavedLocation(
        city_name=row["city_name"],
        last_temperature_celsius=row["temperature"],
        was_daytime=bool(row["is_day"]),
        saved_at_epoch_millis=row["timestamp"],
    )
