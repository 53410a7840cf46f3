"""Repository for the persisted tracked-city list."""

import json
import logging
import sqlite3
from pathlib import Path

from weatherboard.storage.database import open_database

logger = logging.getLogger(__name__)

CITIES_KEY = "weatherCities"


def get_preference(conn: sqlite3.Connection, key: str) -> str | None:
    row = conn.execute(
        "SELECT value FROM preferences WHERE key = ?", (key,)
    ).fetchone()
    if row is None:
        return None
    return row[0]


def set_preference(conn: sqlite3.Connection, key: str, value: str) -> None:
    conn.execute(
        "INSERT INTO preferences (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP) "
        "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP",
        (key, value),
    )
    conn.commit()


def load_cities(conn: sqlite3.Connection) -> list[str] | None:
    """Return the stored city list, or None if nothing was ever saved."""
    raw = get_preference(conn, CITIES_KEY)
    if raw is None:
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Ignoring corrupt %s value: %r", CITIES_KEY, raw)
        return None
    if not isinstance(data, list):
        logger.warning("Ignoring non-list %s value: %r", CITIES_KEY, raw)
        return None
    return [str(c) for c in data]


def save_cities(conn: sqlite3.Connection, cities: list[str]) -> None:
    set_preference(conn, CITIES_KEY, json.dumps(list(cities)))


class CityStore:
    """Durable storage for the tracked-city list, one SQLite file.

    The connection is shared so the event loop that owns the dashboard
    session may run in a different thread from the one that opened it.
    """

    def __init__(self, db_path: str | Path):
        self.db_path = db_path
        self.conn = open_database(db_path, shared=True)

    def load(self) -> list[str] | None:
        return load_cities(self.conn)

    def save(self, cities: list[str]) -> None:
        save_cities(self.conn, cities)

    def close(self) -> None:
        self.conn.close()
