"""SQLite connection manager with WAL mode and migration support."""

import importlib
import sqlite3
from pathlib import Path

MIGRATIONS_PACKAGE = "weatherboard.storage.migrations"


def connect(db_path: str | Path, shared: bool = False) -> sqlite3.Connection:
    """Open a SQLite connection with WAL mode, creating the parent directory.

    `shared` lets a thread other than the opener use the connection. Callers
    must still serialize access themselves.
    """
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), check_same_thread=not shared)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def open_database(db_path: str | Path, shared: bool = False) -> sqlite3.Connection:
    """Connect and bring the schema up to date."""
    conn = connect(db_path, shared=shared)
    run_migrations(conn)
    return conn


def run_migrations(conn: sqlite3.Connection) -> list[str]:
    """Run all pending migrations in order. Returns list of applied migration names."""
    conn.execute(
        "CREATE TABLE IF NOT EXISTS schema_versions ("
        "  version TEXT PRIMARY KEY,"
        "  applied_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP"
        ")"
    )
    conn.commit()

    applied = {
        row[0]
        for row in conn.execute("SELECT version FROM schema_versions").fetchall()
    }

    newly_applied = []
    for name in _discover_migrations():
        if name in applied:
            continue
        mod = importlib.import_module(f"{MIGRATIONS_PACKAGE}.{name}")
        mod.up(conn)
        conn.execute("INSERT INTO schema_versions (version) VALUES (?)", (name,))
        conn.commit()
        newly_applied.append(name)

    return newly_applied


def _discover_migrations() -> list[str]:
    """Discover migration modules by naming convention v###_*.py."""
    migrations_dir = Path(__file__).parent / "migrations"
    return sorted(p.stem for p in migrations_dir.glob("v[0-9]*_*.py"))
