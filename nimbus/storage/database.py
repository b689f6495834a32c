"""SQLite connection manager with WAL mode and migration support."""

import importlib
import logging
import pkgutil
import re
import sqlite3
from pathlib import Path

from nimbus.storage import migrations

logger = logging.getLogger(__name__)

_MIGRATION_NAME = re.compile(r"^v\d{3}_\w+$")


def connect(db_path: str | Path) -> sqlite3.Connection:
    """Open a SQLite connection with WAL mode enabled.

    The connection may be used from worker threads; callers serialize
    access themselves (see LocationStore).
    """
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def run_migrations(conn: sqlite3.Connection) -> list[str]:
    """Apply pending v###_* migrations, each in its own transaction.

    Returns the names applied by this call, oldest first.
    """
    with conn:
        conn.execute(
            "CREATE TABLE IF NOT EXISTS schema_versions ("
            "  version TEXT PRIMARY KEY,"
            "  applied_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP"
            ")"
        )
    done = {r["version"] for r in conn.execute("SELECT version FROM schema_versions")}
    pending = [name for name in available_migrations() if name not in done]

    for name in pending:
        module = importlib.import_module(f"{migrations.__name__}.{name}")
        with conn:
            module.up(conn)
            conn.execute("INSERT INTO schema_versions (version) VALUES (?)", (name,))
        logger.info("Applied migration %s", name)
    return pending


def available_migrations() -> list[str]:
    """Migration module names in the migrations package, in version order."""
    return sorted(
        info.name
        for info in pkgutil.iter_modules(migrations.__path__)
        if _MIGRATION_NAME.match(info.name)
    )
