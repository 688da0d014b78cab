"""Versioned schema migrations for the snapshot and outbox tables.

Responsibilities:
  - Apply each file in migrations/ once, in name order.
  - Record applied files in schema_migrations so reruns skip them.
Must not:
  - Embed business logic; migrations only.
"""

from __future__ import annotations

import datetime
import logging
import sqlite3
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


def applied_migrations(conn: sqlite3.Connection) -> List[str]:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS schema_migrations (
            name TEXT PRIMARY KEY,
            applied_at TEXT NOT NULL
        )
        """
    )
    rows = conn.execute("SELECT name FROM schema_migrations ORDER BY name").fetchall()
    return [row[0] for row in rows]


def apply_migrations(conn: sqlite3.Connection, migrations_dir: Path = MIGRATIONS_DIR) -> List[str]:
    """Apply pending migrations and return the names applied by this call."""
    done = set(applied_migrations(conn))
    conn.commit()
    applied: List[str] = []
    for migration in sorted(migrations_dir.glob("*.sql")):
        if migration.name in done:
            continue
        # executescript commits before running, so the record follows the script.
        conn.executescript(migration.read_text())
        conn.execute(
            "INSERT INTO schema_migrations (name, applied_at) VALUES (?, ?)",
            (migration.name, datetime.datetime.now(datetime.timezone.utc).isoformat()),
        )
        conn.commit()
        logger.debug("applied migration %s", migration.name)
        applied.append(migration.name)
    return applied
