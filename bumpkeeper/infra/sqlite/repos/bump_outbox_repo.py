"""SQLite repository for constructed bump transactions (bump_outbox)."""

from __future__ import annotations

import sqlite3
from typing import List


class BumpOutboxRepo:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def insert_request(
        self,
        tx_id: str,
        body: str,
        sender: str,
        request_json: str,
        created_at: str,
    ) -> None:
        self._conn.execute(
            """
            INSERT INTO bump_outbox (tx_id, body, sender, request_json, created_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (tx_id, body, sender, request_json, created_at),
        )

    def list_pending(self, body: str) -> List[tuple[str, str, str]]:
        rows = self._conn.execute(
            """
            SELECT tx_id, sender, request_json
            FROM bump_outbox
            WHERE body=? AND status='PENDING'
            ORDER BY created_at, rowid
            """,
            (body,),
        ).fetchall()
        return [(row[0], row[1], row[2]) for row in rows]
