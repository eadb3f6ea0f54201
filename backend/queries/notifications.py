"""
Sent-notification ledger — DB I/O only.

Remembers which reminders already went out so a rerun on the same day
does not message HR twice.
"""
from __future__ import annotations

import sqlite3
from datetime import date, timedelta


class SqliteLedger:
    def __init__(self, conn: sqlite3.Connection, today: date | None = None):
        self.conn  = conn
        self.today = today or date.today()

    def has(self, key: str) -> bool:
        row = self.conn.execute(
            "SELECT 1 FROM sent_notifications WHERE key = ?", (key,)
        ).fetchone()
        return row is not None

    def put(self, key: str) -> None:
        self.conn.execute(
            "INSERT OR IGNORE INTO sent_notifications (key, sent_on) VALUES (?, ?)",
            (key, self.today.isoformat()),
        )
        self.conn.commit()

    def cleanup(self, today: date, keep_days: int = 30) -> int:
        """Forget entries older than keep_days. Returns how many were dropped."""
        cutoff = (today - timedelta(days=keep_days)).isoformat()
        cur = self.conn.execute("DELETE FROM sent_notifications WHERE sent_on < ?", (cutoff,))
        self.conn.commit()
        return cur.rowcount
