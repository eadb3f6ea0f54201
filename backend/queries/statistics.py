"""
Statistic definition and value queries — DB I/O only.
"""
from __future__ import annotations

import sqlite3
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException

from db import row_to_dict

_DEFINITION_FIELDS = (
    "title", "description", "calculation_method", "purpose", "plan", "unit",
    "owner_kind", "owner_id", "inverted", "is_favorite",
)


def _definition(row: sqlite3.Row) -> dict:
    d = row_to_dict(row)
    d["inverted"]    = bool(d["inverted"])
    d["is_favorite"] = bool(d["is_favorite"])
    return d


def fetch_definitions(
    conn: sqlite3.Connection,
    owner_kind: str | None = None,
    owner_id: str | None = None,
) -> list[dict]:
    sql    = "SELECT * FROM statistic_definitions WHERE 1=1"
    params: list = []
    if owner_kind:
        sql += " AND owner_kind = ?"
        params.append(owner_kind)
    if owner_id:
        sql += " AND owner_id = ?"
        params.append(owner_id)
    sql += " ORDER BY is_favorite DESC, title"
    return [_definition(r) for r in conn.execute(sql, params).fetchall()]


def fetch_definition(conn: sqlite3.Connection, definition_id: str) -> dict:
    row = conn.execute(
        "SELECT * FROM statistic_definitions WHERE id = ?", (definition_id,)
    ).fetchone()
    if row is None:
        raise HTTPException(status_code=404, detail=f"Statistic '{definition_id}' not found")
    return _definition(row)


def insert_definition(conn: sqlite3.Connection, fields: dict) -> dict:
    definition_id = fields.get("id") or str(uuid.uuid4())
    conn.execute(
        """
        INSERT INTO statistic_definitions
            (id, created_at, title, description, calculation_method, purpose,
             plan, unit, owner_kind, owner_id, inverted, is_favorite)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            definition_id,
            datetime.now(timezone.utc).isoformat(),
            fields["title"],
            fields.get("description"),
            fields.get("calculation_method"),
            fields.get("purpose"),
            fields.get("plan"),
            fields.get("unit"),
            fields["owner_kind"],
            fields.get("owner_id"),
            int(bool(fields.get("inverted"))),
            int(bool(fields.get("is_favorite"))),
        ),
    )
    conn.commit()
    return fetch_definition(conn, definition_id)


def update_definition(conn: sqlite3.Connection, definition_id: str, changes: dict) -> dict:
    fetch_definition(conn, definition_id)
    changes = {k: v for k, v in changes.items() if k in _DEFINITION_FIELDS}
    if changes:
        assignments = ", ".join(f"{k} = ?" for k in changes)
        values = [int(v) if isinstance(v, bool) else v for v in changes.values()]
        conn.execute(
            f"UPDATE statistic_definitions SET {assignments} WHERE id = ?",
            (*values, definition_id),
        )
        conn.commit()
    return fetch_definition(conn, definition_id)


def delete_definition(conn: sqlite3.Connection, definition_id: str) -> None:
    fetch_definition(conn, definition_id)
    conn.execute("DELETE FROM statistic_definitions WHERE id = ?", (definition_id,))
    conn.commit()


def fetch_values(conn: sqlite3.Connection, definition_id: str) -> list[dict]:
    """All observations of one statistic, oldest first."""
    rows = conn.execute(
        "SELECT * FROM statistic_values WHERE definition_id = ? ORDER BY date, rowid",
        (definition_id,),
    ).fetchall()
    return [row_to_dict(r) for r in rows]


def fetch_values_bulk(conn: sqlite3.Connection, definition_ids: list[str]) -> dict[str, list[dict]]:
    """{definition_id: [observations oldest first]} for many statistics at once."""
    result: dict[str, list[dict]] = {i: [] for i in definition_ids}
    if not definition_ids:
        return result
    placeholders = ",".join("?" * len(definition_ids))
    rows = conn.execute(
        f"SELECT * FROM statistic_values WHERE definition_id IN ({placeholders}) "
        "ORDER BY date, rowid",
        definition_ids,
    ).fetchall()
    for r in rows:
        result[r["definition_id"]].append(row_to_dict(r))
    return result


def insert_value(conn: sqlite3.Connection, definition_id: str, day: str, value: float,
                 notes: str | None = None) -> dict:
    fetch_definition(conn, definition_id)
    value_id = str(uuid.uuid4())
    conn.execute(
        "INSERT INTO statistic_values (id, definition_id, date, value, notes) VALUES (?, ?, ?, ?, ?)",
        (value_id, definition_id, day, value, notes),
    )
    conn.commit()
    row = conn.execute("SELECT * FROM statistic_values WHERE id = ?", (value_id,)).fetchone()
    return row_to_dict(row)


def delete_value(conn: sqlite3.Connection, definition_id: str, value_id: str) -> None:
    cur = conn.execute(
        "DELETE FROM statistic_values WHERE id = ? AND definition_id = ?",
        (value_id, definition_id),
    )
    conn.commit()
    if cur.rowcount == 0:
        raise HTTPException(status_code=404, detail=f"Value '{value_id}' not found")
