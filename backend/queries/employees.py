"""
Employee queries — DB I/O only.
"""
from __future__ import annotations

import sqlite3
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException

from db import row_to_dict


def fetch_employees(conn: sqlite3.Connection) -> list[dict]:
    rows = conn.execute("SELECT * FROM employees ORDER BY full_name").fetchall()
    return [row_to_dict(r) for r in rows]


def fetch_employee(conn: sqlite3.Connection, employee_id: str) -> dict:
    row = conn.execute("SELECT * FROM employees WHERE id = ?", (employee_id,)).fetchone()
    if row is None:
        raise HTTPException(status_code=404, detail=f"Employee '{employee_id}' not found")
    return row_to_dict(row)


def insert_employee(conn: sqlite3.Connection, fields: dict) -> dict:
    employee_id = fields.get("id") or str(uuid.uuid4())
    conn.execute(
        """
        INSERT INTO employees (id, created_at, full_name, position, birth_date, email, department)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        (
            employee_id,
            datetime.now(timezone.utc).isoformat(),
            fields["full_name"],
            fields.get("position") or "",
            fields.get("birth_date"),
            fields.get("email"),
            fields.get("department"),
        ),
    )
    conn.commit()
    return fetch_employee(conn, employee_id)


def delete_employee(conn: sqlite3.Connection, employee_id: str) -> None:
    fetch_employee(conn, employee_id)
    conn.execute("DELETE FROM employees WHERE id = ?", (employee_id,))
    conn.commit()
