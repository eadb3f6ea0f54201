"""
Database helpers shared across queries and routers.
No analysis logic lives here — only I/O primitives and configuration.
"""
import json
import os
import sqlite3
from pathlib import Path

DATA_DIR  = Path(os.environ.get("HR_DATA_DIR", Path(__file__).parent.parent / "data"))
DB_NAME   = os.environ.get("HR_DB_NAME", "hr.db")
LOG_LEVEL = os.environ.get("HR_LOG_LEVEL", "INFO")

SCHEMA = """
CREATE TABLE IF NOT EXISTS statistic_definitions (
    id                 TEXT PRIMARY KEY,
    created_at         TEXT NOT NULL,
    title              TEXT NOT NULL,
    description        TEXT,
    calculation_method TEXT,
    purpose            TEXT,
    plan               REAL,
    unit               TEXT,
    owner_kind         TEXT NOT NULL,
    owner_id           TEXT,
    inverted           INTEGER NOT NULL DEFAULT 0,
    is_favorite        INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS statistic_values (
    id            TEXT PRIMARY KEY,
    definition_id TEXT NOT NULL REFERENCES statistic_definitions(id) ON DELETE CASCADE,
    date          TEXT NOT NULL,
    value         REAL NOT NULL,
    notes         TEXT
);
CREATE INDEX IF NOT EXISTS idx_values_definition ON statistic_values(definition_id, date);

CREATE TABLE IF NOT EXISTS employees (
    id         TEXT PRIMARY KEY,
    created_at TEXT NOT NULL,
    full_name  TEXT NOT NULL,
    position   TEXT NOT NULL DEFAULT '',
    birth_date TEXT,
    email      TEXT,
    department TEXT
);

CREATE TABLE IF NOT EXISTS sent_notifications (
    key     TEXT PRIMARY KEY,
    sent_on TEXT NOT NULL
);
"""


def row_to_dict(row) -> dict:
    return dict(row)


def db_path() -> Path:
    return DATA_DIR / DB_NAME


def get_db() -> sqlite3.Connection:
    """Open the data store, creating the schema on first use."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path())
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    conn.executescript(SCHEMA)
    return conn


# ── Integration settings ─────────────────────────────────────────────────────

def integrations_path() -> Path:
    return DATA_DIR / "integrations.json"


def read_integrations() -> dict:
    p = integrations_path()
    if p.exists():
        return json.loads(p.read_text())
    return {"slack": None, "telegram": None}


def write_integrations(config: dict) -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    integrations_path().write_text(json.dumps(config, indent=2))
