"""
Shared fixtures and helpers for the HR stats backend tests.

Analytics tests call the pure functions directly. API tests run the FastAPI
app in-process against a throwaway data directory — no running server and
no network required.
"""
import sys
from datetime import date, timedelta
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import db  # noqa: E402


# --------------------------------------------------------------------------
# Series builders
# --------------------------------------------------------------------------

def weekly(*values, start: date = date(2026, 1, 5)) -> list[dict]:
    """Observations one week apart, oldest first."""
    return [
        {"date": (start + timedelta(weeks=i)).isoformat(), "value": v}
        for i, v in enumerate(values)
    ]


def employee(emp_id: str, full_name: str, birth_date: str | None, position: str = "") -> dict:
    return {"id": emp_id, "full_name": full_name, "birth_date": birth_date, "position": position}


# --------------------------------------------------------------------------
# API fixtures
# --------------------------------------------------------------------------

@pytest.fixture
def data_dir(tmp_path, monkeypatch) -> Path:
    """Point the data store at a fresh temp directory."""
    monkeypatch.setattr(db, "DATA_DIR", tmp_path)
    return tmp_path


@pytest.fixture
def client(data_dir):
    from fastapi.testclient import TestClient
    from main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture
def conn(data_dir):
    c = db.get_db()
    yield c
    c.close()
