import datetime as dt
from contextlib import closing
from typing import Optional
from urllib.parse import urlsplit

import httpx
from fastapi import APIRouter
from pydantic import BaseModel

from db import get_db, read_integrations, write_integrations
from queries.employees import fetch_employees
from queries.notifications import SqliteLedger
from notifier import run_birthday_reminders

router = APIRouter()


class SlackSettings(BaseModel):
    webhook_url: str


class TelegramSettings(BaseModel):
    bot_token: str
    chat_id:   str


class IntegrationsUpdate(BaseModel):
    slack:    Optional[SlackSettings]    = None
    telegram: Optional[TelegramSettings] = None


def _masked(config: dict) -> dict:
    """Never echo secrets back in full."""
    telegram = config.get("telegram")
    if telegram and telegram.get("bot_token"):
        telegram = {**telegram, "bot_token": telegram["bot_token"][:4] + "…"}
    slack = config.get("slack")
    if slack and slack.get("webhook_url"):
        parts = urlsplit(slack["webhook_url"])
        slack = {**slack, "webhook_url": f"{parts.scheme}://{parts.netloc}/…"}
    return {**config, "slack": slack, "telegram": telegram}


@router.get("/api/integrations")
def get_integrations():
    return _masked(read_integrations())


@router.put("/api/integrations")
def put_integrations(req: IntegrationsUpdate):
    config = req.model_dump()
    write_integrations(config)
    return {"ok": True, "config": _masked(config)}


@router.post("/api/integrations/birthday-reminders/run")
def run_reminders(today: Optional[dt.date] = None):
    today = today or dt.date.today()
    with closing(get_db()) as conn, httpx.Client(timeout=10.0) as client:
        employees = fetch_employees(conn)
        ledger = SqliteLedger(conn, today)
        ledger.cleanup(today)
        stats = run_birthday_reminders(employees, read_integrations(), ledger, client, today)
    return {"date": today.isoformat(), **stats}
