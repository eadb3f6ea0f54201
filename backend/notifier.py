"""
Birthday reminders for HR over Slack and Telegram.

Looks for employees whose birthday is 7 or 3 days away and posts one
reminder per employee, lead time and day to every configured channel.
A ledger (anything with has(key) / put(key)) remembers what was already
sent, so running this several times a day is harmless.

Integrations config (data/integrations.json):
    {"slack":    {"webhook_url": "https://hooks.slack.com/..."},
     "telegram": {"bot_token": "123:abc", "chat_id": "-100..."}}
Either entry may be null.

Usage:
    python3 notifier.py                     # remind for today
    python3 notifier.py --date 2026-03-01   # pretend it is another day
    python3 notifier.py --dry-run           # print messages, send nothing
"""
from __future__ import annotations

import argparse
import logging
import sys
from contextlib import closing
from datetime import date
from typing import Callable, Protocol

import httpx

from db import get_db, read_integrations
from queries.employees import fetch_employees
from queries.notifications import SqliteLedger
from analytics.birthdays import birthdays_in_days, format_upcoming_reminder

logger = logging.getLogger(__name__)

TELEGRAM_API = "https://api.telegram.org"
DEFAULT_LEAD_DAYS = (7, 3)


class NotificationLedger(Protocol):
    def has(self, key: str) -> bool: ...
    def put(self, key: str) -> None: ...


class MemoryLedger:
    def __init__(self):
        self.keys: set[str] = set()

    def has(self, key: str) -> bool:
        return key in self.keys

    def put(self, key: str) -> None:
        self.keys.add(key)


def ledger_key(employee_id: str, days_until: int, day: date) -> str:
    return f"{employee_id}:{days_until}:{day.isoformat()}"


# ── Channels ──────────────────────────────────────────────────────────────────

def send_slack(client: httpx.Client, webhook_url: str, text: str) -> bool:
    try:
        response = client.post(webhook_url, json={"text": text})
    except httpx.HTTPError as e:
        logger.error(f"Slack notification error: {e}")
        return False
    if not response.is_success:
        logger.warning(f"Slack webhook answered {response.status_code}")
    return response.is_success


def send_telegram(client: httpx.Client, bot_token: str, chat_id: str, text: str,
                  parse_mode: str = "HTML") -> bool:
    try:
        response = client.post(
            f"{TELEGRAM_API}/bot{bot_token}/sendMessage",
            json={"chat_id": chat_id, "text": text, "parse_mode": parse_mode},
        )
    except httpx.HTTPError as e:
        logger.error(f"Telegram notification error: {e}")
        return False
    if not response.is_success:
        logger.warning(f"Telegram API answered {response.status_code}")
    return response.is_success


def _channels(integrations: dict) -> list[tuple[str, Callable[[httpx.Client, str], bool]]]:
    """[(markup, send(client, text) -> bool)] for every usable integration."""
    channels = []
    telegram = integrations.get("telegram") or {}
    if telegram.get("bot_token") and telegram.get("chat_id"):
        channels.append((
            "html",
            lambda client, text: send_telegram(client, telegram["bot_token"], telegram["chat_id"], text),
        ))
    slack = integrations.get("slack") or {}
    if slack.get("webhook_url"):
        channels.append((
            "slack",
            lambda client, text: send_slack(client, slack["webhook_url"], text),
        ))
    return channels


# ── Run ───────────────────────────────────────────────────────────────────────

def run_birthday_reminders(
    employees: list[dict],
    integrations: dict,
    ledger: NotificationLedger,
    client: httpx.Client,
    today: date,
    lead_days: tuple[int, ...] = DEFAULT_LEAD_DAYS,
) -> dict:
    """
    Send every reminder due today. Returns {sent, skipped, failed} counts.

    sent    — deliveries that succeeded (one per channel)
    skipped — employees already in the ledger for this lead time and day
    failed  — deliveries that errored; those employees stay out of the
              ledger unless another channel succeeded, so a rerun retries
    """
    stats = {"sent": 0, "skipped": 0, "failed": 0}
    channels = _channels(integrations)
    if not channels:
        logger.info("No notification integrations configured; skipping birthday reminders")
        return stats

    for days in lead_days:
        due = birthdays_in_days(employees, days, today)
        logger.info(f"{len(due)} birthday(s) in {days} days")
        for emp in due:
            key = ledger_key(emp["id"], days, today)
            if ledger.has(key):
                stats["skipped"] += 1
                continue
            delivered = False
            for markup, send in channels:
                if send(client, format_upcoming_reminder(emp, days, today, markup)):
                    stats["sent"] += 1
                    delivered = True
                else:
                    stats["failed"] += 1
            if delivered:
                ledger.put(key)
    return stats


def main() -> None:
    parser = argparse.ArgumentParser(description="Send HR birthday reminders.")
    parser.add_argument("--date", type=date.fromisoformat, default=None,
                        help="Day to run for (YYYY-MM-DD, default today)")
    parser.add_argument("--dry-run", action="store_true",
                        help="Print the reminders instead of sending them")
    args = parser.parse_args()

    today = args.date or date.today()
    with closing(get_db()) as conn:
        employees = fetch_employees(conn)
        stats = _run(conn, employees, today, args.dry_run)
    if stats is None:
        return

    print(f"Done: {stats['sent']} sent, {stats['skipped']} already sent, {stats['failed']} failed")
    if stats["failed"]:
        sys.exit(1)


def _run(conn, employees: list[dict], today: date, dry_run: bool) -> dict | None:
    print(f"Checking {len(employees)} employees for {today.isoformat()}...", flush=True)

    if dry_run:
        for days in DEFAULT_LEAD_DAYS:
            for emp in birthdays_in_days(employees, days, today):
                print(f"\n[{days} days] {emp['full_name']}\n{format_upcoming_reminder(emp, days, today, 'slack')}")
        return None

    ledger = SqliteLedger(conn, today)
    dropped = ledger.cleanup(today)
    if dropped:
        print(f"  Forgot {dropped} old ledger entries", flush=True)

    with httpx.Client(timeout=10.0) as client:
        return run_birthday_reminders(employees, read_integrations(), ledger, client, today)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    main()
