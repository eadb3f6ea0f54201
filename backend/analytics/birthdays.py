"""
Birthday calendar — pure functions only.

`today` is always passed in, so every result is reproducible. Employees are
dicts with at least id, full_name, position and an ISO birth_date; entries
with a missing or unparseable birth_date are skipped silently.
"""
from __future__ import annotations

from datetime import date, timedelta
from urllib.parse import urlencode

_LEADERSHIP  = ("director", "head", "chief", "lead")
_MANAGEMENT  = ("manager", "specialist")
_ENGINEERING = ("developer", "programmer", "engineer")


def parse_birth_date(value) -> date | None:
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def _on_year(birth: date, year: int) -> date:
    try:
        return birth.replace(year=year)
    except ValueError:
        # Feb 29 outside a leap year
        return date(year, 2, 28)


def next_birthday(birth: date, today: date) -> date:
    this_year = _on_year(birth, today.year)
    return this_year if this_year >= today else _on_year(birth, today.year + 1)


def days_until_birthday(birth: date, today: date) -> int:
    return (next_birthday(birth, today) - today).days


def _with_birthday(employees: list[dict]):
    for emp in employees:
        birth = parse_birth_date(emp.get("birth_date"))
        if birth is not None:
            yield emp, birth


def birthdays_in_days(employees: list[dict], days: int, today: date) -> list[dict]:
    """Employees whose next birthday is exactly `days` ahead (never today)."""
    if days <= 0:
        return []
    return [
        emp for emp, birth in _with_birthday(employees)
        if days_until_birthday(birth, today) == days
    ]


def upcoming_birthdays(employees: list[dict], today: date, days_ahead: int = 30) -> list[dict]:
    """Birthdays within [today, today + days_ahead], soonest first."""
    horizon = today + timedelta(days=days_ahead)
    found = [
        (next_birthday(birth, today), emp) for emp, birth in _with_birthday(employees)
        if next_birthday(birth, today) <= horizon
    ]
    found.sort(key=lambda pair: pair[0])
    return [emp for _, emp in found]


def today_birthdays(employees: list[dict], today: date) -> list[dict]:
    return [emp for emp, birth in _with_birthday(employees) if next_birthday(birth, today) == today]


def format_birthday_info(employee: dict, today: date) -> str:
    birth = parse_birth_date(employee.get("birth_date"))
    if birth is None:
        return ""
    upcoming = next_birthday(birth, today)
    days = (upcoming - today).days
    if days == 0:
        return "Birthday today! 🎉"
    if days == 1:
        return "Birthday tomorrow"
    return f"In {days} days (turns {upcoming.year - birth.year})"


# ── Message formatting ────────────────────────────────────────────────────────

def _bold(text: str, markup: str) -> str:
    return f"<b>{text}</b>" if markup == "html" else f"*{text}*"


def _role_hint(position: str) -> tuple[str, str]:
    p = position.lower()
    if any(word in p for word in _LEADERSHIP):
        return " (leadership)", "💼✨"
    if any(word in p for word in _MANAGEMENT):
        return " (manager/specialist)", "🌟💪"
    if any(word in p for word in _ENGINEERING):
        return " (developer/engineer)", "💻🚀"
    return "", "🌈✨"


def format_upcoming_reminder(employee: dict, days_until: int, today: date, markup: str = "html") -> str:
    """
    HR reminder about a colleague's upcoming birthday.

    markup — "html" for Telegram, "slack" for Slack mrkdwn
    """
    birth    = parse_birth_date(employee.get("birth_date"))
    upcoming = next_birthday(birth, today)
    age      = upcoming.year - birth.year
    position = employee.get("position") or ""
    hint, emoji = _role_hint(position)
    day_word = "day" if days_until == 1 else "days"

    return (
        f"🔔 {_bold('HR reminder', markup)}\n\n"
        f"In {days_until} {day_word} it's {_bold(employee['full_name'], markup)}'s birthday{hint}.\n\n"
        f"Don't forget to prepare a greeting for the team chat! {emoji}\n\n"
        f"📅 Date: {_bold(f'{upcoming:%B} {upcoming.day}', markup)}\n"
        f"🎂 Turns: {_bold(str(age), markup)}\n"
        f"👔 Position: {_bold(position or 'Not specified', markup)}"
    )


def format_today_message(employees: list[dict], today: date, markup: str = "html") -> str:
    celebrating = today_birthdays(employees, today)
    if not celebrating:
        return "No birthdays today 🎉"
    lines = [f"🎉 {_bold('Birthdays today:', markup)}", ""]
    for emp in celebrating:
        suffix = f" ({emp['position']})" if emp.get("position") else ""
        lines.append(f"• {_bold(emp['full_name'], markup)}{suffix}")
    return "\n".join(lines)


def birthday_email_content(employees: list[dict], today: date) -> str:
    """Plain-text digest: today's birthdays plus the next 7 days."""
    celebrating = today_birthdays(employees, today)
    celebrating_ids = {emp.get("id") for emp in celebrating}
    upcoming = [
        emp for emp in upcoming_birthdays(employees, today, 7)
        if emp.get("id") not in celebrating_ids
    ]

    def describe(emp: dict) -> str:
        return f"• {emp['full_name']}" + (f" ({emp['position']})" if emp.get("position") else "")

    parts = ["Employee birthday notice", ""]
    if celebrating:
        parts.append("🎉 BIRTHDAYS TODAY:")
        parts.extend(describe(emp) for emp in celebrating)
        parts.append("")
    if upcoming:
        parts.append("📅 UPCOMING BIRTHDAYS (7 days):")
        parts.extend(f"{describe(emp)} - {format_birthday_info(emp, today)}" for emp in upcoming)
    if not celebrating and not upcoming:
        parts.append("No birthdays in the next 7 days.")
    parts.extend(["", "---", f"Generated {today.strftime('%d.%m.%Y')}"])
    return "\n".join(parts)


# ── Calendar links ────────────────────────────────────────────────────────────

def calendar_links(employee: dict, year: int) -> dict:
    """Google / Outlook 'add event' links for the employee's birthday in `year`."""
    birth = parse_birth_date(employee.get("birth_date"))
    if birth is None:
        raise ValueError("Birth date is not set")

    start = _on_year(birth, year)
    end   = start + timedelta(days=1)
    title = f"🎉 Birthday: {employee['full_name']}"
    description = f"Employee birthday\n\n{employee['full_name']}"
    if employee.get("position"):
        description += f"\nPosition: {employee['position']}"
    if employee.get("department"):
        description += f"\nDepartment: {employee['department']}"
    description += f"\n\nTurns {year - birth.year}"

    google = urlencode({
        "action":  "TEMPLATE",
        "text":    title,
        "details": description,
        "dates":   f"{start:%Y%m%d}T000000/{end:%Y%m%d}T000000",
    })
    outlook = urlencode({
        "subject": title,
        "body":    description,
        "startdt": start.isoformat(),
        "enddt":   end.isoformat(),
    })
    return {
        "title":       title,
        "description": description,
        "google_url":  f"https://calendar.google.com/calendar/render?{google}",
        "outlook_url": f"https://outlook.live.com/calendar/0/deeplink/compose?{outlook}",
    }
