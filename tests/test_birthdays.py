"""
Unit tests for analytics/birthdays.py — pure functions, fixed `today`.
"""
from datetime import date

import pytest

from conftest import employee
from analytics.birthdays import (
    birthday_email_content,
    birthdays_in_days,
    calendar_links,
    days_until_birthday,
    format_birthday_info,
    format_today_message,
    format_upcoming_reminder,
    next_birthday,
    today_birthdays,
    upcoming_birthdays,
)

TODAY = date(2026, 10, 19)

ANN   = employee("e1", "Ann Lee",     "1990-10-26", "Backend Engineer")
BORIS = employee("e2", "Boris Kim",   "1985-10-22", "Sales Manager")
CARA  = employee("e3", "Cara Diaz",   "1992-10-19", "Head of HR")
DAN   = employee("e4", "Dan Moss",    "1990-10-18")
EVE   = employee("e5", "Eve Unknown", None)
FRED  = employee("e6", "Fred Typo",   "not-a-date")

STAFF = [ANN, BORIS, CARA, DAN, EVE, FRED]


class TestNextBirthday:
    def test_later_this_year(self):
        assert next_birthday(date(1990, 10, 26), TODAY) == date(2026, 10, 26)

    def test_already_passed_rolls_over(self):
        assert days_until_birthday(date(1990, 10, 18), TODAY) == 364

    def test_today(self):
        assert days_until_birthday(date(1992, 10, 19), TODAY) == 0

    def test_year_wrap(self):
        assert days_until_birthday(date(1990, 1, 2), date(2026, 12, 30)) == 3

    def test_leap_day_in_common_year(self):
        assert next_birthday(date(2000, 2, 29), date(2026, 2, 20)) == date(2026, 2, 28)


class TestSelections:
    def test_exact_lead_time(self):
        assert birthdays_in_days(STAFF, 7, TODAY) == [ANN]
        assert birthdays_in_days(STAFF, 3, TODAY) == [BORIS]

    def test_zero_days_never_matches(self):
        assert birthdays_in_days(STAFF, 0, TODAY) == []

    def test_upcoming_sorted_and_bounded(self):
        assert upcoming_birthdays(STAFF, TODAY, 30) == [CARA, BORIS, ANN]
        assert upcoming_birthdays(STAFF, TODAY, 5) == [CARA, BORIS]

    def test_today(self):
        assert today_birthdays(STAFF, TODAY) == [CARA]


class TestFormatting:
    def test_birthday_info(self):
        assert format_birthday_info(CARA, TODAY).startswith("Birthday today")
        assert format_birthday_info(employee("x", "X", "1990-10-20"), TODAY) == "Birthday tomorrow"
        assert format_birthday_info(ANN, TODAY) == "In 7 days (turns 36)"
        assert format_birthday_info(EVE, TODAY) == ""

    def test_telegram_reminder(self):
        text = format_upcoming_reminder(ANN, 7, TODAY, "html")
        assert "<b>Ann Lee</b>" in text
        assert "(developer/engineer)" in text
        assert "October 26" in text
        assert "<b>36</b>" in text

    def test_slack_reminder(self):
        text = format_upcoming_reminder(BORIS, 3, TODAY, "slack")
        assert "*Boris Kim*" in text
        assert "(manager/specialist)" in text
        assert "<b>" not in text

    def test_leadership_wording(self):
        assert "(leadership)" in format_upcoming_reminder(CARA, 365, TODAY)

    def test_today_message(self):
        assert "Cara Diaz" in format_today_message(STAFF, TODAY)
        assert format_today_message([ANN], TODAY).startswith("No birthdays today")

    def test_email_content(self):
        body = birthday_email_content(STAFF, TODAY)
        assert "BIRTHDAYS TODAY" in body
        assert "Cara Diaz (Head of HR)" in body
        assert "Boris Kim (Sales Manager) - In 3 days (turns 41)" in body
        assert "Ann Lee" in body

    def test_email_content_quiet_week(self):
        assert "No birthdays in the next 7 days." in birthday_email_content([DAN], TODAY)


class TestCalendarLinks:
    def test_links(self):
        links = calendar_links(ANN, 2026)
        assert links["title"] == "🎉 Birthday: Ann Lee"
        assert "20261026T000000" in links["google_url"]
        assert links["google_url"].startswith("https://calendar.google.com/calendar/render?")
        assert "startdt=2026-10-26" in links["outlook_url"]
        assert "Turns 36" in links["description"]

    def test_missing_birth_date(self):
        with pytest.raises(ValueError):
            calendar_links(EVE, 2026)
