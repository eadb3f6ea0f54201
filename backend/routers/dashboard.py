from contextlib import closing
from typing import Optional

from fastapi import APIRouter, Query

from db import get_db
from queries.statistics import fetch_definitions, fetch_values_bulk
from analytics.conditions import suggest_condition, trend_from_pair
from analytics.levels import condition_color, condition_label, trend_color
from analytics.owners import Owner, OwnerKind, owner_label
from analytics.statistics import change_percent, compare_owners, plan_attainment

router = APIRouter()


def _card(definition: dict, values: list[dict]) -> dict:
    """Latest-vs-previous summary for one statistic."""
    current  = float(values[-1]["value"]) if values else 0.0
    previous = float(values[-2]["value"]) if len(values) > 1 else 0.0
    trend    = trend_from_pair(previous, current)
    level, reason = suggest_condition(values)
    return {
        "id":             definition["id"],
        "title":          definition["title"],
        "owner":          owner_label(Owner.parse(definition["owner_kind"], definition["owner_id"])),
        "inverted":       definition["inverted"],
        "current":        current,
        "previous":       previous,
        "plan":           definition.get("plan"),
        "unit":           definition.get("unit"),
        "plan_attainment": plan_attainment(current, definition.get("plan")),
        "change_percent": change_percent(previous, current),
        "trend":          trend,
        "trend_color":    trend_color(trend),
        "condition":      level,
        "condition_label": condition_label(level),
        "condition_color": condition_color(level),
        "reason":         reason,
        "history":        [v["value"] for v in values],
    }


@router.get("/api/dashboard/cards")
def dashboard_cards(owner_kind: Optional[OwnerKind] = None, owner_id: Optional[str] = None):
    with closing(get_db()) as conn:
        definitions = fetch_definitions(conn, owner_kind.value if owner_kind else None, owner_id)
        values      = fetch_values_bulk(conn, [d["id"] for d in definitions])
    return {"cards": [_card(d, values[d["id"]]) for d in definitions]}


@router.get("/api/dashboard/compare")
def compare(title: str = Query(..., min_length=1)):
    with closing(get_db()) as conn:
        definitions = [d for d in fetch_definitions(conn) if d["title"] == title]
        values      = fetch_values_bulk(conn, [d["id"] for d in definitions])
    return {"title": title, "owners": compare_owners(definitions, values, title)}
