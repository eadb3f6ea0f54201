import datetime as dt
from contextlib import closing
from typing import Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from db import get_db
from queries.statistics import (
    delete_definition,
    delete_value,
    fetch_definition,
    fetch_definitions,
    fetch_values,
    insert_definition,
    insert_value,
    update_definition,
)
from analytics.conditions import suggest_condition
from analytics.levels import condition_color, condition_label
from analytics.owners import OwnerKind
from analytics.statistics import (
    analyze_period_trend,
    average,
    classify_trend,
    filter_by_period,
    generate_recommendations,
    median,
    predict_next,
    standard_deviation,
)

router = APIRouter()


class DefinitionCreate(BaseModel):
    title:              str
    owner_kind:         OwnerKind
    owner_id:           Optional[str]   = None
    description:        Optional[str]   = None
    calculation_method: Optional[str]   = None
    purpose:            Optional[str]   = None
    plan:               Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    unit:               Optional[str]   = None
    inverted:           bool            = False
    is_favorite:        bool            = False


class DefinitionUpdate(BaseModel):
    title:              Optional[str]       = None
    owner_kind:         Optional[OwnerKind] = None
    owner_id:           Optional[str]       = None
    description:        Optional[str]       = None
    calculation_method: Optional[str]       = None
    purpose:            Optional[str]       = None
    plan:               Optional[float]     = Field(None, ge=0, allow_inf_nan=False)
    unit:               Optional[str]       = None
    inverted:           Optional[bool]      = None
    is_favorite:        Optional[bool]      = None


class ValueCreate(BaseModel):
    date:  dt.date
    value: float = Field(allow_inf_nan=False)
    notes: Optional[str] = None


@router.get("/api/statistics")
def list_statistics(owner_kind: Optional[OwnerKind] = None, owner_id: Optional[str] = None):
    with closing(get_db()) as conn:
        result = fetch_definitions(conn, owner_kind.value if owner_kind else None, owner_id)
    return {"statistics": result}


@router.post("/api/statistics", status_code=201)
def create_statistic(req: DefinitionCreate):
    fields = req.model_dump()
    fields["owner_kind"] = req.owner_kind.value
    with closing(get_db()) as conn:
        return insert_definition(conn, fields)


@router.get("/api/statistics/{stat_id}")
def get_statistic(stat_id: str):
    with closing(get_db()) as conn:
        return fetch_definition(conn, stat_id)


@router.patch("/api/statistics/{stat_id}")
def patch_statistic(stat_id: str, req: DefinitionUpdate):
    changes = req.model_dump(exclude_unset=True)
    if changes.get("owner_kind") is not None:
        changes["owner_kind"] = changes["owner_kind"].value
    with closing(get_db()) as conn:
        return update_definition(conn, stat_id, changes)


@router.delete("/api/statistics/{stat_id}")
def remove_statistic(stat_id: str):
    with closing(get_db()) as conn:
        delete_definition(conn, stat_id)
    return {"ok": True}


@router.get("/api/statistics/{stat_id}/values")
def list_values(stat_id: str):
    with closing(get_db()) as conn:
        fetch_definition(conn, stat_id)
        values = fetch_values(conn, stat_id)
    return {"statistic_id": stat_id, "values": values}


@router.post("/api/statistics/{stat_id}/values", status_code=201)
def add_value(stat_id: str, req: ValueCreate):
    with closing(get_db()) as conn:
        return insert_value(conn, stat_id, req.date.isoformat(), req.value, req.notes)


@router.delete("/api/statistics/{stat_id}/values/{value_id}")
def remove_value(stat_id: str, value_id: str):
    with closing(get_db()) as conn:
        delete_value(conn, stat_id, value_id)
    return {"ok": True}


@router.get("/api/statistics/{stat_id}/analysis")
def analyze_statistic(stat_id: str, period: str = Query("all")):
    with closing(get_db()) as conn:
        definition = fetch_definition(conn, stat_id)
        values     = fetch_values(conn, stat_id)

    series = filter_by_period(values, period)
    level, reason = suggest_condition(series)
    return {
        "statistic_id": stat_id,
        "period":       period,
        "points":       len(series),
        "summary": {
            "average":            average(series),
            "median":             median(series),
            "standard_deviation": standard_deviation(series),
        },
        "trend":        classify_trend(series),
        "period_trend": analyze_period_trend(series, definition["inverted"]),
        "condition": {
            "level":  level,
            "label":  condition_label(level),
            "color":  condition_color(level),
            "reason": reason,
        },
        "forecast":        predict_next(series),
        "recommendations": generate_recommendations(definition, series),
    }
