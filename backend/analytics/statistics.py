"""
Statistic series analysis — pure functions only.

A series is a list of observation dicts {date: "YYYY-MM-DD", value: float};
extra keys (id, notes, …) are carried along and ignored. A list of bare
numbers is accepted everywhere too, taken as already in chronological order. Inputs are never
mutated: every function that needs chronological order sorts a copy.

Insufficient history is never an error. Each function documents the
sentinel it returns instead (0, None, "stable").
"""
from __future__ import annotations

import math

import numpy as np

from .levels import RecommendationKind, TrendType

# Trailing slice sizes for the dashboard period selector (weekly values)
PERIOD_SLICE_MAP = {
    "1w": 2,
    "3w": 4,
    "1m": 5,
    "3m": 13,
    "6m": 26,
    "1y": 52,
}
DEFAULT_PERIOD_SLICE = 13

# Tunable policy constants, in percent
TREND_THRESHOLD       = 5
VOLATILITY_THRESHOLD  = 30
STABILITY_BAND        = 2
RECENT_WINDOW_SHARE   = 0.3
RECENT_WINDOW_MIN     = 3


# ── Helpers ───────────────────────────────────────────────────────────────────

def values_of(series) -> list[float]:
    """Accept observation dicts or bare numbers; return the numeric values."""
    return [float(o["value"]) if isinstance(o, dict) else float(o) for o in series]


def sort_by_date(series) -> list:
    # bare numbers carry no date and are taken as already chronological
    if series and not isinstance(series[0], dict):
        return list(series)
    # sorted() is stable, so same-day observations keep their input order
    return sorted(series, key=lambda o: str(o.get("date", "")))


def js_round(x: float) -> int:
    """Round half up, like the dashboard's Math.round."""
    return math.floor(x + 0.5)


def recent_window(sorted_series: list) -> list:
    """Trailing 30% of a chronologically sorted series, at least 3 points."""
    count = max(RECENT_WINDOW_MIN, math.floor(len(sorted_series) * RECENT_WINDOW_SHARE))
    return sorted_series[-count:]


def volatility(series) -> float:
    """Coefficient of variation in percent; 0 when the mean is 0."""
    avg = average(series)
    if avg == 0:
        return 0.0
    return standard_deviation(series) / avg * 100


# ── Primitives ────────────────────────────────────────────────────────────────

def average(series) -> float:
    values = values_of(series)
    if not values:
        return 0
    return float(np.mean(values))


def median(series) -> float:
    values = values_of(series)
    if not values:
        return 0
    return float(np.median(values))


def standard_deviation(series) -> float:
    """Population standard deviation (divides by N)."""
    values = values_of(series)
    if not values:
        return 0
    return float(np.std(values))


def change_percent(previous: float, current: float) -> float:
    if previous == 0:
        return 100 if current > 0 else 0
    return (current - previous) / previous * 100


def plan_attainment(current: float, plan: float | None) -> float | None:
    """Current value as a percentage of the plan; None without a positive plan."""
    if plan is None or plan <= 0:
        return None
    return current / plan * 100


# ── Trend and forecast ────────────────────────────────────────────────────────

def classify_trend(series) -> TrendType:
    """
    Classify the recent direction of a series.

    Uses the trailing 30% of points (min 3). High volatility overrides any
    directional signal; fewer than 3 points is "stable".
    """
    if len(series) < 3:
        return TrendType.STABLE

    recent = values_of(recent_window(sort_by_date(series)))
    change = change_percent(recent[0], recent[-1])
    vol    = volatility(recent)

    if vol > VOLATILITY_THRESHOLD:
        return TrendType.VOLATILE
    if change > TREND_THRESHOLD:
        return TrendType.GROWING
    if change < -TREND_THRESHOLD:
        return TrendType.DECLINING
    return TrendType.STABLE


def predict_next(series) -> int | None:
    """
    Forecast the next value with ordinary least squares over the point index.

    Returns None with fewer than 2 points, or when the fit overflows. The
    prediction is rounded and clamped to be non-negative.
    """
    n = len(series)
    if n < 2:
        return None

    y = np.array(values_of(sort_by_date(series)), dtype=float)
    x = np.arange(n, dtype=float)

    sum_x, sum_y = x.sum(), y.sum()
    sum_xy = (x * y).sum()
    sum_x2 = (x * x).sum()

    denominator = n * sum_x2 - sum_x * sum_x
    slope = (n * sum_xy - sum_x * sum_y) / denominator if denominator else 0.0
    intercept = (sum_y - slope * sum_x) / n

    prediction = float(slope * n + intercept)
    if not math.isfinite(prediction):
        return None
    return max(0, js_round(prediction))


# ── Period views ──────────────────────────────────────────────────────────────

def filter_by_period(series: list, period: str) -> list:
    """Chronologically sorted tail of the series for a dashboard period."""
    if not series:
        return []
    ordered = sort_by_date(series)
    if period == "all":
        return ordered
    count = PERIOD_SLICE_MAP.get(period, DEFAULT_PERIOD_SLICE)
    return ordered[-count:]


def analyze_period_trend(series: list, inverted: bool = False) -> dict:
    """
    Start-of-period vs end-of-period comparison.

    is_good follows the metric polarity: growth is good unless the metric
    is inverted.
    """
    if not series:
        return {"current": 0, "prev": 0, "delta": 0, "percent": 0,
                "direction": "flat", "is_good": True}

    ordered = values_of(sort_by_date(series))
    current = ordered[-1]
    prev    = ordered[0] if len(ordered) > 1 else 0.0
    delta   = current - prev

    if prev == 0:
        percent = 0.0 if current == 0 else 100.0
    else:
        percent = delta / abs(prev) * 100

    direction = "up" if delta > 0 else "down" if delta < 0 else "flat"
    is_good   = delta <= 0 if inverted else delta >= 0

    return {
        "current":   current,
        "prev":      prev,
        "delta":     delta,
        "percent":   percent,
        "direction": direction,
        "is_good":   is_good,
    }


def compare_owners(
    definitions: list[dict],
    values_by_id: dict[str, list[dict]],
    title: str,
) -> list[dict]:
    """Compare statistics sharing a title across their owners, best current first."""
    rows = []
    for stat in definitions:
        if stat.get("title") != title:
            continue
        ordered = sort_by_date(values_by_id.get(stat["id"], []))
        current = float(ordered[-1]["value"]) if ordered else 0.0
        first   = float(ordered[0]["value"]) if len(ordered) > 1 else 0.0
        rows.append({
            "statistic_id":  stat["id"],
            "owner_kind":    stat.get("owner_kind"),
            "owner_id":      stat.get("owner_id") or "",
            "current_value": current,
            "trend":         (current - first) / abs(first) * 100 if first else 0.0,
            "average":       average(ordered),
        })
    return sorted(rows, key=lambda r: r["current_value"], reverse=True)


# ── Recommendations ───────────────────────────────────────────────────────────
# Each check receives state = {recommendations, definition, series, trend,
# latest_change} and returns it, possibly with a recommendation
# appended. Checks are independent: any number of them may fire.


def _check_decline(state: dict) -> dict:
    if state["trend"] == TrendType.DECLINING and not state["definition"].get("inverted"):
        state["recommendations"].append({
            "kind":    RecommendationKind.WARNING,
            "message": f"Statistic is down {abs(state['latest_change']):.1f}%. Needs attention.",
            "action":  "Investigate the cause of the decline",
        })
    return state


def _check_inverted_growth(state: dict) -> dict:
    if state["trend"] == TrendType.GROWING and state["definition"].get("inverted"):
        state["recommendations"].append({
            "kind":    RecommendationKind.WARNING,
            "message": (
                f"Inverted statistic is up {state['latest_change']:.1f}%. "
                "For this metric that is a negative trend."
            ),
            "action":  "Take countermeasures to bring the value down",
        })
    return state


def _check_volatility(state: dict) -> dict:
    vol = volatility(state["series"])
    if vol > VOLATILITY_THRESHOLD:
        state["recommendations"].append({
            "kind":    RecommendationKind.INFO,
            "message": f"High volatility ({vol:.1f}%). Values fluctuate strongly.",
            "action":  "Look into what drives the fluctuations",
        })
    return state


def _check_stability(state: dict) -> dict:
    if state["trend"] == TrendType.STABLE and abs(state["latest_change"]) < STABILITY_BAND:
        state["recommendations"].append({
            "kind":    RecommendationKind.SUCCESS,
            "message": "Statistic is stable. Keep up the current activity.",
        })
    return state


RECOMMENDATION_STEPS = [
    _check_decline,
    _check_inverted_growth,
    _check_volatility,
    _check_stability,
]


def generate_recommendations(definition: dict, series: list) -> list[dict]:
    """
    Turn a statistic's history into a list of {kind, message, action?}.

    definition — statistic definition; only `inverted` is consulted
    series     — observations in any order
    """
    if not series:
        return [{
            "kind":    RecommendationKind.WARNING,
            "message": "No data to analyze. Start entering values.",
        }]

    ordered = sort_by_date(series)
    values  = values_of(ordered)
    current = values[-1]
    prev    = values[-2] if len(values) > 1 else current

    state: dict = {
        "recommendations": [],
        "definition":      definition,
        "series":          ordered,
        "trend":           classify_trend(ordered),
        "latest_change":   (current - prev) / abs(prev) * 100 if prev else 0.0,
    }
    for step in RECOMMENDATION_STEPS:
        state = step(state)
    return state["recommendations"]
