"""
Condition analysis — pure functions only.

trend_from_pair() drives the compact dashboard badges (last period vs this
period). suggest_condition() maps a history onto the six-step condition
scale by comparing the last three periods against everything before them.
"""
from __future__ import annotations

from .levels import ConditionLevel, PairTrend
from .statistics import (
    TREND_THRESHOLD,
    average,
    change_percent,
    sort_by_date,
    standard_deviation,
    values_of,
)


def trend_from_pair(previous: float, current: float) -> PairTrend:
    if previous == 0:
        return PairTrend.UP if current > 0 else PairTrend.FLAT

    change = change_percent(previous, current)
    if change > TREND_THRESHOLD:
        return PairTrend.UP
    if change < -TREND_THRESHOLD:
        return PairTrend.DOWN
    return PairTrend.FLAT


def _ladder(change: float, volatility: float, recent_avg: float, older_avg: float) -> ConditionLevel:
    # Order matters: each band only sees what the bands above let through.
    if change > 50 and volatility < 15:
        return ConditionLevel.POWER
    if change > 30:
        return ConditionLevel.AFFLUENCE
    if change > 10 and volatility < 20:
        return ConditionLevel.NORMAL
    if change > -10 and volatility < 25:
        return ConditionLevel.NORMAL
    if change > -30 or (volatility > 30 and change < 0):
        return ConditionLevel.EMERGENCY
    if change > -50:
        return ConditionLevel.DANGER
    if recent_avg < older_avg * 0.3:
        return ConditionLevel.NON_EXISTENCE
    return ConditionLevel.DANGER


def suggest_condition(series) -> tuple[ConditionLevel, str]:
    """
    Suggest a condition level for a statistic history.

    series — observation dicts (sorted by date here) or bare numbers
             already in chronological order.
    Returns (level, reason); fewer than 2 points is NORMAL.
    """
    values = values_of(sort_by_date(series))
    if len(values) < 2:
        return ConditionLevel.NORMAL, "Not enough history yet"

    recent = values[-3:]
    older  = values[:-3] or recent

    recent_avg = average(recent)
    older_avg  = average(older)

    change     = change_percent(older_avg, recent_avg) if older_avg > 0 else 0.0
    volatility = standard_deviation(recent) / recent_avg * 100 if recent_avg > 0 else 0.0

    level  = _ladder(change, volatility, recent_avg, older_avg)
    reason = f"{change:+.1f}% change, volatility {volatility:.1f}%"
    return level, reason
