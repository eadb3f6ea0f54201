"""
Classification enums and their display helpers — pure, no I/O.
"""
from __future__ import annotations

from enum import Enum


class TrendType(str, Enum):
    GROWING   = "growing"
    DECLINING = "declining"
    STABLE    = "stable"
    VOLATILE  = "volatile"


class PairTrend(str, Enum):
    UP   = "UP"
    DOWN = "DOWN"
    FLAT = "FLAT"


class RecommendationKind(str, Enum):
    WARNING = "warning"
    INFO    = "info"
    SUCCESS = "success"


class ConditionLevel(str, Enum):
    """Six-step condition scale, most distressed first."""
    NON_EXISTENCE = "non_existence"
    DANGER        = "danger"
    EMERGENCY     = "emergency"
    NORMAL        = "normal"
    AFFLUENCE     = "affluence"
    POWER         = "power"

    @property
    def rank(self) -> int:
        return _CONDITION_ORDER.index(self)

    def _coerce(self, other):
        # plain strings compare by rank too, not alphabetically
        if isinstance(other, ConditionLevel):
            return other
        if isinstance(other, str):
            return ConditionLevel(other)
        return None

    def __lt__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.rank >= other.rank


_CONDITION_ORDER = list(ConditionLevel)

_GRAY = "#6b7280"

_CONDITION_LABELS = {
    ConditionLevel.POWER:         "Power",
    ConditionLevel.AFFLUENCE:     "Affluence",
    ConditionLevel.NORMAL:        "Normal",
    ConditionLevel.EMERGENCY:     "Emergency",
    ConditionLevel.DANGER:        "Danger",
    ConditionLevel.NON_EXISTENCE: "Non-Existence",
}

_CONDITION_COLORS = {
    ConditionLevel.POWER:         "#8b5cf6",  # purple
    ConditionLevel.AFFLUENCE:     "#10b981",  # emerald
    ConditionLevel.NORMAL:        "#3b82f6",  # blue
    ConditionLevel.EMERGENCY:     "#f59e0b",  # amber
    ConditionLevel.DANGER:        "#ef4444",  # red
    ConditionLevel.NON_EXISTENCE: "#1f2937",  # gray-800
}

_TREND_COLORS = {
    PairTrend.UP:   "#10b981",
    PairTrend.DOWN: "#ef4444",
    PairTrend.FLAT: _GRAY,
}


def condition_label(level) -> str:
    try:
        return _CONDITION_LABELS[ConditionLevel(level)]
    except ValueError:
        return "Unknown"


def condition_color(level) -> str:
    try:
        return _CONDITION_COLORS[ConditionLevel(level)]
    except ValueError:
        return _GRAY


def trend_color(trend) -> str:
    try:
        return _TREND_COLORS[PairTrend(trend)]
    except ValueError:
        return _GRAY
