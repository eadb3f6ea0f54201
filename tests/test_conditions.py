"""
Unit tests for analytics/conditions.py, analytics/levels.py and
analytics/owners.py — pure functions only.
"""
import pytest

from conftest import weekly
from analytics.conditions import _ladder, suggest_condition, trend_from_pair
from analytics.levels import (
    ConditionLevel,
    PairTrend,
    condition_color,
    condition_label,
    trend_color,
)
from analytics.owners import Owner, OwnerKind, owner_label


# ── trend_from_pair ────────────────────────────────────────────────────────────

class TestTrendFromPair:
    @pytest.mark.parametrize("previous,current,expected", [
        (0, 5, PairTrend.UP),
        (0, 0, PairTrend.FLAT),
        (0, -1, PairTrend.FLAT),
        (100, 105, PairTrend.FLAT),
        (100, 105.5, PairTrend.UP),
        (100, 95, PairTrend.FLAT),
        (100, 94, PairTrend.DOWN),
    ])
    def test_thresholds(self, previous, current, expected):
        assert trend_from_pair(previous, current) == expected


# ── suggest_condition ──────────────────────────────────────────────────────────

class TestSuggestCondition:
    def test_short_history_is_normal(self):
        assert suggest_condition([100])[0] == ConditionLevel.NORMAL
        assert suggest_condition([])[0] == ConditionLevel.NORMAL

    def test_two_points_compare_against_themselves(self):
        level, reason = suggest_condition([100, 102])
        assert level == ConditionLevel.NORMAL
        assert "+0.0%" in reason

    def test_two_noisy_points_are_emergency(self):
        # no change, but 50% volatility clears every "normal" band
        assert suggest_condition([100, 300])[0] == ConditionLevel.EMERGENCY

    def test_power(self):
        # older [100], recent avg 155 → +55%, volatility ~2.6%
        level, reason = suggest_condition([100, 150, 155, 160])
        assert level == ConditionLevel.POWER
        assert "+55.0%" in reason

    def test_same_change_noisier_is_affluence(self):
        # +55% but volatility ~18.4% misses the power guard
        assert suggest_condition([100, 120, 155, 190])[0] == ConditionLevel.AFFLUENCE

    def test_spike_scenario(self):
        level, reason = suggest_condition([1000, 1000, 1000, 1000, 3000])
        assert level == ConditionLevel.AFFLUENCE
        assert "+66.7%" in reason
        assert "56.6%" in reason

    def test_flat_is_normal(self):
        assert suggest_condition([100] * 5)[0] == ConditionLevel.NORMAL

    def test_moderate_drop_is_emergency(self):
        assert suggest_condition([100, 100, 100, 80, 80, 80])[0] == ConditionLevel.EMERGENCY

    def test_volatile_drop_is_emergency(self):
        # -40% would be danger, but volatility > 30 with a negative change wins first
        assert suggest_condition([100, 100, 100, 20, 100, 60])[0] == ConditionLevel.EMERGENCY

    def test_steep_drop_is_danger(self):
        assert suggest_condition([100, 100, 100, 60, 60, 60])[0] == ConditionLevel.DANGER

    def test_sixty_percent_drop_falls_back_to_danger(self):
        assert suggest_condition([100, 100, 100, 40, 40, 40])[0] == ConditionLevel.DANGER

    def test_collapse_is_non_existence(self):
        assert suggest_condition([100, 100, 100, 20, 20, 20])[0] == ConditionLevel.NON_EXISTENCE

    def test_zero_baseline_means_no_change(self):
        assert suggest_condition([0, 0, 0, 50, 50, 50])[0] == ConditionLevel.NORMAL

    def test_observation_dicts_sorted_by_date(self):
        series = list(reversed(weekly(100, 150, 155, 160)))
        assert suggest_condition(series)[0] == ConditionLevel.POWER


class TestLadderOrder:
    def test_power_band(self):
        assert _ladder(55, 10, 155, 100) == ConditionLevel.POWER

    def test_power_guard_falls_through(self):
        assert _ladder(55, 20, 155, 100) == ConditionLevel.AFFLUENCE

    def test_growth_with_noise_still_normal(self):
        # fails "> 10 and < 20" but passes "> -10 and < 25"
        assert _ladder(15, 22, 115, 100) == ConditionLevel.NORMAL

    def test_growth_with_heavy_noise_is_emergency(self):
        assert _ladder(15, 40, 115, 100) == ConditionLevel.EMERGENCY


# ── levels ─────────────────────────────────────────────────────────────────────

class TestConditionLevel:
    def test_ordering(self):
        assert ConditionLevel.NON_EXISTENCE < ConditionLevel.DANGER < ConditionLevel.EMERGENCY
        assert ConditionLevel.EMERGENCY < ConditionLevel.NORMAL < ConditionLevel.AFFLUENCE
        assert ConditionLevel.AFFLUENCE < ConditionLevel.POWER
        assert max(ConditionLevel) == ConditionLevel.POWER

    def test_serializes_as_string(self):
        assert ConditionLevel.POWER == "power"

    def test_compares_with_plain_strings_by_rank(self):
        assert ConditionLevel.AFFLUENCE > "danger"
        assert ConditionLevel.DANGER < "affluence"
        assert ConditionLevel.NORMAL >= "normal"
        assert ConditionLevel.NORMAL <= "power"

    def test_unknown_string_rejected(self):
        with pytest.raises(ValueError):
            ConditionLevel.NORMAL < "great"

    def test_labels_and_colors(self):
        assert condition_label("power") == "Power"
        assert condition_label(ConditionLevel.NON_EXISTENCE) == "Non-Existence"
        assert condition_color(ConditionLevel.DANGER) == "#ef4444"
        assert condition_label("bogus") == "Unknown"
        assert condition_color("bogus") == "#6b7280"

    def test_trend_colors(self):
        assert trend_color(PairTrend.UP) == "#10b981"
        assert trend_color("DOWN") == "#ef4444"
        assert trend_color("sideways") == "#6b7280"


# ── owners ─────────────────────────────────────────────────────────────────────

class TestOwners:
    def test_parse_is_case_insensitive(self):
        assert Owner.parse("DEPARTMENT", "d1") == Owner(OwnerKind.DEPARTMENT, "d1")

    def test_parse_rejects_unknown_kind(self):
        with pytest.raises(ValueError):
            Owner.parse("team", "t1")

    def test_label_uses_known_name(self):
        owner = Owner(OwnerKind.DIVISION, "2")
        assert owner_label(owner, {"2": "Sales"}) == "Division: Sales"
        assert owner_label(owner) == "Division: 2"

    def test_label_without_id(self):
        assert owner_label(Owner.parse("company", None)) == "Unknown"
