"""
Tests for Efficiency Module
"""

import pytest

from matchlog.analytics.efficiency import EfficiencyCalculator


class TestRatio:
    """Tests for EfficiencyCalculator.ratio."""

    def test_ratio_of_averages(self, make_match):
        """Test avg(numerator) / avg(denominator)."""
        matches = [make_match(1, performance=8, goals=2), make_match(2, performance=6, goals=1)]
        assert EfficiencyCalculator.ratio(matches, "performance", "goals") == pytest.approx(4.67)

    def test_zero_divisor(self, make_match):
        """Test a zero divisor average is undefined, never infinite."""
        matches = [make_match(1, goals=0), make_match(2, goals=0)]
        assert EfficiencyCalculator.ratio(matches, "performance", "goals") is None

    def test_empty_subset(self, make_match):
        matches = [make_match(1, goals=0)]
        calculator = EfficiencyCalculator()
        assert calculator.ratio([], "performance", "goals") is None
        assert calculator.performance_per_goal(matches) is None

    def test_filter(self, make_match):
        """Test the where filter narrows the subset."""
        matches = [
            make_match(1, performance=9, goals=3),
            make_match(2, performance=2, goals=0),
        ]
        assert EfficiencyCalculator().performance_per_goal(matches) == pytest.approx(3.0)

    def test_performance_per_fatigue(self, make_match):
        matches = [make_match(1, performance=8, fatigue=4), make_match(2, performance=6, fatigue=3)]
        assert EfficiencyCalculator().performance_per_fatigue(matches) == pytest.approx(2.0)


class TestByTier:
    """Tests for per-tier efficiency rows."""

    def test_effort_tiers(self, make_match):
        """Test performance per effort unit, highest first."""
        matches = [
            make_match(1, fatigue=2, performance=8),
            make_match(2, fatigue=9, performance=9),
            make_match(3, fatigue=5, performance=6),
        ]
        rows = EfficiencyCalculator().performance_per_effort_by_tier(matches)

        assert [r.as_tuple() for r in rows] == [
            ("Low effort (1-3)", 4.0, 1),
            ("Medium effort (4-7)", 1.2, 1),
            ("High effort (8-10)", 1.0, 1),
        ]

    def test_undefined_ratios_last(self, make_match):
        """Test groups with an undefined ratio sort after the rest."""
        matches = [
            make_match(1, fatigue=0, assists=2),
            make_match(2, fatigue=9, assists=1),
        ]
        rows = EfficiencyCalculator().assists_per_fatigue_by_tier(matches)

        assert rows[0].label == "High (8-10)"
        assert rows[0].ratio == pytest.approx(0.11)
        assert rows[-1].ratio is None
