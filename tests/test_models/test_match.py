"""
Tests for Match Data Model
"""

from datetime import datetime

import pytest
from pydantic import ValidationError

from matchlog.models import (
    Match,
    MatchResult,
    Weather,
    attribute_getter,
    parse_match_date,
)


class TestParseMatchDate:
    """Tests for date parsing."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("15/03/2024 18:30", datetime(2024, 3, 15, 18, 30)),
            ("15/03/2024", datetime(2024, 3, 15)),
            ("2024-03-15 18:30", datetime(2024, 3, 15, 18, 30)),
            ("2024-03-15", datetime(2024, 3, 15)),
            ("  15/03/2024 18:30  ", datetime(2024, 3, 15, 18, 30)),
        ],
    )
    def test_accepted_formats(self, text, expected):
        assert parse_match_date(text) == expected

    @pytest.mark.parametrize("text", [None, "", "   ", "31/02/2024", "yesterday", "2024/03/15"])
    def test_unusable_dates(self, text):
        """Test absent or malformed dates parse to None."""
        assert parse_match_date(text) is None


class TestMatch:
    """Tests for the Match model."""

    def test_derived_fields(self, make_match):
        match = make_match(goals=2, assists=3, weather=Weather.WINDY, result=MatchResult.LOSS)

        assert match.played_at == datetime(2024, 3, 15, 18, 30)
        assert match.has_date is True
        assert match.goal_contributions == 5
        assert match.weather_label == "Windy"
        assert match.result_label == "Loss"

    def test_undated(self, make_match):
        match = make_match(date_text="soon", weather=None)
        assert match.played_at is None
        assert match.has_date is False
        assert match.weather_label is None

    def test_frozen(self, make_match):
        match = make_match()
        with pytest.raises(ValidationError):
            match.goals = 10

    def test_negative_goals_rejected(self, make_match):
        with pytest.raises(ValidationError):
            make_match(goals=-1)

    def test_out_of_range_scale_accepted(self, make_match):
        """Test scale values outside 1-10 are kept as stored."""
        assert make_match(performance=12).performance == 12


class TestLabels:
    """Tests for the fixed label tables."""

    def test_weather_labels(self):
        assert [w.label for w in Weather] == ["Clear", "Cloudy", "Rain", "Windy", "Hot", "Cold"]
        assert Weather(3) == Weather.RAIN

    def test_result_labels(self):
        assert MatchResult(1).label == "Win"
        assert MatchResult(2).label == "Draw"
        assert MatchResult(3).label == "Loss"
        assert MatchResult.UNKNOWN.label == "Unknown"


class TestAttributeGetter:
    """Tests for attribute_getter."""

    def test_known_attribute(self, make_match):
        assert attribute_getter("mood")(make_match(mood=8)) == 8

    def test_unknown_attribute(self):
        with pytest.raises(ValueError):
            attribute_getter("comment")

    def test_all_numeric_attributes(self, make_match):
        match = make_match()
        for name in ("goals", "assists", "performance", "fatigue", "mood"):
            assert isinstance(attribute_getter(name)(match), int)


def test_match_requires_jersey_and_venue():
    """Test a match cannot exist without its references."""
    with pytest.raises(ValidationError):
        Match(match_id=1)
