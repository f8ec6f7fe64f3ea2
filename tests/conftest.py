"""
Pytest Configuration and Fixtures

Shared fixtures for the match log test suite.
"""

import sqlite3
from pathlib import Path
from typing import Any, Callable

import pytest

from matchlog.config import AnalyticsSettings
from matchlog.database import SCHEMA_PATH
from matchlog.models import JerseyVariant, Match, MatchResult, Venue, Weather


@pytest.fixture
def home_jersey() -> JerseyVariant:
    return JerseyVariant(jersey_id=1, name="Home Red", times_drawn=4)


@pytest.fixture
def away_jersey() -> JerseyVariant:
    return JerseyVariant(jersey_id=2, name="Away White", times_drawn=7)


@pytest.fixture
def central_park() -> Venue:
    return Venue(venue_id=1, name="Central Park")


@pytest.fixture
def riverside() -> Venue:
    return Venue(venue_id=2, name="Riverside")


@pytest.fixture
def make_match(home_jersey: JerseyVariant, central_park: Venue) -> Callable[..., Match]:
    """Factory for matches with sensible defaults."""

    def _make(match_id: int = 1, **overrides: Any) -> Match:
        fields: dict[str, Any] = {
            "match_id": match_id,
            "date_text": "15/03/2024 18:30",
            "jersey": home_jersey,
            "venue": central_park,
            "goals": 0,
            "assists": 0,
            "result": MatchResult.WIN,
            "performance": 5,
            "fatigue": 5,
            "mood": 5,
            "weather": Weather.CLEAR,
        }
        fields.update(overrides)
        return Match(**fields)

    return _make


# (id, date, jersey, venue, goals, assists, result, performance, fatigue, mood, weather)
SAMPLE_ROWS = [
    (1, "05/01/2024 18:00", 1, 1, 2, 1, 1, 8, 4, 7, 1),
    (2, "12/01/2024 18:00", 2, 1, 0, 0, 3, 4, 8, 3, 3),
    (3, "20/01/2024 10:30", 1, 2, 1, 2, 2, 6, 5, 6, 2),
    (4, "02/02/2024 18:00", 1, 1, 3, 0, 1, 9, 9, 8, 1),
    (5, "09/02/2024 18:00", 2, 2, 0, 1, 3, 3, 2, 4, 4),
    (6, "17/02/2024 10:30", 1, 1, 1, 1, 1, 7, 6, 7, 5),
    (7, "01/03/2024 18:00", 2, 1, 0, 0, 2, 5, 3, 5, 6),
    (8, "08/03/2024 18:00", 1, 2, 2, 2, 1, 8, 7, 8, 1),
    (9, "16/03/2024 10:30", 1, 1, 4, 1, 1, 10, 8, 9, 1),
    (10, "22/03/2024 18:00", 2, 2, 1, 0, 3, 5, 5, 5, 3),
    (11, None, 1, 1, 0, 1, 2, 6, 4, 6, None),
    (12, "05/04/2024 18:00", 2, 1, 2, 1, 1, 7, 6, 7, 2),
]


@pytest.fixture
def sample_matches(
    home_jersey: JerseyVariant,
    away_jersey: JerseyVariant,
    central_park: Venue,
    riverside: Venue,
) -> list[Match]:
    """Twelve matches from early 2024, one of them undated."""
    jerseys = {1: home_jersey, 2: away_jersey}
    venues = {1: central_park, 2: riverside}
    return [
        Match(
            match_id=match_id,
            date_text=date_text,
            jersey=jerseys[jersey_id],
            venue=venues[venue_id],
            goals=goals,
            assists=assists,
            result=MatchResult(result),
            performance=performance,
            fatigue=fatigue,
            mood=mood,
            weather=Weather(weather) if weather is not None else None,
        )
        for (
            match_id,
            date_text,
            jersey_id,
            venue_id,
            goals,
            assists,
            result,
            performance,
            fatigue,
            mood,
            weather,
        ) in SAMPLE_ROWS
    ]


def create_match_db(path: Path, rows: list[tuple] = SAMPLE_ROWS) -> Path:
    """Build a match log database at path."""
    conn = sqlite3.connect(path)
    try:
        conn.executescript(SCHEMA_PATH.read_text())
        conn.executemany(
            "INSERT INTO jersey (id, name, times_drawn) VALUES (?, ?, ?)",
            [(1, "Home Red", 4), (2, "Away White", 7)],
        )
        conn.executemany(
            "INSERT INTO venue (id, name) VALUES (?, ?)",
            [(1, "Central Park"), (2, "Riverside")],
        )
        conn.executemany(
            "INSERT INTO matches (id, played_at, jersey_id, venue_id, goals, assists, "
            "result, performance, fatigue, mood, weather) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            rows,
        )
        conn.commit()
    finally:
        conn.close()
    return path


@pytest.fixture
def match_db(tmp_path: Path) -> Path:
    """Temporary match log database holding the sample rows."""
    return create_match_db(tmp_path / "mifutbol.db")


@pytest.fixture
def settings(match_db: Path) -> AnalyticsSettings:
    return AnalyticsSettings(database_path=match_db)


@pytest.fixture
def build_match_db(tmp_path: Path) -> Callable[[list[tuple]], Path]:
    """Factory for databases holding custom match rows."""

    def _build(rows: list[tuple]) -> Path:
        return create_match_db(tmp_path / "custom.db", rows)

    return _build
