"""
Tests for the match store

Covers the read-only connection, row mapping and degraded input.
"""

import sqlite3

import pytest

from matchlog.database import Database, get_database, load_jerseys, load_matches, load_venues
from matchlog.models import MatchResult, Weather


class TestDatabase:
    """Tests for the Database wrapper."""

    def test_missing_file(self, tmp_path):
        """Test a missing database file is an error, not an empty store."""
        db = Database(tmp_path / "absent.db")
        with pytest.raises(FileNotFoundError):
            db.connection
        assert not (tmp_path / "absent.db").exists()

    def test_initialized(self, match_db):
        with Database(match_db) as db:
            assert db.is_initialized() is True

    def test_read_only(self, match_db):
        """Test writes through the connection are refused."""
        with Database(match_db) as db:
            with pytest.raises(sqlite3.OperationalError):
                with db.cursor() as cur:
                    cur.execute("DELETE FROM matches")

    def test_stats(self, match_db):
        with Database(match_db) as db:
            stats = db.get_database_stats()

        assert stats == {
            "total_matches": 12,
            "total_jerseys": 2,
            "total_venues": 2,
            "undated_matches": 1,
        }

    def test_close_reopens(self, match_db):
        db = Database(match_db)
        db.close()
        assert db.is_initialized()
        db.close()

    def test_singleton_follows_path(self, match_db, tmp_path):
        first = get_database(match_db)
        assert get_database(match_db) is first
        other = get_database(tmp_path / "other.db")
        assert other is not first
        other.close()


class TestLoadMatches:
    """Tests for load_matches."""

    def test_loads_in_id_order(self, match_db):
        with Database(match_db) as db:
            matches = load_matches(db)

        assert [m.match_id for m in matches] == list(range(1, 13))

    def test_row_mapping(self, match_db):
        with Database(match_db) as db:
            first = load_matches(db)[0]

        assert first.date_text == "05/01/2024 18:00"
        assert first.jersey.name == "Home Red"
        assert first.jersey.times_drawn == 4
        assert first.venue.name == "Central Park"
        assert (first.goals, first.assists, first.performance) == (2, 1, 8)
        assert first.result == MatchResult.WIN
        assert first.weather == Weather.CLEAR

    def test_undated_kept(self, match_db):
        """Test undated matches still load."""
        with Database(match_db) as db:
            undated = [m for m in load_matches(db) if not m.has_date]
        assert [m.match_id for m in undated] == [11]
        assert undated[0].weather is None

    def test_unknown_codes(self, build_match_db):
        """Test unknown weather and result codes degrade instead of failing."""
        path = build_match_db([(1, "01/01/2024 10:00", 1, 1, 0, 0, 9, 5, 5, 5, 42)])
        with Database(path) as db:
            match = load_matches(db)[0]

        assert match.weather is None
        assert match.result == MatchResult.UNKNOWN

    def test_invalid_row_skipped(self, build_match_db):
        """Test a row violating the model is skipped, the rest load."""
        path = build_match_db(
            [
                (1, "01/01/2024 10:00", 1, 1, -2, 0, 1, 5, 5, 5, 1),
                (2, "02/01/2024 10:00", 1, 1, 1, 0, 1, 5, 5, 5, 1),
            ]
        )
        with Database(path) as db:
            matches = load_matches(db)

        assert [m.match_id for m in matches] == [2]

    def test_dangling_references(self, build_match_db):
        """Test matches pointing at missing jersey or venue rows still load."""
        path = build_match_db([(1, "01/01/2024 10:00", 9, 9, 1, 0, 1, 5, 5, 5, 1)])
        with Database(path) as db:
            match = load_matches(db)[0]

        assert match.jersey.name == "Unknown"
        assert match.venue.name == "Unknown"


class TestLoadReferences:
    """Tests for jersey and venue loading."""

    def test_jerseys(self, match_db):
        with Database(match_db) as db:
            jerseys = load_jerseys(db)
        assert [(j.name, j.times_drawn) for j in jerseys] == [("Home Red", 4), ("Away White", 7)]

    def test_venues(self, match_db):
        with Database(match_db) as db:
            venues = load_venues(db)
        assert [v.name for v in venues] == ["Central Park", "Riverside"]
