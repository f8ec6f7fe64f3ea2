"""Query functions that read match log snapshots."""

import sqlite3
from typing import Optional

from loguru import logger
from pydantic import ValidationError

from matchlog.models.match import JerseyVariant, Match, MatchResult, Venue, Weather

from .db import Database, get_database

MATCH_SELECT = """
    SELECT
        m.id,
        m.played_at,
        m.goals,
        m.assists,
        m.result,
        m.performance,
        m.fatigue,
        m.mood,
        m.weather,
        m.comment,
        m.jersey_id,
        COALESCE(j.name, 'Unknown') AS jersey_name,
        COALESCE(j.times_drawn, 0) AS jersey_times_drawn,
        m.venue_id,
        COALESCE(v.name, 'Unknown') AS venue_name
    FROM matches m
    LEFT JOIN jersey j ON m.jersey_id = j.id
    LEFT JOIN venue v ON m.venue_id = v.id
"""


def _weather_from_code(code: Optional[int], match_id: int) -> Optional[Weather]:
    """Map a stored weather code, dropping unknown codes."""
    if code is None:
        return None
    try:
        return Weather(code)
    except ValueError:
        logger.warning(f"Match {match_id}: unknown weather code {code}, ignoring")
        return None


def _result_from_code(code: Optional[int], match_id: int) -> MatchResult:
    """Map a stored result code, treating unknown codes as UNKNOWN."""
    if code is None:
        return MatchResult.UNKNOWN
    try:
        return MatchResult(code)
    except ValueError:
        logger.warning(f"Match {match_id}: unknown result code {code}")
        return MatchResult.UNKNOWN


def row_to_match(row: sqlite3.Row) -> Match:
    """Build a Match from a joined match row.

    Raises:
        ValidationError: If the row violates the Match model
    """
    match_id = row["id"]
    return Match(
        match_id=match_id,
        date_text=row["played_at"],
        jersey=JerseyVariant(
            jersey_id=row["jersey_id"],
            name=row["jersey_name"],
            times_drawn=row["jersey_times_drawn"] or 0,
        ),
        venue=Venue(venue_id=row["venue_id"], name=row["venue_name"]),
        goals=row["goals"] or 0,
        assists=row["assists"] or 0,
        result=_result_from_code(row["result"], match_id),
        performance=row["performance"] or 0,
        fatigue=row["fatigue"] or 0,
        mood=row["mood"] or 0,
        weather=_weather_from_code(row["weather"], match_id),
        comment=row["comment"],
    )


def load_matches(db: Optional[Database] = None) -> list[Match]:
    """Load every match, ordered by identifier.

    Rows that fail validation are skipped with a warning so that a single
    corrupt record never breaks reporting.

    Args:
        db: Database instance (uses default if not provided)

    Returns:
        List of matches in creation order
    """
    db = db or get_database()
    with db.cursor() as cur:
        cur.execute(MATCH_SELECT + " ORDER BY m.id ASC")
        rows = cur.fetchall()

    matches = []
    for row in rows:
        try:
            matches.append(row_to_match(row))
        except ValidationError as e:
            logger.warning(f"Skipping invalid match {row['id']}: {e.error_count()} error(s)")

    logger.info(f"Loaded {len(matches)} matches from {db.db_path}")
    return matches


def load_jerseys(db: Optional[Database] = None) -> list[JerseyVariant]:
    """Load all jersey variants, ordered by identifier."""
    db = db or get_database()
    with db.cursor() as cur:
        cur.execute("SELECT id, name, times_drawn FROM jersey ORDER BY id ASC")
        return [
            JerseyVariant(
                jersey_id=row["id"],
                name=row["name"],
                times_drawn=row["times_drawn"] or 0,
            )
            for row in cur.fetchall()
        ]


def load_venues(db: Optional[Database] = None) -> list[Venue]:
    """Load all venues, ordered by identifier."""
    db = db or get_database()
    with db.cursor() as cur:
        cur.execute("SELECT id, name FROM venue ORDER BY id ASC")
        return [Venue(venue_id=row["id"], name=row["name"]) for row in cur.fetchall()]
