"""
Data Models Module

This module contains Pydantic models for the match log entities.

Models:
    - Match: A single logged match with context and outcome
    - JerseyVariant: A named kit worn in matches
    - Venue: A named playing location
"""

from matchlog.models.match import (
    MONTH_NAMES,
    NUMERIC_ATTRIBUTES,
    RESULT_LABELS,
    WEATHER_LABELS,
    WEEKDAY_NAMES,
    JerseyVariant,
    Match,
    MatchResult,
    Venue,
    Weather,
    attribute_getter,
    parse_match_date,
)

__all__ = [
    "Match",
    "JerseyVariant",
    "Venue",
    "Weather",
    "MatchResult",
    "WEATHER_LABELS",
    "RESULT_LABELS",
    "WEEKDAY_NAMES",
    "MONTH_NAMES",
    "NUMERIC_ATTRIBUTES",
    "attribute_getter",
    "parse_match_date",
]
