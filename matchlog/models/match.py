"""
Match Data Model

Pydantic models for logged matches and the kit/venue entities they reference,
plus the fixed label tables shared by on-screen and exported reports.
"""

from datetime import datetime
from enum import Enum
from typing import Callable

from pydantic import BaseModel, ConfigDict, Field

# Accepted date layouts, stored format first
DATE_FORMATS = (
    "%d/%m/%Y %H:%M",
    "%d/%m/%Y",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
)

WEEKDAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

# Numeric attributes that reports may average, sum or correlate
NUMERIC_ATTRIBUTES = ("goals", "assists", "performance", "fatigue", "mood")


class Weather(int, Enum):
    """Weather conditions as stored in the match log."""

    CLEAR = 1
    CLOUDY = 2
    RAIN = 3
    WINDY = 4
    HOT = 5
    COLD = 6

    @property
    def label(self) -> str:
        """Stable display label."""
        return WEATHER_LABELS[self]


class MatchResult(int, Enum):
    """Match outcome codes."""

    UNKNOWN = 0
    WIN = 1
    DRAW = 2
    LOSS = 3

    @property
    def label(self) -> str:
        """Stable display label."""
        return RESULT_LABELS[self]


WEATHER_LABELS = {
    Weather.CLEAR: "Clear",
    Weather.CLOUDY: "Cloudy",
    Weather.RAIN: "Rain",
    Weather.WINDY: "Windy",
    Weather.HOT: "Hot",
    Weather.COLD: "Cold",
}

RESULT_LABELS = {
    MatchResult.WIN: "Win",
    MatchResult.DRAW: "Draw",
    MatchResult.LOSS: "Loss",
    MatchResult.UNKNOWN: "Unknown",
}


def parse_match_date(text: str | None) -> datetime | None:
    """
    Parse a stored match date.

    Args:
        text: Raw date text, e.g. "15/03/2024 18:30"

    Returns:
        Parsed datetime, or None when the text is empty or malformed
    """
    if not text or not text.strip():
        return None

    value = text.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def attribute_getter(name: str) -> Callable[["Match"], int]:
    """Return a getter for one of the numeric match attributes."""
    if name not in NUMERIC_ATTRIBUTES:
        raise ValueError(
            f"Unknown match attribute '{name}', expected one of {NUMERIC_ATTRIBUTES}"
        )
    return lambda match: getattr(match, name)


class JerseyVariant(BaseModel):
    """A named kit worn in one or more matches."""

    model_config = ConfigDict(frozen=True)

    jersey_id: int
    name: str
    times_drawn: int = 0


class Venue(BaseModel):
    """A named playing location."""

    model_config = ConfigDict(frozen=True)

    venue_id: int
    name: str


class Match(BaseModel):
    """A single logged match. Never mutated once read from the store."""

    model_config = ConfigDict(frozen=True)

    match_id: int
    date_text: str | None = None
    jersey: JerseyVariant
    venue: Venue

    # Outcome metrics
    goals: int = Field(default=0, ge=0)
    assists: int = Field(default=0, ge=0)
    result: MatchResult = MatchResult.UNKNOWN

    # Self-assessed 1-10 scales
    performance: int = 0
    fatigue: int = 0
    mood: int = 0

    weather: Weather | None = None
    comment: str | None = None

    @property
    def played_at(self) -> datetime | None:
        """Parsed match date, None when absent or malformed."""
        return parse_match_date(self.date_text)

    @property
    def has_date(self) -> bool:
        """Whether the match can take part in calendar bucketing."""
        return self.played_at is not None

    @property
    def goal_contributions(self) -> int:
        """Goals plus assists."""
        return self.goals + self.assists

    @property
    def weather_label(self) -> str | None:
        """Display label for the weather, if recorded."""
        return self.weather.label if self.weather is not None else None

    @property
    def result_label(self) -> str:
        """Display label for the result."""
        return self.result.label
