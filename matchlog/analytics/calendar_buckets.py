"""
Calendar Bucketing Module

Maps match dates onto calendar buckets:
- Weekday buckets (always all seven, Sunday first)
- Month and year evolution, newest first
- Half of year and climate season splits
- Per-period jersey tables

Matches without a usable date are left out of every bucket here but still
count in overall totals elsewhere.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Callable, Hashable, Iterable, TypeVar

import numpy as np
from loguru import logger

from matchlog.models.match import (
    MONTH_NAMES,
    WEEKDAY_NAMES,
    Match,
    attribute_getter,
)

from .aggregation import (
    AggregationEngine,
    GroupOrder,
    GroupRow,
    Reduction,
    SummaryRow,
    second_item_label,
)

T = TypeVar("T")


def weekday_index(day: int, month: int, year: int) -> int:
    """
    Weekday of a calendar date, 0 = Sunday through 6 = Saturday.

    Uses the proleptic Gregorian calendar, so it is valid for any year.
    """
    return (date(year, month, day).weekday() + 1) % 7


def weekday_of(match: Match) -> int | None:
    """Weekday index of a match, None when it has no usable date."""
    played_at = match.played_at
    if played_at is None:
        return None
    return weekday_index(played_at.day, played_at.month, played_at.year)


def month_key(match: Match) -> tuple[int, int] | None:
    """(year, month) of a match; sorts chronologically."""
    played_at = match.played_at
    if played_at is None:
        return None
    return (played_at.year, played_at.month)


def month_label(key: tuple[int, int]) -> str:
    year, month = key
    return f"{MONTH_NAMES[month - 1]} {year}"


def year_key(match: Match) -> int | None:
    played_at = match.played_at
    return played_at.year if played_at is not None else None


def year_label(key: int) -> str:
    return str(key)


def half_of_year(match: Match) -> tuple[int, str] | None:
    """January-June is the start of the year, July-December the end."""
    played_at = match.played_at
    if played_at is None:
        return None
    if played_at.month <= 6:
        return (0, "Start (Jan-Jun)")
    return (1, "End (Jul-Dec)")


def climate_season(match: Match) -> tuple[int, str] | None:
    """
    Cold season is June-September, warm season December-April.

    May, October and November belong to neither.
    """
    played_at = match.played_at
    if played_at is None:
        return None
    if 6 <= played_at.month <= 9:
        return (0, "Cold (Jun-Sep)")
    if played_at.month == 12 or played_at.month <= 4:
        return (1, "Warm (Dec-Apr)")
    return None


def sections(rows: Iterable[T], key: Callable[[T], Hashable]) -> list[tuple[Any, list[T]]]:
    """
    Fold pre-sorted rows into consecutive (group key, rows) sections.

    A new section starts whenever the key changes from one row to the next.
    Rows must already be sorted so that equal keys are adjacent.
    """
    folded: list[tuple[Any, list[T]]] = []
    for row in rows:
        row_key = key(row)
        if folded and folded[-1][0] == row_key:
            folded[-1][1].append(row)
        else:
            folded.append((row_key, [row]))
    return folded


class Period(str, Enum):
    """Calendar granularity for per-period tables."""

    MONTH = "month"
    YEAR = "year"


PERIOD_KEYS: dict[Period, tuple[Callable[[Match], Any], Callable[[Any], str]]] = {
    Period.MONTH: (month_key, month_label),
    Period.YEAR: (year_key, year_label),
}


@dataclass
class WeekdayBucket:
    """Average of an attribute over the matches played on one weekday."""

    index: int
    average: float
    count: int

    @property
    def label(self) -> str:
        return WEEKDAY_NAMES[self.index]

    def as_tuple(self) -> tuple[str, float, int]:
        return (self.label, self.average, self.count)


@dataclass
class PeriodJerseyRow:
    """Jersey usage within one calendar period."""

    period: Any
    period_label: str
    jersey: str
    matches: int
    goals: int
    assists: int

    @property
    def goals_per_match(self) -> float:
        return round(self.goals / self.matches, 2) if self.matches else 0.0

    @property
    def assists_per_match(self) -> float:
        return round(self.assists / self.matches, 2) if self.matches else 0.0

    def as_tuple(self) -> tuple[Any, ...]:
        return (
            self.jersey,
            self.matches,
            self.goals,
            self.assists,
            self.goals_per_match,
            self.assists_per_match,
        )


class CalendarClassifier:
    """
    Calendar views over a match snapshot.

    Example:
        classifier = CalendarClassifier()
        for bucket in classifier.weekday_buckets(matches):
            print(bucket.label, bucket.average, bucket.count)
    """

    def __init__(self, engine: AggregationEngine | None = None) -> None:
        self.engine = engine or AggregationEngine()

    @staticmethod
    def dated(matches: Iterable[Match]) -> list[Match]:
        """Matches that carry a usable date."""
        matches = list(matches)
        dated = [m for m in matches if m.has_date]
        if len(dated) < len(matches):
            logger.debug(
                f"{len(matches) - len(dated)} undated matches excluded from calendar buckets"
            )
        return dated

    # -- weekdays ----------------------------------------------------------

    def weekday_buckets(
        self,
        matches: Iterable[Match],
        attribute: str = "performance",
    ) -> list[WeekdayBucket]:
        """
        Seven buckets, Sunday through Saturday.

        Days with no matches have an average of 0 and a count of 0.
        """
        getter = attribute_getter(attribute)
        by_day: list[list[int]] = [[] for _ in WEEKDAY_NAMES]
        for match in self.dated(matches):
            by_day[weekday_of(match)].append(getter(match))

        return [
            WeekdayBucket(
                index=index,
                average=round(float(np.mean(values)), 2) if values else 0.0,
                count=len(values),
            )
            for index, values in enumerate(by_day)
        ]

    def best_weekday(
        self,
        matches: Iterable[Match],
        attribute: str = "performance",
    ) -> WeekdayBucket | None:
        """Weekday with the highest average, earliest weekday on ties."""
        buckets = self.weekday_buckets(matches, attribute)
        if not any(b.count for b in buckets):
            return None
        return max(buckets, key=lambda b: b.average)

    def worst_weekday(
        self,
        matches: Iterable[Match],
        attribute: str = "performance",
    ) -> WeekdayBucket | None:
        """Weekday with the lowest average, earliest weekday on ties."""
        buckets = self.weekday_buckets(matches, attribute)
        if not any(b.count for b in buckets):
            return None
        return min(buckets, key=lambda b: b.average)

    # -- months and years --------------------------------------------------

    def monthly_evolution(
        self,
        matches: Iterable[Match],
        attribute: str = "performance",
    ) -> list[GroupRow]:
        """Average of an attribute per (month, year), newest month first."""
        return self.engine.group(
            self.dated(matches),
            month_key,
            attribute_getter(attribute),
            Reduction.AVERAGE,
            label=month_label,
            order=GroupOrder.KEY,
        )

    def best_month(self, matches: Iterable[Match]) -> GroupRow | None:
        """Month with the highest average performance."""
        return self.engine.top(
            self.dated(matches),
            month_key,
            attribute_getter("performance"),
            label=month_label,
        )

    def worst_month(self, matches: Iterable[Match]) -> GroupRow | None:
        """Month with the lowest average performance."""
        return self.engine.top(
            self.dated(matches),
            month_key,
            attribute_getter("performance"),
            label=month_label,
            descending=False,
        )

    def year_buckets(
        self,
        matches: Iterable[Match],
        attribute: str = "performance",
    ) -> list[GroupRow]:
        """Average of an attribute per year, newest year first."""
        return self.engine.group(
            self.dated(matches),
            year_key,
            attribute_getter(attribute),
            Reduction.AVERAGE,
            label=year_label,
            order=GroupOrder.KEY,
        )

    def best_year(self, matches: Iterable[Match]) -> GroupRow | None:
        """Year with the highest average performance."""
        return self.engine.top(
            self.dated(matches), year_key, attribute_getter("performance"), label=year_label
        )

    def worst_year(self, matches: Iterable[Match]) -> GroupRow | None:
        """Year with the lowest average performance."""
        return self.engine.top(
            self.dated(matches),
            year_key,
            attribute_getter("performance"),
            label=year_label,
            descending=False,
        )

    # -- seasonal splits ---------------------------------------------------

    def _season_summary(
        self,
        matches: Iterable[Match],
        key: Callable[[Match], Any],
    ) -> list[SummaryRow]:
        return self.engine.summarize(
            self.dated(matches),
            key,
            [
                ("goals", attribute_getter("goals"), Reduction.AVERAGE),
                ("assists", attribute_getter("assists"), Reduction.AVERAGE),
                ("performance", attribute_getter("performance"), Reduction.AVERAGE),
            ],
            label=second_item_label,
        )

    def half_of_year(self, matches: Iterable[Match]) -> list[SummaryRow]:
        """Start of year vs end of year: average goals, assists and performance."""
        return self._season_summary(matches, half_of_year)

    def climate_seasons(self, matches: Iterable[Match]) -> list[SummaryRow]:
        """Cold vs warm season: average goals, assists and performance."""
        return self._season_summary(matches, climate_season)

    # -- per-period jersey tables -----------------------------------------

    def jersey_by_period(
        self,
        matches: Iterable[Match],
        period: Period = Period.MONTH,
    ) -> list[PeriodJerseyRow]:
        """
        Jersey usage per calendar period.

        Rows are ordered newest period first and by total goals within a
        period. Use sections() to split them per period.
        """
        period_key, period_label = PERIOD_KEYS[Period(period)]
        groups = self.engine.partition(
            self.dated(matches),
            lambda m: (period_key(m), m.jersey.jersey_id, m.jersey.name),
        )

        rows = [
            PeriodJerseyRow(
                period=period_value,
                period_label=period_label(period_value),
                jersey=jersey_name,
                matches=len(members),
                goals=sum(m.goals for m in members),
                assists=sum(m.assists for m in members),
            )
            for (period_value, _, jersey_name), members in groups.items()
        ]
        rows.sort(key=lambda r: r.goals, reverse=True)
        rows.sort(key=lambda r: r.period, reverse=True)
        return rows

