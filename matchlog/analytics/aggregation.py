"""
Aggregation Module

Groups matches by a derived key and reduces each group to a count, sum or
average. Covers the categorical breakdowns used across reports:
- Weather, result and goal-range buckets
- Fatigue, mood and effort tiers
- Jersey and venue x jersey pairs
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Hashable, Iterable, Sequence

import numpy as np
from loguru import logger

from matchlog.config import TierSettings
from matchlog.models.match import Match, MatchResult, Weather

KeyFunc = Callable[[Match], Hashable | None]
ValueFunc = Callable[[Match], float]
LabelFunc = Callable[[Any], str]


class Reduction(str, Enum):
    """How a group of matches is reduced to a single value."""

    COUNT = "count"
    SUM = "sum"
    AVERAGE = "average"


class GroupOrder(str, Enum):
    """Ordering applied to grouped rows."""

    VALUE = "value"  # by reduced value
    KEY = "key"  # by the group key itself (weekday index, weather code, date)


class Tier(int, Enum):
    """Three-level bucket of a 1-10 scale, ordered low to high."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3


@dataclass(frozen=True)
class TierScale:
    """Tier boundaries on the 1-10 scales."""

    low_max: int = 3
    medium_max: int = 7

    @classmethod
    def from_settings(cls, settings: TierSettings) -> TierScale:
        """Build from configured tier settings."""
        return cls(low_max=settings.low_max, medium_max=settings.medium_max)

    def classify(self, value: int) -> Tier:
        """Classify a scale value into a tier."""
        if value <= self.low_max:
            return Tier.LOW
        elif value <= self.medium_max:
            return Tier.MEDIUM
        return Tier.HIGH

    def label(self, tier: Tier, noun: str | None = None) -> str:
        """Display label such as "Low (1-3)" or "High effort (8-10)"."""
        ranges = {
            Tier.LOW: (1, self.low_max),
            Tier.MEDIUM: (self.low_max + 1, self.medium_max),
            Tier.HIGH: (self.medium_max + 1, 10),
        }
        low, high = ranges[tier]
        name = tier.name.capitalize()
        if noun:
            name = f"{name} {noun}"
        return f"{name} ({low}-{high})"


@dataclass
class GroupRow:
    """One group of a single-value aggregation."""

    label: str
    value: float | int
    count: int
    key: Any = field(default=None, compare=False, repr=False)

    def as_tuple(self) -> tuple[str, float | int, int]:
        """Row tuple for the presentation layer."""
        return (self.label, self.value, self.count)


@dataclass
class SummaryRow:
    """One group of a multi-value aggregation."""

    label: str
    values: dict[str, float | int]
    count: int
    key: Any = field(default=None, compare=False, repr=False)

    def as_tuple(self) -> tuple[Any, ...]:
        """Row tuple: label, values in field order, count."""
        return (self.label, *self.values.values(), self.count)


@dataclass
class ResultBreakdown:
    """Win/draw/loss counts for one group."""

    label: str
    wins: int = 0
    draws: int = 0
    losses: int = 0
    total: int = 0

    def as_tuple(self) -> tuple[str, int, int, int, int]:
        """Row tuple for the presentation layer."""
        return (self.label, self.wins, self.draws, self.losses, self.total)


# ---------------------------------------------------------------------------
# Key functions
# ---------------------------------------------------------------------------


def weather_key(match: Match) -> Weather | None:
    """Group by weather; matches without weather are skipped."""
    return match.weather


def weather_label(weather: Weather) -> str:
    return weather.label


def result_key(match: Match) -> MatchResult:
    """Group by result code."""
    return match.result


def result_label(result: MatchResult) -> str:
    return result.label


def jersey_key(match: Match) -> tuple[int, str]:
    """Group by jersey identity."""
    return (match.jersey.jersey_id, match.jersey.name)


def venue_jersey_key(match: Match) -> tuple[tuple[int, str], tuple[int, str]]:
    """Group by (venue, jersey) pair."""
    return (
        (match.venue.venue_id, match.venue.name),
        (match.jersey.jersey_id, match.jersey.name),
    )


def venue_jersey_label(key: tuple[tuple[int, str], tuple[int, str]]) -> str:
    venue, jersey = key
    return f"{venue[1]} / {jersey[1]}"


def goal_range_key(match: Match) -> tuple[int, str]:
    """Group by goals scored: 0, 1-2, 3-4, 5+."""
    if match.goals == 0:
        return (0, "0 goals")
    elif match.goals <= 2:
        return (1, "1-2 goals")
    elif match.goals <= 4:
        return (2, "3-4 goals")
    return (3, "5+ goals")


def second_item_label(key: tuple[Any, str]) -> str:
    """Label for (sort key, label) tuples."""
    return key[1]


class AggregationEngine:
    """
    Groups matches by a derived key and reduces each group.

    Groups are kept in order of first appearance in the input. Sorting by
    value is stable, so groups with equal values keep that order: the group
    that appeared first wins a tie.
    """

    def __init__(self, tiers: TierScale | None = None) -> None:
        """Initialize the engine with optional tier boundaries."""
        self.tiers = tiers or TierScale()

    # -- tier keys ---------------------------------------------------------

    def fatigue_tier_key(self, match: Match) -> Tier:
        """Group by fatigue tier."""
        return self.tiers.classify(match.fatigue)

    def mood_tier_key(self, match: Match) -> Tier:
        """Group by mood tier."""
        return self.tiers.classify(match.mood)

    def tier_label(self, tier: Tier) -> str:
        return self.tiers.label(tier)

    def effort_label(self, tier: Tier) -> str:
        return self.tiers.label(tier, noun="effort")

    @staticmethod
    def high_fatigue_key(threshold: int) -> KeyFunc:
        """Two-way split: fatigue above threshold is High, the rest Low."""
        return lambda match: "High" if match.fatigue > threshold else "Low"

    # -- grouping ----------------------------------------------------------

    def partition(self, matches: Iterable[Match], key: KeyFunc) -> dict[Any, list[Match]]:
        """
        Split matches by key, preserving first-appearance order.

        Matches whose key is None are left out.
        """
        groups: dict[Any, list[Match]] = {}
        skipped = 0
        for match in matches:
            group_key = key(match)
            if group_key is None:
                skipped += 1
                continue
            groups.setdefault(group_key, []).append(match)

        if skipped:
            logger.debug(f"Aggregation skipped {skipped} matches without a group key")
        return groups

    @staticmethod
    def reduce(
        matches: Sequence[Match],
        value: ValueFunc | None,
        reduction: Reduction,
    ) -> float | int:
        """
        Reduce a group of matches to one value.

        Averages are rounded to 2 decimals.
        """
        if reduction == Reduction.COUNT:
            return len(matches)
        if value is None:
            raise ValueError(f"Reduction '{reduction.value}' requires a value function")

        values = [value(m) for m in matches]
        if reduction == Reduction.SUM:
            return sum(values)
        if not values:
            return 0.0
        return round(float(np.mean(values)), 2)

    def group(
        self,
        matches: Iterable[Match],
        key: KeyFunc,
        value: ValueFunc | None = None,
        reduction: Reduction = Reduction.AVERAGE,
        label: LabelFunc = str,
        descending: bool = True,
        order: GroupOrder = GroupOrder.VALUE,
    ) -> list[GroupRow]:
        """
        Group matches and reduce each group.

        Args:
            matches: Matches to aggregate
            key: Derives the group key; None excludes the match
            value: Numeric attribute to reduce (unused for COUNT)
            reduction: COUNT, SUM or AVERAGE
            label: Turns a group key into its display label
            descending: Sort direction
            order: Sort by reduced value or by the key itself

        Returns:
            One GroupRow per distinct key present in the data
        """
        rows = [
            GroupRow(
                label=label(group_key),
                value=self.reduce(members, value, reduction),
                count=len(members),
                key=group_key,
            )
            for group_key, members in self.partition(matches, key).items()
        ]

        if order == GroupOrder.KEY:
            rows.sort(key=lambda r: r.key, reverse=descending)
        else:
            rows.sort(key=lambda r: r.value, reverse=descending)
        return rows

    def top(
        self,
        matches: Iterable[Match],
        key: KeyFunc,
        value: ValueFunc | None = None,
        reduction: Reduction = Reduction.AVERAGE,
        label: LabelFunc = str,
        descending: bool = True,
    ) -> GroupRow | None:
        """Best (or worst, with descending=False) group, None when empty."""
        rows = self.group(matches, key, value, reduction, label, descending)
        return rows[0] if rows else None

    def summarize(
        self,
        matches: Iterable[Match],
        key: KeyFunc,
        fields: Sequence[tuple[str, ValueFunc, Reduction]],
        label: LabelFunc = str,
        sort_field: str | None = None,
        descending: bool = True,
    ) -> list[SummaryRow]:
        """
        Group matches and reduce several attributes per group.

        Args:
            matches: Matches to aggregate
            key: Derives the group key; None excludes the match
            fields: (name, value function, reduction) per output column
            label: Turns a group key into its display label
            sort_field: Field to order by; None keeps key order ascending
            descending: Sort direction for sort_field

        Returns:
            One SummaryRow per distinct key
        """
        rows = []
        for group_key, members in self.partition(matches, key).items():
            values = {
                name: self.reduce(members, value, reduction)
                for name, value, reduction in fields
            }
            rows.append(
                SummaryRow(
                    label=label(group_key),
                    values=values,
                    count=len(members),
                    key=group_key,
                )
            )

        if sort_field is None:
            rows.sort(key=lambda r: r.key)
        else:
            rows.sort(key=lambda r: r.values[sort_field], reverse=descending)
        return rows

    def result_breakdown(
        self,
        matches: Iterable[Match],
        key: KeyFunc,
        label: LabelFunc = str,
    ) -> list[ResultBreakdown]:
        """Win/draw/loss counts per group, in key order."""
        rows = []
        for group_key, members in sorted(
            self.partition(matches, key).items(), key=lambda item: item[0]
        ):
            breakdown = ResultBreakdown(label=label(group_key), total=len(members))
            for match in members:
                if match.result == MatchResult.WIN:
                    breakdown.wins += 1
                elif match.result == MatchResult.DRAW:
                    breakdown.draws += 1
                elif match.result == MatchResult.LOSS:
                    breakdown.losses += 1
            rows.append(breakdown)
        return rows
