"""
Summary Analysis Module

Career-level summaries of the match log:
- Overall averages and recent form against them
- First vs last matches trend and high-fatigue drift
- Record matches and match lists
- Jersey leaderboards and venue x jersey combinations
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence

import numpy as np
from loguru import logger

from matchlog.config import AnalyticsSettings
from matchlog.models.match import JerseyVariant, Match, MatchResult

from .aggregation import (
    AggregationEngine,
    GroupRow,
    Reduction,
    TierScale,
    jersey_key,
    second_item_label,
    venue_jersey_key,
    venue_jersey_label,
)
from .streaks import chronological


class Momentum(str, Enum):
    """Recent form compared with the career average."""

    RISING = "rising"
    FALLING = "falling"
    STEADY = "steady"


class Trend(str, Enum):
    """Performance of the latest matches compared with the first ones."""

    ASCENDING = "ascending"
    DESCENDING = "descending"
    STABLE = "stable"


@dataclass
class Averages:
    """Per-match averages over a set of matches."""

    count: int
    goals: float
    assists: float
    performance: float
    fatigue: float
    mood: float

    @classmethod
    def of(cls, matches: Sequence[Match]) -> Averages | None:
        """Averages rounded to 2 decimals, None for an empty set."""
        if not matches:
            return None

        def avg(values: list[int]) -> float:
            return round(float(np.mean(values)), 2)

        return cls(
            count=len(matches),
            goals=avg([m.goals for m in matches]),
            assists=avg([m.assists for m in matches]),
            performance=avg([m.performance for m in matches]),
            fatigue=avg([m.fatigue for m in matches]),
            mood=avg([m.mood for m in matches]),
        )


@dataclass
class FormComparison:
    """Recent window averages against overall averages."""

    recent: Averages
    overall: Averages
    momentum: Momentum

    @property
    def goals_delta(self) -> float:
        return round(self.recent.goals - self.overall.goals, 2)

    @property
    def performance_delta(self) -> float:
        return round(self.recent.performance - self.overall.performance, 2)


@dataclass
class CareerProgress:
    """Career span, totals and first-vs-last trend."""

    first_date: str | None
    last_date: str | None
    total_matches: int
    total_goals: int
    total_assists: int
    averages: Averages
    early_performance: float | None = None
    late_performance: float | None = None
    trend: Trend | None = None

    @property
    def performance_change(self) -> float | None:
        if self.early_performance is None or self.late_performance is None:
            return None
        return round(self.late_performance - self.early_performance, 2)


@dataclass
class FatigueDrift:
    """Performance in the earliest vs latest high-fatigue matches."""

    high_fatigue_matches: int
    early_performance: float
    late_performance: float

    @property
    def change(self) -> float:
        return round(self.late_performance - self.early_performance, 2)


@dataclass
class MatchRecord:
    """A single notable match."""

    match_id: int
    date_text: str | None
    jersey: str
    venue: str
    goals: int
    assists: int
    performance: int
    result: str

    @classmethod
    def from_match(cls, match: Match) -> MatchRecord:
        return cls(
            match_id=match.match_id,
            date_text=match.date_text,
            jersey=match.jersey.name,
            venue=match.venue.name,
            goals=match.goals,
            assists=match.assists,
            performance=match.performance,
            result=match.result_label,
        )

    @property
    def goal_contributions(self) -> int:
        return self.goals + self.assists

    def as_tuple(self) -> tuple:
        return (
            self.match_id,
            self.date_text,
            self.jersey,
            self.venue,
            self.goals,
            self.assists,
            self.performance,
            self.result,
        )


@dataclass(frozen=True)
class JerseyMetric:
    """How a jersey leaderboard ranks jerseys."""

    title: str
    reduction: Reduction
    value: Callable[[Match], float] | None = None
    descending: bool = True
    where: Callable[[Match], bool] | None = None


JERSEY_METRICS: dict[str, JerseyMetric] = {
    "goals": JerseyMetric("Most goals", Reduction.SUM, lambda m: m.goals),
    "assists": JerseyMetric("Most assists", Reduction.SUM, lambda m: m.assists),
    "matches": JerseyMetric("Most matches", Reduction.COUNT),
    "contributions": JerseyMetric(
        "Most goals + assists", Reduction.SUM, lambda m: m.goal_contributions
    ),
    "performance": JerseyMetric(
        "Best average performance", Reduction.AVERAGE, lambda m: m.performance
    ),
    "mood": JerseyMetric("Best average mood", Reduction.AVERAGE, lambda m: m.mood),
    "fatigue": JerseyMetric(
        "Least average fatigue", Reduction.AVERAGE, lambda m: m.fatigue, descending=False
    ),
    "wins": JerseyMetric(
        "Most wins", Reduction.COUNT, where=lambda m: m.result == MatchResult.WIN
    ),
    "draws": JerseyMetric(
        "Most draws", Reduction.COUNT, where=lambda m: m.result == MatchResult.DRAW
    ),
    "losses": JerseyMetric(
        "Most losses", Reduction.COUNT, where=lambda m: m.result == MatchResult.LOSS
    ),
}


class SummaryAnalyzer:
    """
    Career summaries over a match snapshot.

    Thresholds (recent window, trend size and deltas, high fatigue) come
    from AnalyticsSettings.
    """

    def __init__(
        self,
        settings: AnalyticsSettings | None = None,
        engine: AggregationEngine | None = None,
    ) -> None:
        self.settings = settings or AnalyticsSettings()
        self.engine = engine or AggregationEngine(TierScale.from_settings(self.settings.tiers))

    # -- averages and form -------------------------------------------------

    @staticmethod
    def overview(matches: Sequence[Match]) -> Averages | None:
        return Averages.of(matches)

    def recent(self, matches: Sequence[Match], window: int | None = None) -> list[Match]:
        """The most recent matches, newest first."""
        window = window or self.settings.recent_window
        return list(reversed(chronological(matches)))[:window]

    def recent_vs_overall(
        self,
        matches: Sequence[Match],
        window: int | None = None,
    ) -> FormComparison | None:
        """
        Compare the recent window with the whole career.

        Momentum is RISING when both the goals and performance deltas exceed
        the threshold, FALLING when either drops below its negative.
        """
        overall = Averages.of(matches)
        if overall is None:
            return None
        recent = Averages.of(self.recent(matches, window))

        threshold = self.settings.momentum_threshold
        goals_delta = recent.goals - overall.goals
        performance_delta = recent.performance - overall.performance
        if goals_delta > threshold and performance_delta > threshold:
            momentum = Momentum.RISING
        elif goals_delta < -threshold or performance_delta < -threshold:
            momentum = Momentum.FALLING
        else:
            momentum = Momentum.STEADY

        return FormComparison(recent=recent, overall=overall, momentum=momentum)

    def career_progress(self, matches: Sequence[Match]) -> CareerProgress | None:
        """
        Span, totals, averages and the first-vs-last performance trend.

        The trend needs at least trend_min_matches matches; below that the
        early/late fields stay None.
        """
        averages = Averages.of(matches)
        if averages is None:
            return None

        ordered = chronological(matches)
        dated = [m for m in ordered if m.has_date]
        progress = CareerProgress(
            first_date=dated[0].date_text if dated else None,
            last_date=dated[-1].date_text if dated else None,
            total_matches=len(ordered),
            total_goals=sum(m.goals for m in ordered),
            total_assists=sum(m.assists for m in ordered),
            averages=averages,
        )

        if len(ordered) < self.settings.trend_min_matches:
            logger.debug(
                f"Career trend needs {self.settings.trend_min_matches} matches, "
                f"have {len(ordered)}"
            )
            return progress

        window = self.settings.recent_window
        progress.early_performance = Averages.of(ordered[:window]).performance
        progress.late_performance = Averages.of(ordered[-window:]).performance

        change = progress.late_performance - progress.early_performance
        threshold = self.settings.trend_threshold
        if change > threshold:
            progress.trend = Trend.ASCENDING
        elif change < -threshold:
            progress.trend = Trend.DESCENDING
        else:
            progress.trend = Trend.STABLE
        return progress

    def fatigue_drift(self, matches: Sequence[Match]) -> FatigueDrift | None:
        """Performance in the earliest vs latest high-fatigue matches."""
        demanding = [
            m
            for m in chronological(matches)
            if m.fatigue > self.settings.high_fatigue_threshold
        ]
        if not demanding:
            return None

        window = self.settings.recent_window
        return FatigueDrift(
            high_fatigue_matches=len(demanding),
            early_performance=Averages.of(demanding[:window]).performance,
            late_performance=Averages.of(demanding[-window:]).performance,
        )

    # -- records -----------------------------------------------------------

    @staticmethod
    def _record(
        matches: Sequence[Match],
        value: Callable[[Match], int],
        highest: bool = True,
    ) -> MatchRecord | None:
        # max/min keep the first of equal values, i.e. the earliest logged
        if not matches:
            return None
        pick = max if highest else min
        return MatchRecord.from_match(pick(matches, key=value))

    def best_match(self, matches: Sequence[Match]) -> MatchRecord | None:
        return self._record(matches, lambda m: m.performance)

    def worst_match(self, matches: Sequence[Match]) -> MatchRecord | None:
        return self._record(matches, lambda m: m.performance, highest=False)

    def most_goals(self, matches: Sequence[Match]) -> MatchRecord | None:
        return self._record(matches, lambda m: m.goals)

    def most_assists(self, matches: Sequence[Match]) -> MatchRecord | None:
        return self._record(matches, lambda m: m.assists)

    def best_contribution(self, matches: Sequence[Match]) -> MatchRecord | None:
        """Match with the most goals plus assists."""
        return self._record(matches, lambda m: m.goal_contributions)

    @staticmethod
    def scoreless(matches: Sequence[Match]) -> list[MatchRecord]:
        """Matches without a goal, newest first."""
        return [
            MatchRecord.from_match(m) for m in reversed(chronological(matches)) if m.goals == 0
        ]

    @staticmethod
    def without_assists(matches: Sequence[Match]) -> list[MatchRecord]:
        """Matches without an assist, newest first."""
        return [
            MatchRecord.from_match(m) for m in reversed(chronological(matches)) if m.assists == 0
        ]

    # -- jerseys -----------------------------------------------------------

    def jersey_leader(self, matches: Sequence[Match], metric: str) -> GroupRow | None:
        """
        Top jersey for a leaderboard metric.

        Raises:
            KeyError: If the metric is unknown
        """
        definition = JERSEY_METRICS[metric]
        subset = [m for m in matches if definition.where is None or definition.where(m)]
        return self.engine.top(
            subset,
            jersey_key,
            definition.value,
            definition.reduction,
            label=second_item_label,
            descending=definition.descending,
        )

    @staticmethod
    def most_drawn_jersey(matches: Sequence[Match]) -> JerseyVariant | None:
        """Jersey picked most often by the kit draw, among jerseys worn."""
        jerseys: dict[int, JerseyVariant] = {}
        for match in matches:
            jerseys.setdefault(match.jersey.jersey_id, match.jersey)
        if not jerseys:
            return None
        return max(jerseys.values(), key=lambda j: j.times_drawn)

    def venue_jersey_combination(
        self,
        matches: Sequence[Match],
        best: bool = True,
    ) -> GroupRow | None:
        """Venue and jersey pair with the best (or worst) average performance."""
        return self.engine.top(
            matches,
            venue_jersey_key,
            lambda m: m.performance,
            Reduction.AVERAGE,
            label=venue_jersey_label,
            descending=best,
        )
