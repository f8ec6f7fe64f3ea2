"""
Outlier Detection Module

Flags matches whose performance sits unusually far from the average, and
lists matches whose performance runs against their fatigue.

The fence is anchored on the mean rather than on the quartiles:
    high = mean + k * IQR
    low  = mean - k * IQR
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
from loguru import logger

from matchlog.models.match import Match


@dataclass
class OutlierRow:
    """A match flagged by one of the outlier lists."""

    match_id: int
    date_text: str | None
    performance: int
    goals: int
    assists: int
    fatigue: int = 0
    result: str = "Unknown"

    @classmethod
    def from_match(cls, match: Match) -> OutlierRow:
        return cls(
            match_id=match.match_id,
            date_text=match.date_text,
            performance=match.performance,
            goals=match.goals,
            assists=match.assists,
            fatigue=match.fatigue,
            result=match.result_label,
        )

    def as_tuple(self) -> tuple:
        return (self.match_id, self.date_text, self.performance, self.goals, self.assists)

    def as_context_tuple(self) -> tuple:
        """Row with fatigue and result, for the fatigue-context lists."""
        return (
            self.match_id,
            self.date_text,
            self.fatigue,
            self.performance,
            self.goals,
            self.assists,
            self.result,
        )


@dataclass
class OutlierReport:
    """Fence statistics and the matches outside it."""

    mean: float | None = None
    q1: float | None = None
    q3: float | None = None
    high_bound: float | None = None
    low_bound: float | None = None
    high: list[OutlierRow] = field(default_factory=list)
    low: list[OutlierRow] = field(default_factory=list)

    @property
    def iqr(self) -> float | None:
        if self.q1 is None or self.q3 is None:
            return None
        return self.q3 - self.q1

    @property
    def is_empty(self) -> bool:
        return self.mean is None


class OutlierDetector:
    """
    Performance outliers and fatigue-context lists.

    Example:
        detector = OutlierDetector(multiplier=1.5)
        report = detector.detect(matches)
        for row in report.high:
            print(row.match_id, row.performance)
    """

    def __init__(
        self,
        multiplier: float = 1.5,
        high_fatigue_threshold: int = 7,
        easy_fatigue_max: int = 3,
    ) -> None:
        self.multiplier = multiplier
        self.high_fatigue_threshold = high_fatigue_threshold
        self.easy_fatigue_max = easy_fatigue_max

    @staticmethod
    def quartiles(values: Sequence[float]) -> tuple[float, float]:
        """First and third quartiles with linear interpolation."""
        q1, q3 = np.percentile(np.asarray(values, dtype=np.float64), [25, 75], method="linear")
        return float(q1), float(q3)

    def detect(self, matches: Sequence[Match]) -> OutlierReport:
        """
        Split matches outside the mean-anchored fence.

        High outliers are ordered by performance descending, low outliers
        ascending. Ties keep input order.
        """
        if not matches:
            return OutlierReport()

        performances = [m.performance for m in matches]
        mean = float(np.mean(performances))
        q1, q3 = self.quartiles(performances)
        spread = self.multiplier * (q3 - q1)
        high_bound = mean + spread
        low_bound = mean - spread

        high = sorted(
            (m for m in matches if m.performance > high_bound),
            key=lambda m: m.performance,
            reverse=True,
        )
        low = sorted(
            (m for m in matches if m.performance < low_bound),
            key=lambda m: m.performance,
        )

        logger.debug(
            f"Outlier fence [{low_bound:.2f}, {high_bound:.2f}]: "
            f"{len(high)} high, {len(low)} low"
        )
        return OutlierReport(
            mean=round(mean, 2),
            q1=q1,
            q3=q3,
            high_bound=round(high_bound, 2),
            low_bound=round(low_bound, 2),
            high=[OutlierRow.from_match(m) for m in high],
            low=[OutlierRow.from_match(m) for m in low],
        )

    def demanding_well_played(self, matches: Sequence[Match]) -> list[OutlierRow]:
        """
        High fatigue matches played above the average performance.

        Ordered by performance then fatigue, both descending.
        """
        if not matches:
            return []
        mean = float(np.mean([m.performance for m in matches]))
        selected = [
            m
            for m in matches
            if m.fatigue > self.high_fatigue_threshold and m.performance > mean
        ]
        selected.sort(key=lambda m: (m.performance, m.fatigue), reverse=True)
        return [OutlierRow.from_match(m) for m in selected]

    def easy_poorly_played(self, matches: Sequence[Match]) -> list[OutlierRow]:
        """
        Low fatigue matches played below the average performance.

        Ordered by performance then fatigue, both ascending.
        """
        if not matches:
            return []
        mean = float(np.mean([m.performance for m in matches]))
        selected = [
            m for m in matches if m.fatigue <= self.easy_fatigue_max and m.performance < mean
        ]
        selected.sort(key=lambda m: (m.performance, m.fatigue))
        return [OutlierRow.from_match(m) for m in selected]
