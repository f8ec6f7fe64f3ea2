"""
Efficiency Module

Ratios between two averaged match attributes, guarded against zero divisors.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np

from matchlog.models.match import Match, attribute_getter

from .aggregation import AggregationEngine, KeyFunc, LabelFunc

Filter = Callable[[Match], bool]


@dataclass
class EfficiencyRow:
    """Efficiency ratio for one group of matches."""

    label: str
    ratio: float | None
    count: int

    def as_tuple(self) -> tuple[str, float | None, int]:
        return (self.label, self.ratio, self.count)


class EfficiencyCalculator:
    """avg(numerator) / avg(denominator) over a match subset."""

    def __init__(self, engine: AggregationEngine | None = None) -> None:
        self.engine = engine or AggregationEngine()

    @staticmethod
    def ratio(
        matches: Sequence[Match],
        numerator: str,
        denominator: str,
        where: Filter | None = None,
    ) -> float | None:
        """
        Ratio of two attribute averages, rounded to 2 decimals.

        Returns:
            None when the subset is empty or its denominator average is 0
        """
        subset = [m for m in matches if where is None or where(m)]
        if not subset:
            return None

        num = float(np.mean([attribute_getter(numerator)(m) for m in subset]))
        den = float(np.mean([attribute_getter(denominator)(m) for m in subset]))
        if den == 0:
            return None
        return round(num / den, 2)

    def performance_per_goal(self, matches: Sequence[Match]) -> float | None:
        """Average performance per goal, over matches with at least one goal."""
        return self.ratio(matches, "performance", "goals", where=lambda m: m.goals > 0)

    def performance_per_fatigue(self, matches: Sequence[Match]) -> float | None:
        """Average performance per fatigue unit."""
        return self.ratio(matches, "performance", "fatigue", where=lambda m: m.fatigue > 0)

    def by_group(
        self,
        matches: Sequence[Match],
        key: KeyFunc,
        numerator: str,
        denominator: str,
        label: LabelFunc = str,
    ) -> list[EfficiencyRow]:
        """
        Ratio per group, highest first.

        Groups with an undefined ratio are listed last.
        """
        rows = [
            EfficiencyRow(
                label=label(group_key),
                ratio=self.ratio(members, numerator, denominator),
                count=len(members),
            )
            for group_key, members in self.engine.partition(matches, key).items()
        ]
        rows.sort(key=lambda r: (r.ratio is None, -(r.ratio or 0.0)))
        return rows

    def assists_per_fatigue_by_tier(self, matches: Sequence[Match]) -> list[EfficiencyRow]:
        """Assists per fatigue unit, by fatigue tier."""
        return self.by_group(
            matches,
            self.engine.fatigue_tier_key,
            "assists",
            "fatigue",
            label=self.engine.tier_label,
        )

    def performance_per_effort_by_tier(self, matches: Sequence[Match]) -> list[EfficiencyRow]:
        """Performance per effort unit, by effort (fatigue) tier."""
        return self.by_group(
            matches,
            self.engine.fatigue_tier_key,
            "performance",
            "fatigue",
            label=self.engine.effort_label,
        )
