"""
Correlation Module

Pearson correlation between two numeric match attributes, and a consistency
profile of a single attribute.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np
from loguru import logger

from matchlog.models.match import Match, attribute_getter

# Attribute pairs reported by default
DEFAULT_PAIRS = (
    ("fatigue", "performance"),
    ("mood", "performance"),
    ("goals", "performance"),
    ("assists", "fatigue"),
)


@dataclass
class CorrelationResult:
    """Pearson coefficient between two attributes."""

    x: str
    y: str
    coefficient: float | None
    sample_size: int

    @property
    def strength(self) -> str:
        """Qualitative strength of the relationship."""
        if self.coefficient is None:
            return "undefined"
        magnitude = abs(self.coefficient)
        if magnitude >= 0.7:
            return "strong"
        elif magnitude >= 0.4:
            return "moderate"
        elif magnitude >= 0.2:
            return "weak"
        return "none"


@dataclass
class ConsistencyStats:
    """Spread of one attribute across all matches."""

    attribute: str
    mean: float
    std_dev: float
    coefficient_of_variation: float | None
    minimum: int
    maximum: int
    count: int


class CorrelationAnalyzer:
    """Pearson correlation and consistency over a match snapshot."""

    @staticmethod
    def pearson(xs: Sequence[float], ys: Sequence[float]) -> float | None:
        """
        Pearson coefficient using the raw sums formula.

        r = (n*Sxy - Sx*Sy) / sqrt((n*Sxx - Sx^2) * (n*Syy - Sy^2))

        Returns:
            Coefficient rounded to 4 decimals, or None with fewer than two
            points or zero variance in either series
        """
        if len(xs) != len(ys):
            raise ValueError(f"Series length mismatch: {len(xs)} vs {len(ys)}")

        n = len(xs)
        if n < 2:
            return None

        x = np.asarray(xs, dtype=np.float64)
        y = np.asarray(ys, dtype=np.float64)

        sum_x = x.sum()
        sum_y = y.sum()
        var_x = n * (x * x).sum() - sum_x * sum_x
        var_y = n * (y * y).sum() - sum_y * sum_y
        if var_x <= 0 or var_y <= 0:
            return None

        numerator = n * (x * y).sum() - sum_x * sum_y
        r = numerator / math.sqrt(var_x * var_y)
        # Clamp float drift so |r| never exceeds 1
        return round(float(min(1.0, max(-1.0, r))), 4)

    def correlate(self, matches: Sequence[Match], x: str, y: str) -> CorrelationResult:
        """Correlate two match attributes by name."""
        get_x = attribute_getter(x)
        get_y = attribute_getter(y)
        coefficient = self.pearson([get_x(m) for m in matches], [get_y(m) for m in matches])
        if coefficient is None:
            logger.debug(f"Correlation {x}/{y} undefined over {len(matches)} matches")
        return CorrelationResult(x=x, y=y, coefficient=coefficient, sample_size=len(matches))

    def correlate_defaults(self, matches: Sequence[Match]) -> list[CorrelationResult]:
        """Correlate every default attribute pair."""
        return [self.correlate(matches, x, y) for x, y in DEFAULT_PAIRS]

    @staticmethod
    def consistency(
        matches: Sequence[Match],
        attribute: str = "performance",
    ) -> ConsistencyStats | None:
        """
        Mean, population standard deviation and coefficient of variation.

        Returns:
            Stats, or None when there are no matches
        """
        if not matches:
            return None

        values = np.asarray([attribute_getter(attribute)(m) for m in matches], dtype=np.float64)
        mean = float(values.mean())
        # Population variance as avg(x^2) - avg(x)^2, floored at 0 for float drift
        variance = max(0.0, float((values * values).mean()) - mean * mean)
        std_dev = math.sqrt(variance)
        cv = round(std_dev / mean * 100, 2) if mean != 0 else None

        return ConsistencyStats(
            attribute=attribute,
            mean=round(mean, 2),
            std_dev=round(std_dev, 2),
            coefficient_of_variation=cv,
            minimum=int(values.min()),
            maximum=int(values.max()),
            count=len(values),
        )
