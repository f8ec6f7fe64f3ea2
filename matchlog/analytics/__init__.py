"""
Analytics Module

This module contains the statistics computed over the match log.

Components:
    - AggregationEngine: Group-by-key counts, sums and averages
    - CalendarClassifier: Weekday, month, year and season buckets
    - CorrelationAnalyzer: Pearson correlation and consistency
    - OutlierDetector: Mean-anchored IQR performance outliers
    - StreakFinder: Longest run of matches satisfying a predicate
    - EfficiencyCalculator: Guarded ratios of attribute averages
    - SummaryAnalyzer: Averages, form, trend, records and leaderboards
"""

from matchlog.analytics.aggregation import (
    AggregationEngine,
    GroupOrder,
    GroupRow,
    Reduction,
    ResultBreakdown,
    SummaryRow,
    Tier,
    TierScale,
)
from matchlog.analytics.calendar_buckets import (
    CalendarClassifier,
    Period,
    PeriodJerseyRow,
    WeekdayBucket,
    sections,
    weekday_index,
)
from matchlog.analytics.correlation import (
    ConsistencyStats,
    CorrelationAnalyzer,
    CorrelationResult,
)
from matchlog.analytics.efficiency import EfficiencyCalculator, EfficiencyRow
from matchlog.analytics.outliers import OutlierDetector, OutlierReport, OutlierRow
from matchlog.analytics.streaks import PREDICATES, Streak, StreakFinder, chronological
from matchlog.analytics.summary import (
    JERSEY_METRICS,
    Averages,
    CareerProgress,
    FatigueDrift,
    FormComparison,
    MatchRecord,
    Momentum,
    SummaryAnalyzer,
    Trend,
)

__all__ = [
    # Aggregation
    "AggregationEngine",
    "GroupOrder",
    "GroupRow",
    "Reduction",
    "ResultBreakdown",
    "SummaryRow",
    "Tier",
    "TierScale",
    # Calendar
    "CalendarClassifier",
    "Period",
    "PeriodJerseyRow",
    "WeekdayBucket",
    "sections",
    "weekday_index",
    # Correlation
    "ConsistencyStats",
    "CorrelationAnalyzer",
    "CorrelationResult",
    # Efficiency
    "EfficiencyCalculator",
    "EfficiencyRow",
    # Outliers
    "OutlierDetector",
    "OutlierReport",
    "OutlierRow",
    # Streaks
    "PREDICATES",
    "Streak",
    "StreakFinder",
    "chronological",
    # Summary
    "JERSEY_METRICS",
    "Averages",
    "CareerProgress",
    "FatigueDrift",
    "FormComparison",
    "MatchRecord",
    "Momentum",
    "SummaryAnalyzer",
    "Trend",
]
