"""
Report Service

Named catalogue of reports over a match log snapshot. Each report runs the
snapshot through the analytics core and returns labelled row tuples that the
presentation layer renders verbatim.

The snapshot is read once from the store and reused by every report until
refresh() is called.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

from loguru import logger

from matchlog.analytics import (
    JERSEY_METRICS,
    AggregationEngine,
    CalendarClassifier,
    CorrelationAnalyzer,
    EfficiencyCalculator,
    GroupOrder,
    GroupRow,
    MatchRecord,
    OutlierDetector,
    Period,
    Reduction,
    StreakFinder,
    SummaryAnalyzer,
    TierScale,
)
from matchlog.analytics.aggregation import (
    goal_range_key,
    jersey_key,
    result_key,
    result_label,
    second_item_label,
    venue_jersey_key,
    weather_key,
    weather_label,
)
from matchlog.config import AnalyticsSettings
from matchlog.database import Database, get_database, load_matches
from matchlog.models.match import Match

Row = tuple[Any, ...]

RECORD_COLUMNS = ("ID", "Date", "Jersey", "Venue", "Goals", "Assists", "Performance", "Result")
OUTLIER_COLUMNS = ("ID", "Date", "Performance", "Goals", "Assists")
CONTEXT_COLUMNS = ("ID", "Date", "Fatigue", "Performance", "Goals", "Assists", "Result")
TIER_COLUMNS = ("Tier", "Avg performance", "Avg goals", "Avg assists", "Matches")
BREAKDOWN_COLUMNS = ("Wins", "Draws", "Losses", "Matches")
SEASON_COLUMNS = ("Avg goals", "Avg assists", "Avg performance", "Matches")
PERIOD_JERSEY_COLUMNS = (
    "Period",
    "Jersey",
    "Matches",
    "Goals",
    "Assists",
    "Goals/match",
    "Assists/match",
)


@dataclass
class ReportResult:
    """Rows produced by one report. No rows means no data."""

    name: str
    title: str
    columns: tuple[str, ...]
    rows: list[Row] = field(default_factory=list)
    precision: int = 2
    # First column starts a new section whenever its value changes
    grouped: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable representation."""
        return {
            "name": self.name,
            "title": self.title,
            "columns": list(self.columns),
            "rows": [list(row) for row in self.rows],
        }


@dataclass
class ReportContext:
    """A snapshot and the analyzers configured for it."""

    matches: tuple[Match, ...]
    settings: AnalyticsSettings
    engine: AggregationEngine
    calendar: CalendarClassifier
    correlation: CorrelationAnalyzer
    outliers: OutlierDetector
    streaks: StreakFinder
    efficiency: EfficiencyCalculator
    summary: SummaryAnalyzer

    @classmethod
    def build(cls, matches: Sequence[Match], settings: AnalyticsSettings) -> ReportContext:
        engine = AggregationEngine(TierScale.from_settings(settings.tiers))
        return cls(
            matches=tuple(matches),
            settings=settings,
            engine=engine,
            calendar=CalendarClassifier(engine),
            correlation=CorrelationAnalyzer(),
            outliers=OutlierDetector(
                multiplier=settings.outlier_multiplier,
                high_fatigue_threshold=settings.high_fatigue_threshold,
                easy_fatigue_max=settings.easy_fatigue_max,
            ),
            streaks=StreakFinder(),
            efficiency=EfficiencyCalculator(engine),
            summary=SummaryAnalyzer(settings, engine),
        )


class UnknownReportError(KeyError):
    """A report name that is not in the catalogue."""

    def __init__(self, names: Sequence[str]) -> None:
        self.names = tuple(names)
        noun = "report" if len(self.names) == 1 else "reports"
        quoted = ", ".join(f"'{name}'" for name in self.names)
        super().__init__(f"Unknown {noun} {quoted}")

    def __str__(self) -> str:
        return str(self.args[0])


Builder = Callable[[ReportContext], list[Row]]


@dataclass(frozen=True)
class ReportDefinition:
    """Catalogue entry for one report."""

    name: str
    title: str
    category: str
    columns: tuple[str, ...]
    builder: Builder
    grouped: bool = False


REPORTS: dict[str, ReportDefinition] = {}

CATEGORIES = ("general", "calendar", "fatigue_mood", "jerseys", "records", "analysis")


def register(
    name: str,
    title: str,
    category: str,
    columns: Sequence[str],
    grouped: bool = False,
) -> Callable[[Builder], Builder]:
    """Add a row builder to the report catalogue."""

    def decorator(builder: Builder) -> Builder:
        if name in REPORTS:
            raise ValueError(f"Report '{name}' registered twice")
        REPORTS[name] = ReportDefinition(
            name=name,
            title=title,
            category=category,
            columns=tuple(columns),
            builder=builder,
            grouped=grouped,
        )
        return builder

    return decorator


def _rows(groups: Sequence[Any]) -> list[Row]:
    return [g.as_tuple() for g in groups]


def _single(group: GroupRow | MatchRecord | None) -> list[Row]:
    return [group.as_tuple()] if group is not None else []


def _tier_summary(ctx: ReportContext, key: Callable[[Match], Any]) -> list[Row]:
    rows = ctx.engine.summarize(
        ctx.matches,
        key,
        [
            ("performance", lambda m: m.performance, Reduction.AVERAGE),
            ("goals", lambda m: m.goals, Reduction.AVERAGE),
            ("assists", lambda m: m.assists, Reduction.AVERAGE),
        ],
        label=ctx.engine.tier_label,
    )
    return _rows(rows)


# ---------------------------------------------------------------------------
# General
# ---------------------------------------------------------------------------


@register(
    "overview",
    "Overall averages",
    "general",
    ("Matches", "Avg goals", "Avg assists", "Avg performance", "Avg fatigue", "Avg mood"),
)
def _overview(ctx: ReportContext) -> list[Row]:
    averages = ctx.summary.overview(ctx.matches)
    if averages is None:
        return []
    return [
        (
            averages.count,
            averages.goals,
            averages.assists,
            averages.performance,
            averages.fatigue,
            averages.mood,
        )
    ]


@register("results", "Results", "general", ("Result", "Matches"))
def _results(ctx: ReportContext) -> list[Row]:
    groups = ctx.engine.group(
        ctx.matches,
        result_key,
        reduction=Reduction.COUNT,
        label=result_label,
        descending=False,
        order=GroupOrder.KEY,
    )
    return [(g.label, g.count) for g in groups]


@register(
    "goal_ranges",
    "Performance by goals scored",
    "general",
    ("Goals", "Avg performance", "Matches"),
)
def _goal_ranges(ctx: ReportContext) -> list[Row]:
    return _rows(
        ctx.engine.group(
            ctx.matches,
            goal_range_key,
            lambda m: m.performance,
            label=second_item_label,
            descending=False,
            order=GroupOrder.KEY,
        )
    )


@register(
    "weather_performance",
    "Performance by weather",
    "general",
    ("Weather", "Avg performance", "Matches"),
)
def _weather_performance(ctx: ReportContext) -> list[Row]:
    return _rows(
        ctx.engine.group(ctx.matches, weather_key, lambda m: m.performance, label=weather_label)
    )


@register("weather_goals", "Goals by weather", "general", ("Weather", "Avg goals", "Matches"))
def _weather_goals(ctx: ReportContext) -> list[Row]:
    return _rows(ctx.engine.group(ctx.matches, weather_key, lambda m: m.goals, label=weather_label))


@register(
    "weather_assists",
    "Assists by weather",
    "general",
    ("Weather", "Avg assists", "Matches"),
)
def _weather_assists(ctx: ReportContext) -> list[Row]:
    return _rows(
        ctx.engine.group(ctx.matches, weather_key, lambda m: m.assists, label=weather_label)
    )


@register("weather_results", "Results by weather", "general", ("Weather",) + BREAKDOWN_COLUMNS)
def _weather_results(ctx: ReportContext) -> list[Row]:
    return _rows(ctx.engine.result_breakdown(ctx.matches, weather_key, label=weather_label))


@register("best_weather", "Best weather", "general", ("Weather", "Avg performance", "Matches"))
def _best_weather(ctx: ReportContext) -> list[Row]:
    return _single(
        ctx.engine.top(ctx.matches, weather_key, lambda m: m.performance, label=weather_label)
    )


@register("worst_weather", "Worst weather", "general", ("Weather", "Avg performance", "Matches"))
def _worst_weather(ctx: ReportContext) -> list[Row]:
    return _single(
        ctx.engine.top(
            ctx.matches,
            weather_key,
            lambda m: m.performance,
            label=weather_label,
            descending=False,
        )
    )


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------


@register(
    "weekday_performance",
    "Performance by weekday",
    "calendar",
    ("Weekday", "Avg performance", "Matches"),
)
def _weekday_performance(ctx: ReportContext) -> list[Row]:
    return _rows(ctx.calendar.weekday_buckets(ctx.matches, "performance"))


@register("weekday_goals", "Goals by weekday", "calendar", ("Weekday", "Avg goals", "Matches"))
def _weekday_goals(ctx: ReportContext) -> list[Row]:
    return _rows(ctx.calendar.weekday_buckets(ctx.matches, "goals"))


@register(
    "weekday_assists",
    "Assists by weekday",
    "calendar",
    ("Weekday", "Avg assists", "Matches"),
)
def _weekday_assists(ctx: ReportContext) -> list[Row]:
    return _rows(ctx.calendar.weekday_buckets(ctx.matches, "assists"))


@register("best_weekday", "Best weekday", "calendar", ("Weekday", "Avg performance", "Matches"))
def _best_weekday(ctx: ReportContext) -> list[Row]:
    bucket = ctx.calendar.best_weekday(ctx.matches)
    return [bucket.as_tuple()] if bucket is not None else []


@register("worst_weekday", "Worst weekday", "calendar", ("Weekday", "Avg performance", "Matches"))
def _worst_weekday(ctx: ReportContext) -> list[Row]:
    bucket = ctx.calendar.worst_weekday(ctx.matches)
    return [bucket.as_tuple()] if bucket is not None else []


@register(
    "monthly_performance",
    "Monthly performance",
    "calendar",
    ("Month", "Avg performance", "Matches"),
)
def _monthly_performance(ctx: ReportContext) -> list[Row]:
    return _rows(ctx.calendar.monthly_evolution(ctx.matches, "performance"))


@register("monthly_goals", "Monthly goals", "calendar", ("Month", "Avg goals", "Matches"))
def _monthly_goals(ctx: ReportContext) -> list[Row]:
    return _rows(ctx.calendar.monthly_evolution(ctx.matches, "goals"))


@register("monthly_assists", "Monthly assists", "calendar", ("Month", "Avg assists", "Matches"))
def _monthly_assists(ctx: ReportContext) -> list[Row]:
    return _rows(ctx.calendar.monthly_evolution(ctx.matches, "assists"))


@register("best_month", "Best month", "calendar", ("Month", "Avg performance", "Matches"))
def _best_month(ctx: ReportContext) -> list[Row]:
    return _single(ctx.calendar.best_month(ctx.matches))


@register("worst_month", "Worst month", "calendar", ("Month", "Avg performance", "Matches"))
def _worst_month(ctx: ReportContext) -> list[Row]:
    return _single(ctx.calendar.worst_month(ctx.matches))


@register(
    "yearly_performance",
    "Yearly performance",
    "calendar",
    ("Year", "Avg performance", "Matches"),
)
def _yearly_performance(ctx: ReportContext) -> list[Row]:
    return _rows(ctx.calendar.year_buckets(ctx.matches, "performance"))


@register("best_year", "Best season", "calendar", ("Year", "Avg performance", "Matches"))
def _best_year(ctx: ReportContext) -> list[Row]:
    return _single(ctx.calendar.best_year(ctx.matches))


@register("worst_year", "Worst season", "calendar", ("Year", "Avg performance", "Matches"))
def _worst_year(ctx: ReportContext) -> list[Row]:
    return _single(ctx.calendar.worst_year(ctx.matches))


@register(
    "half_of_year",
    "Start vs end of year",
    "calendar",
    ("Half",) + SEASON_COLUMNS,
)
def _half_of_year(ctx: ReportContext) -> list[Row]:
    return _rows(ctx.calendar.half_of_year(ctx.matches))


@register(
    "climate_seasons",
    "Cold vs warm season",
    "calendar",
    ("Season",) + SEASON_COLUMNS,
)
def _climate_seasons(ctx: ReportContext) -> list[Row]:
    return _rows(ctx.calendar.climate_seasons(ctx.matches))


@register("jersey_by_month", "Jerseys by month", "calendar", PERIOD_JERSEY_COLUMNS, grouped=True)
def _jersey_by_month(ctx: ReportContext) -> list[Row]:
    rows = ctx.calendar.jersey_by_period(ctx.matches, Period.MONTH)
    return [(r.period_label, *r.as_tuple()) for r in rows]


@register("jersey_by_year", "Jerseys by year", "calendar", PERIOD_JERSEY_COLUMNS, grouped=True)
def _jersey_by_year(ctx: ReportContext) -> list[Row]:
    rows = ctx.calendar.jersey_by_period(ctx.matches, Period.YEAR)
    return [(r.period_label, *r.as_tuple()) for r in rows]


# ---------------------------------------------------------------------------
# Fatigue and mood
# ---------------------------------------------------------------------------


@register("fatigue_tiers", "Performance by fatigue level", "fatigue_mood", TIER_COLUMNS)
def _fatigue_tiers(ctx: ReportContext) -> list[Row]:
    return _tier_summary(ctx, ctx.engine.fatigue_tier_key)


@register(
    "fatigue_results",
    "Results by fatigue level",
    "fatigue_mood",
    ("Tier",) + BREAKDOWN_COLUMNS,
)
def _fatigue_results(ctx: ReportContext) -> list[Row]:
    return _rows(
        ctx.engine.result_breakdown(
            ctx.matches, ctx.engine.fatigue_tier_key, label=ctx.engine.tier_label
        )
    )


@register("mood_tiers", "Performance by mood", "fatigue_mood", TIER_COLUMNS)
def _mood_tiers(ctx: ReportContext) -> list[Row]:
    return _tier_summary(ctx, ctx.engine.mood_tier_key)


@register("mood_results", "Results by mood", "fatigue_mood", ("Tier",) + BREAKDOWN_COLUMNS)
def _mood_results(ctx: ReportContext) -> list[Row]:
    return _rows(
        ctx.engine.result_breakdown(
            ctx.matches, ctx.engine.mood_tier_key, label=ctx.engine.tier_label
        )
    )


@register("ideal_mood", "Ideal mood", "fatigue_mood", ("Tier", "Avg performance", "Matches"))
def _ideal_mood(ctx: ReportContext) -> list[Row]:
    return _single(
        ctx.engine.top(
            ctx.matches,
            ctx.engine.mood_tier_key,
            lambda m: m.performance,
            label=ctx.engine.tier_label,
        )
    )


@register(
    "high_fatigue_split",
    "High vs low fatigue",
    "fatigue_mood",
    ("Fatigue", "Avg performance", "Matches"),
)
def _high_fatigue_split(ctx: ReportContext) -> list[Row]:
    return _rows(
        ctx.engine.group(
            ctx.matches,
            ctx.engine.high_fatigue_key(ctx.settings.high_fatigue_threshold),
            lambda m: m.performance,
        )
    )


@register(
    "high_fatigue_goals",
    "Goals in high vs low fatigue",
    "fatigue_mood",
    ("Fatigue", "Total goals", "Avg goals", "Matches"),
)
def _high_fatigue_goals(ctx: ReportContext) -> list[Row]:
    rows = ctx.engine.summarize(
        ctx.matches,
        ctx.engine.high_fatigue_key(ctx.settings.high_fatigue_threshold),
        [
            ("total", lambda m: m.goals, Reduction.SUM),
            ("average", lambda m: m.goals, Reduction.AVERAGE),
        ],
    )
    return _rows(rows)


@register("efficiency", "Efficiency", "fatigue_mood", ("Ratio", "Value"))
def _efficiency(ctx: ReportContext) -> list[Row]:
    if not ctx.matches:
        return []
    return [
        ("Performance per goal", ctx.efficiency.performance_per_goal(ctx.matches)),
        ("Performance per fatigue unit", ctx.efficiency.performance_per_fatigue(ctx.matches)),
    ]


@register(
    "effort_efficiency",
    "Performance per effort unit",
    "fatigue_mood",
    ("Effort", "Ratio", "Matches"),
)
def _effort_efficiency(ctx: ReportContext) -> list[Row]:
    return _rows(ctx.efficiency.performance_per_effort_by_tier(ctx.matches))


@register(
    "assists_per_fatigue",
    "Assists per fatigue unit",
    "fatigue_mood",
    ("Tier", "Ratio", "Matches"),
)
def _assists_per_fatigue(ctx: ReportContext) -> list[Row]:
    return _rows(ctx.efficiency.assists_per_fatigue_by_tier(ctx.matches))


@register(
    "fatigue_drift",
    "Performance in demanding matches over time",
    "fatigue_mood",
    ("Demanding matches", "Earliest avg", "Latest avg", "Change"),
)
def _fatigue_drift(ctx: ReportContext) -> list[Row]:
    drift = ctx.summary.fatigue_drift(ctx.matches)
    if drift is None:
        return []
    return [
        (
            drift.high_fatigue_matches,
            drift.early_performance,
            drift.late_performance,
            drift.change,
        )
    ]


# ---------------------------------------------------------------------------
# Jerseys
# ---------------------------------------------------------------------------


def _register_jersey_leader(metric: str) -> None:
    definition = JERSEY_METRICS[metric]

    @register(f"jersey_{metric}", definition.title, "jerseys", ("Jersey", "Value", "Matches"))
    def _leader(ctx: ReportContext) -> list[Row]:
        return _single(ctx.summary.jersey_leader(ctx.matches, metric))


for _metric in JERSEY_METRICS:
    _register_jersey_leader(_metric)


@register("jersey_most_drawn", "Most drawn jersey", "jerseys", ("Jersey", "Times drawn"))
def _jersey_most_drawn(ctx: ReportContext) -> list[Row]:
    jersey = ctx.summary.most_drawn_jersey(ctx.matches)
    return [(jersey.name, jersey.times_drawn)] if jersey is not None else []


@register(
    "jersey_performance_table",
    "Performance by jersey",
    "jerseys",
    ("Jersey", "Avg performance", "Matches"),
)
def _jersey_performance_table(ctx: ReportContext) -> list[Row]:
    return _rows(
        ctx.engine.group(ctx.matches, jersey_key, lambda m: m.performance, label=second_item_label)
    )


@register("jersey_results", "Results by jersey", "jerseys", ("Jersey",) + BREAKDOWN_COLUMNS)
def _jersey_results(ctx: ReportContext) -> list[Row]:
    return _rows(ctx.engine.result_breakdown(ctx.matches, jersey_key, label=second_item_label))


def _venue_jersey_row(group: GroupRow) -> Row:
    (_, venue), (_, jersey) = group.key
    return (venue, jersey, group.value, group.count)


@register(
    "venue_jersey",
    "Performance by venue and jersey",
    "jerseys",
    ("Venue", "Jersey", "Avg performance", "Matches"),
)
def _venue_jersey(ctx: ReportContext) -> list[Row]:
    groups = ctx.engine.group(ctx.matches, venue_jersey_key, lambda m: m.performance)
    return [_venue_jersey_row(g) for g in groups]


@register(
    "venue_jersey_best",
    "Best venue and jersey",
    "jerseys",
    ("Venue", "Jersey", "Avg performance", "Matches"),
)
def _venue_jersey_best(ctx: ReportContext) -> list[Row]:
    group = ctx.summary.venue_jersey_combination(ctx.matches, best=True)
    return [_venue_jersey_row(group)] if group is not None else []


@register(
    "venue_jersey_worst",
    "Worst venue and jersey",
    "jerseys",
    ("Venue", "Jersey", "Avg performance", "Matches"),
)
def _venue_jersey_worst(ctx: ReportContext) -> list[Row]:
    group = ctx.summary.venue_jersey_combination(ctx.matches, best=False)
    return [_venue_jersey_row(group)] if group is not None else []


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@register("best_match", "Best match", "records", RECORD_COLUMNS)
def _best_match(ctx: ReportContext) -> list[Row]:
    return _single(ctx.summary.best_match(ctx.matches))


@register("worst_match", "Worst match", "records", RECORD_COLUMNS)
def _worst_match(ctx: ReportContext) -> list[Row]:
    return _single(ctx.summary.worst_match(ctx.matches))


@register("most_goals_match", "Most goals in a match", "records", RECORD_COLUMNS)
def _most_goals_match(ctx: ReportContext) -> list[Row]:
    return _single(ctx.summary.most_goals(ctx.matches))


@register("most_assists_match", "Most assists in a match", "records", RECORD_COLUMNS)
def _most_assists_match(ctx: ReportContext) -> list[Row]:
    return _single(ctx.summary.most_assists(ctx.matches))


@register("best_contribution_match", "Most goals + assists in a match", "records", RECORD_COLUMNS)
def _best_contribution_match(ctx: ReportContext) -> list[Row]:
    return _single(ctx.summary.best_contribution(ctx.matches))


@register("last_matches", "Latest matches", "records", RECORD_COLUMNS)
def _last_matches(ctx: ReportContext) -> list[Row]:
    return [MatchRecord.from_match(m).as_tuple() for m in ctx.summary.recent(ctx.matches)]


@register("scoreless_matches", "Matches without a goal", "records", RECORD_COLUMNS)
def _scoreless_matches(ctx: ReportContext) -> list[Row]:
    return _rows(ctx.summary.scoreless(ctx.matches))


@register("no_assist_matches", "Matches without an assist", "records", RECORD_COLUMNS)
def _no_assist_matches(ctx: ReportContext) -> list[Row]:
    return _rows(ctx.summary.without_assists(ctx.matches))


@register("streaks", "Longest streaks", "records", ("Streak", "Length", "From match", "To match"))
def _streaks(ctx: ReportContext) -> list[Row]:
    rows = []
    for name, streak in ctx.streaks.all_longest(ctx.matches).items():
        if streak is not None:
            rows.append((name.capitalize(), *streak.as_tuple()))
    return rows


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------


@register(
    "correlations",
    "Correlations",
    "analysis",
    ("Pair", "Coefficient", "Strength", "Matches"),
)
def _correlations(ctx: ReportContext) -> list[Row]:
    if len(ctx.matches) < 2:
        return []
    return [
        (f"{r.x} / {r.y}", r.coefficient, r.strength, r.sample_size)
        for r in ctx.correlation.correlate_defaults(ctx.matches)
    ]


@register(
    "consistency",
    "Performance consistency",
    "analysis",
    ("Mean", "Std dev", "CV %", "Min", "Max", "Matches"),
)
def _consistency(ctx: ReportContext) -> list[Row]:
    stats = ctx.correlation.consistency(ctx.matches)
    if stats is None:
        return []
    return [
        (
            stats.mean,
            stats.std_dev,
            stats.coefficient_of_variation,
            stats.minimum,
            stats.maximum,
            stats.count,
        )
    ]


@register(
    "outlier_bounds",
    "Outlier fence",
    "analysis",
    ("Mean", "Q1", "Q3", "IQR", "Low bound", "High bound"),
)
def _outlier_bounds(ctx: ReportContext) -> list[Row]:
    report = ctx.outliers.detect(ctx.matches)
    if report.is_empty:
        return []
    return [(report.mean, report.q1, report.q3, report.iqr, report.low_bound, report.high_bound)]


@register("outliers_high", "Unusually good matches", "analysis", OUTLIER_COLUMNS)
def _outliers_high(ctx: ReportContext) -> list[Row]:
    return _rows(ctx.outliers.detect(ctx.matches).high)


@register("outliers_low", "Unusually poor matches", "analysis", OUTLIER_COLUMNS)
def _outliers_low(ctx: ReportContext) -> list[Row]:
    return _rows(ctx.outliers.detect(ctx.matches).low)


@register("demanding_well_played", "Demanding but well played", "analysis", CONTEXT_COLUMNS)
def _demanding_well_played(ctx: ReportContext) -> list[Row]:
    return [r.as_context_tuple() for r in ctx.outliers.demanding_well_played(ctx.matches)]


@register("easy_poorly_played", "Easy but poorly played", "analysis", CONTEXT_COLUMNS)
def _easy_poorly_played(ctx: ReportContext) -> list[Row]:
    return [r.as_context_tuple() for r in ctx.outliers.easy_poorly_played(ctx.matches)]


@register(
    "recent_form",
    "Recent form vs career",
    "analysis",
    ("Scope", "Matches", "Avg goals", "Avg assists", "Avg performance", "Avg fatigue", "Avg mood"),
)
def _recent_form(ctx: ReportContext) -> list[Row]:
    comparison = ctx.summary.recent_vs_overall(ctx.matches)
    if comparison is None:
        return []
    return [
        (
            scope,
            averages.count,
            averages.goals,
            averages.assists,
            averages.performance,
            averages.fatigue,
            averages.mood,
        )
        for scope, averages in (("Recent", comparison.recent), ("Career", comparison.overall))
    ]


@register("momentum", "Momentum", "analysis", ("Goals delta", "Performance delta", "Momentum"))
def _momentum(ctx: ReportContext) -> list[Row]:
    comparison = ctx.summary.recent_vs_overall(ctx.matches)
    if comparison is None:
        return []
    return [
        (
            comparison.goals_delta,
            comparison.performance_delta,
            comparison.momentum.value.capitalize(),
        )
    ]


@register("career_progress", "Career progress", "analysis", ("Metric", "Value"))
def _career_progress(ctx: ReportContext) -> list[Row]:
    progress = ctx.summary.career_progress(ctx.matches)
    if progress is None:
        return []
    window = ctx.settings.recent_window
    return [
        ("First match", progress.first_date),
        ("Last match", progress.last_date),
        ("Matches", progress.total_matches),
        ("Goals", progress.total_goals),
        ("Assists", progress.total_assists),
        ("Avg performance", progress.averages.performance),
        (f"First {window} avg performance", progress.early_performance),
        (f"Last {window} avg performance", progress.late_performance),
        ("Trend", progress.trend.value.capitalize() if progress.trend else None),
    ]


class ReportService:
    """
    Runs catalogue reports against one match log snapshot.

    Example:
        with ReportService(settings=load_settings()) as service:
            result = service.run("weekday_performance")
            for row in result.rows:
                print(row)
    """

    def __init__(
        self,
        database: Database | None = None,
        settings: AnalyticsSettings | None = None,
        matches: Sequence[Match] | None = None,
    ) -> None:
        """
        Initialize the report service.

        Args:
            database: Store to read from (defaults to the configured path)
            settings: Analytics settings (defaults if not provided)
            matches: Preloaded snapshot; skips the store entirely
        """
        self.settings = settings or AnalyticsSettings()
        self._database = database
        self._context: ReportContext | None = None
        if matches is not None:
            self._context = ReportContext.build(matches, self.settings)

    @property
    def database(self) -> Database:
        if self._database is None:
            self._database = get_database(self.settings.database_path)
        return self._database

    @property
    def context(self) -> ReportContext:
        """Snapshot and analyzers, loading the snapshot on first use."""
        if self._context is None:
            matches = load_matches(self.database)
            self._context = ReportContext.build(matches, self.settings)
        return self._context

    @property
    def matches(self) -> tuple[Match, ...]:
        return self.context.matches

    def refresh(self) -> None:
        """Drop the snapshot so the next report rereads the store."""
        self._context = None

    @staticmethod
    def available_reports(category: str | None = None) -> list[ReportDefinition]:
        """Catalogue entries, optionally limited to one category."""
        return [
            definition
            for definition in REPORTS.values()
            if category is None or definition.category == category
        ]

    @staticmethod
    def resolve(names: Sequence[str]) -> list[ReportDefinition]:
        """
        Look up catalogue entries by name.

        Raises:
            UnknownReportError: Naming every unknown report, before any runs
        """
        unknown = [name for name in names if name not in REPORTS]
        if unknown:
            raise UnknownReportError(unknown)
        return [REPORTS[name] for name in names]

    def run(self, name: str) -> ReportResult:
        """
        Run one report by name.

        Raises:
            UnknownReportError: If no report has that name
        """
        (definition,) = self.resolve([name])
        rows = definition.builder(self.context)
        logger.debug(f"Report {name}: {len(rows)} rows")
        return ReportResult(
            name=definition.name,
            title=definition.title,
            columns=definition.columns,
            rows=rows,
            grouped=definition.grouped,
        )

    def run_all(self, category: str | None = None) -> list[ReportResult]:
        """Run every report, in catalogue order."""
        return [self.run(d.name) for d in self.available_reports(category)]

    def close(self) -> None:
        if self._database is not None:
            self._database.close()

    def __enter__(self) -> ReportService:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
