"""
Tests for the Report Service

Runs catalogue reports over the sample log, both from a preloaded snapshot
and from a database file.
"""

import importlib

import pytest

from matchlog.config import AnalyticsSettings
from matchlog.database import Database
from matchlog.service import (
    CATEGORIES,
    REPORTS,
    ReportResult,
    ReportService,
    UnknownReportError,
)


@pytest.fixture
def service(sample_matches):
    return ReportService(matches=sample_matches)


@pytest.fixture
def empty_service():
    return ReportService(matches=[])


class TestCatalogue:
    """Tests for the report catalogue."""

    def test_every_report_has_known_category(self):
        assert {d.category for d in REPORTS.values()} <= set(CATEGORIES)

    def test_filter_by_category(self):
        names = [d.name for d in ReportService.available_reports("records")]
        assert "best_match" in names
        assert "overview" not in names

    def test_unknown_report(self, service):
        with pytest.raises(UnknownReportError, match="fastest_sprint"):
            service.run("fastest_sprint")

    def test_resolve_names_every_unknown(self):
        """Test resolving reports all unknown names at once."""
        with pytest.raises(UnknownReportError) as excinfo:
            ReportService.resolve(["results", "nope", "fastest_sprint"])
        assert excinfo.value.names == ("nope", "fastest_sprint")
        assert str(excinfo.value) == "Unknown reports 'nope', 'fastest_sprint'"

    def test_resolve_known(self):
        names = [d.name for d in ReportService.resolve(["streaks", "results"])]
        assert names == ["streaks", "results"]

    def test_unknown_report_is_key_error(self):
        assert issubclass(UnknownReportError, KeyError)

    def test_jersey_leaderboards_registered(self):
        for name in ("jersey_goals", "jersey_fatigue", "jersey_wins", "jersey_most_drawn"):
            assert name in REPORTS

    def test_catalogue_imports_cleanly(self):
        """Test the catalogue module loads without duplicate report names."""
        module = importlib.import_module("matchlog.service.reports")
        assert "jersey_performance" in module.REPORTS
        assert "jersey_performance_table" in module.REPORTS


class TestRunReports:
    """Tests for individual reports over the sample log."""

    def test_overview(self, service):
        result = service.run("overview")

        assert isinstance(result, ReportResult)
        assert result.title == "Overall averages"
        assert result.rows[0][0] == 12
        assert result.rows[0][3] == pytest.approx(6.5)

    def test_results(self, service):
        assert service.run("results").rows == [("Win", 6), ("Draw", 3), ("Loss", 3)]

    def test_weekday_performance_has_seven_rows(self, service):
        rows = service.run("weekday_performance").rows
        assert len(rows) == 7
        assert rows[0] == ("Sunday", 0.0, 0)

    def test_best_weekday(self, service):
        rows = service.run("best_weekday").rows
        assert rows == [("Saturday", pytest.approx(7.67), 3)]

    def test_monthly_newest_first(self, service):
        assert service.run("monthly_performance").rows[0][0] == "April 2024"

    def test_jersey_by_month_grouped(self, service):
        result = service.run("jersey_by_month")

        assert result.grouped is True
        assert result.columns[0] == "Period"
        assert result.rows[0][:2] == ("April 2024", "Away White")

    def test_fatigue_tiers_in_order(self, service):
        labels = [row[0] for row in service.run("fatigue_tiers").rows]
        assert labels == ["Low (1-3)", "Medium (4-7)", "High (8-10)"]

    def test_venue_jersey_best(self, service):
        assert service.run("venue_jersey_best").rows == [
            ("Central Park", "Home Red", pytest.approx(8.0), 5)
        ]

    def test_streaks(self, service):
        rows = {row[0]: row[1:] for row in service.run("streaks").rows}
        assert rows["Scored"] == (4, 8, 12)

    def test_scoreless(self, service):
        assert [row[0] for row in service.run("scoreless_matches").rows] == [11, 7, 5, 2]

    def test_career_progress_trend(self, service):
        rows = dict(service.run("career_progress").rows)
        assert rows["Trend"] == "Ascending"
        assert rows["Matches"] == 12

    def test_efficiency_values(self, service):
        rows = dict(service.run("efficiency").rows)
        # Matches with goals: performance 8, 6, 9, 7, 8, 10, 5, 7 over goals 2, 1, 3, 1, 2, 4, 1, 2
        assert rows["Performance per goal"] == pytest.approx(3.75)

    def test_undefined_metric_is_none(self, make_match):
        """Test zero divisors surface as None, never inf or nan."""
        service = ReportService(matches=[make_match(1, goals=0), make_match(2, goals=0)])
        rows = dict(service.run("efficiency").rows)
        assert rows["Performance per goal"] is None

    def test_jersey_leader_and_table_differ(self, service):
        """Test the performance leaderboard is the top row of the full jersey table."""
        leader = service.run("jersey_performance").rows
        table = service.run("jersey_performance_table").rows

        assert len(leader) == 1
        assert len(table) == 2
        assert leader[0] == table[0]

    def test_weather_assists(self, service):
        assert service.run("weather_assists").rows[0] == ("Cloudy", pytest.approx(1.5), 2)

    def test_weekday_assists(self, service):
        assert len(service.run("weekday_assists").rows) == 7

    def test_monthly_assists(self, service):
        assert service.run("monthly_assists").rows[0] == ("April 2024", pytest.approx(1.0), 1)

    def test_ideal_mood(self, service):
        # High mood: ids 4, 8, 9 with performance 9, 8, 10
        assert service.run("ideal_mood").rows == [("High (8-10)", pytest.approx(9.0), 3)]

    def test_high_fatigue_goals(self, service):
        # Fatigue above 7: ids 2, 4, 9 with goals 0, 3, 4
        rows = service.run("high_fatigue_goals").rows
        assert rows == [
            ("High", pytest.approx(7), pytest.approx(2.33), 3),
            ("Low", pytest.approx(9), pytest.approx(1.0), 9),
        ]

    def test_last_matches(self, service):
        """Test latest matches come newest first, undated ones leading."""
        assert [row[0] for row in service.run("last_matches").rows] == [11, 12, 10, 9, 8]

    def test_half_of_year_averages(self, service):
        result = service.run("half_of_year")

        assert result.columns == ("Half", "Avg goals", "Avg assists", "Avg performance", "Matches")
        # Eleven dated matches, all in January-April
        assert result.rows == [
            (
                "Start (Jan-Jun)",
                pytest.approx(1.45),
                pytest.approx(0.82),
                pytest.approx(6.55),
                11,
            )
        ]

    def test_climate_season_averages(self, service):
        rows = service.run("climate_seasons").rows
        assert [row[0] for row in rows] == ["Warm (Dec-Apr)"]
        assert rows[0][-1] == 11

    def test_run_all(self, service):
        results = service.run_all()
        assert [r.name for r in results] == list(REPORTS)

    def test_to_dict(self, service):
        data = service.run("results").to_dict()
        assert data["columns"] == ["Result", "Matches"]
        assert data["rows"][0] == ["Win", 6]


class TestEmptyLog:
    """Tests for the no-data path."""

    def test_every_report_empty(self, empty_service):
        """Test an empty log yields no rows for every report and never raises."""
        weekday_reports = {"weekday_performance", "weekday_goals", "weekday_assists"}
        for result in empty_service.run_all():
            if result.name in weekday_reports:
                assert [row[2] for row in result.rows] == [0] * 7
            else:
                assert result.is_empty, result.name

    def test_undated_only(self, make_match):
        """Test weekday reports keep all seven days when nothing is dated."""
        service = ReportService(
            matches=[make_match(1, date_text=None), make_match(2, date_text="")]
        )
        for name in ("weekday_performance", "weekday_goals", "weekday_assists"):
            rows = service.run(name).rows
            assert len(rows) == 7
            assert all(row[1:] == (0.0, 0) for row in rows)
        assert service.run("best_month").is_empty
        assert service.run("half_of_year").is_empty
        assert not service.run("overview").is_empty


class TestDatabaseBacked:
    """Tests for reports read from a database file."""

    def test_loads_snapshot_once(self, settings):
        with ReportService(Database(settings.database_path), settings) as service:
            first = service.matches
            service.run("overview")
            assert service.matches is first
            service.refresh()
            assert service.matches is not first
            assert len(service.matches) == 12

    def test_default_database_from_settings(self, settings):
        with ReportService(settings=settings) as service:
            assert service.run("results").rows[0] == ("Win", 6)

    def test_missing_database(self, tmp_path):
        settings = AnalyticsSettings(database_path=tmp_path / "missing.db")
        with ReportService(Database(settings.database_path), settings) as service:
            with pytest.raises(FileNotFoundError):
                service.run("overview")

    def test_configured_thresholds(self, sample_matches):
        """Test settings flow into the analyzers."""
        settings = AnalyticsSettings(outlier_multiplier=0.1)
        wide = ReportService(matches=sample_matches).run("outliers_high")
        narrow = ReportService(matches=sample_matches, settings=settings).run("outliers_high")
        assert len(narrow.rows) > len(wide.rows)
