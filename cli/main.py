#!/usr/bin/env python3
"""
Command-line interface for MiFutbol match reports

Lists and runs reports from the catalogue against a match log database,
rendering rows as aligned text or JSON. Without --report or --all it opens
an interactive menu.

Usage:
    python -m cli.main --list
    python -m cli.main --report weekday_performance best_match
    python -m cli.main --all --json
    python -m cli.main --stats
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Sequence

from loguru import logger
from pydantic import ValidationError

from matchlog.analytics import sections
from matchlog.config import load_settings
from matchlog.database import Database, load_jerseys, load_venues
from matchlog.service import CATEGORIES, ReportResult, ReportService, UnknownReportError

NO_DATA = "No data available."
UNDEFINED = "n/a"
LABEL_WIDTH = 30
VALUE_WIDTH = 12


def configure_logging(verbose: bool = False) -> None:
    """Configure logging for CLI usage."""
    logger.remove()
    if verbose:
        logger.add(sys.stderr, level="DEBUG")
    else:
        logger.add(sys.stderr, level="WARNING")


def format_value(value: Any, precision: int = 2) -> str:
    """Render one cell: floats to fixed precision, None as n/a."""
    if value is None:
        return UNDEFINED
    if isinstance(value, float):
        return f"{value:.{precision}f}"
    return str(value)


def _format_row(cells: Sequence[str]) -> str:
    if not cells:
        return ""
    first, *rest = cells
    return first.ljust(LABEL_WIDTH) + "".join(c.rjust(VALUE_WIDTH) for c in rest)


def render_report(result: ReportResult) -> str:
    """Render a report as aligned text."""
    lines = [result.title, "-" * max(len(result.title), 50)]
    if result.is_empty:
        lines.append(NO_DATA)
        return "\n".join(lines)

    if result.grouped:
        # First column names the section
        header = _format_row(list(result.columns[1:]))
        for section, rows in sections(result.rows, key=lambda row: row[0]):
            lines.append("")
            lines.append(str(section))
            lines.append(header)
            for row in rows:
                lines.append(_format_row([format_value(v, result.precision) for v in row[1:]]))
    else:
        lines.append(_format_row(list(result.columns)))
        for row in result.rows:
            lines.append(_format_row([format_value(v, result.precision) for v in row]))
    return "\n".join(lines)


def print_catalogue(service: ReportService) -> None:
    """Print the report catalogue grouped by category."""
    for category in CATEGORIES:
        definitions = service.available_reports(category)
        if not definitions:
            continue
        print(f"\n{category.replace('_', ' ').title()}:")
        for definition in definitions:
            print(f"  {definition.name:<28} {definition.title}")
    print()


def print_results(results: Sequence[ReportResult], as_json: bool = False) -> None:
    """Print report results as text or JSON."""
    if as_json:
        print(json.dumps([r.to_dict() for r in results], indent=2, default=str))
        return
    for result in results:
        print()
        print(render_report(result))
    print()


def print_status(db: Database) -> None:
    """Print what the match database holds."""
    stats = db.get_database_stats()
    print("=" * 60)
    print("Match Database")
    print("=" * 60)
    print(f"  Path: {db.db_path}")
    print(f"  Matches: {stats['total_matches']} ({stats['undated_matches']} undated)")
    print()

    print(f"Jerseys ({stats['total_jerseys']}):")
    for jersey in load_jerseys(db):
        print(f"  {jersey.name:<28} drawn {jersey.times_drawn} times")
    print()

    print(f"Venues ({stats['total_venues']}):")
    for venue in load_venues(db):
        print(f"  {venue.name}")
    print()


def print_header() -> None:
    """Print welcome header."""
    print()
    print("=" * 60)
    print("   MiFutbol Match Reports")
    print("=" * 60)
    print()


def run_interactive(service: ReportService) -> None:
    """Menu-driven report browsing."""
    print_header()
    definitions = service.available_reports()

    while True:
        print("\n" + "=" * 50)
        print("REPORTS")
        print("=" * 50)
        for index, definition in enumerate(definitions, start=1):
            print(f"  [{index:>2}] {definition.title}")
        print("  [ a] Run all reports")
        print("  [ q] Quit")
        print()

        choice = input("Select report: ").strip().lower()

        if choice in ("q", "quit"):
            print("\nBye!")
            break
        elif choice == "a":
            print_results(service.run_all())
        elif choice.isdigit() and 1 <= int(choice) <= len(definitions):
            print_results([service.run(definitions[int(choice) - 1].name)])
        else:
            print(f"  Invalid option. Please choose 1-{len(definitions)}, 'a' or 'q'.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="MiFutbol match log reports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m cli.main --list
  python -m cli.main --report best_weekday streaks
  python -m cli.main --db data/mifutbol.db --all --json
  python -m cli.main --stats
        """,
    )
    parser.add_argument("--db", type=Path, help="Path to the match database")
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to the analytics settings file (default: config/analytics.yaml)",
    )

    action = parser.add_mutually_exclusive_group()
    action.add_argument("--list", action="store_true", help="List available reports")
    action.add_argument("--report", nargs="+", metavar="NAME", help="Run the named reports")
    action.add_argument("--all", action="store_true", help="Run every report")
    action.add_argument("--stats", action="store_true", help="Show what the database holds")

    parser.add_argument("--json", action="store_true", help="Print rows as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        settings = load_settings(args.config)
        if args.db is not None:
            settings = settings.model_copy(update={"database_path": args.db})

        if args.list:
            print_catalogue(ReportService(settings=settings, matches=()))
            return 0

        if args.report:
            ReportService.resolve(args.report)

        database = Database(settings.database_path)
        if not database.is_initialized():
            print(f"Error: {database.db_path} does not hold a match log", file=sys.stderr)
            database.close()
            return 1

        if args.stats:
            with database:
                print_status(database)
            return 0

        with ReportService(database, settings) as service:
            if args.all:
                print_results(service.run_all(), args.json)
            elif args.report:
                print_results([service.run(name) for name in args.report], args.json)
            else:
                run_interactive(service)
        return 0

    except (FileNotFoundError, UnknownReportError, ValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            logger.exception("Report run failed")
        return 1
    except KeyboardInterrupt:
        print("\n\nInterrupted. Exiting...")
        return 1


if __name__ == "__main__":
    sys.exit(main())
