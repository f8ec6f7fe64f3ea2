"""
CLI Module for MiFutbol match reports

Provides a command-line interface for listing and running reports over
the match log.

Usage:
    python -m cli.main
"""

from cli.main import main, run_interactive

__all__ = ["main", "run_interactive"]
