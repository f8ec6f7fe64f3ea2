"""Database module for reading the match log."""

from .db import SCHEMA_PATH, Database, get_database
from .queries import load_jerseys, load_matches, load_venues

__all__ = [
    "Database",
    "get_database",
    "SCHEMA_PATH",
    "load_matches",
    "load_jerseys",
    "load_venues",
]
