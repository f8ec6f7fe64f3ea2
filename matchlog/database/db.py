"""Read-only database connection for the match log."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator, Optional

from loguru import logger

from matchlog.config import DEFAULT_DB_PATH

SCHEMA_PATH = Path(__file__).parent / "schema.sql"

REQUIRED_TABLES = ("jersey", "venue", "matches")


class Database:
    """SQLite wrapper that opens the match log in read-only mode."""

    def __init__(self, db_path: Optional[Path] = None):
        """Initialize database handle.

        Args:
            db_path: Path to SQLite database file. Defaults to data/mifutbol.db
        """
        self.db_path = Path(db_path) if db_path else DEFAULT_DB_PATH
        self._connection: Optional[sqlite3.Connection] = None

    @property
    def connection(self) -> sqlite3.Connection:
        """Get or create the read-only database connection.

        Raises:
            FileNotFoundError: If the database file does not exist
        """
        if self._connection is None:
            if not self.db_path.exists():
                raise FileNotFoundError(f"Match database not found at {self.db_path}")
            uri = f"{self.db_path.resolve().as_uri()}?mode=ro"
            self._connection = sqlite3.connect(uri, uri=True)
            self._connection.row_factory = sqlite3.Row
            logger.debug(f"Opened match database {self.db_path} (read-only)")
        return self._connection

    def close(self) -> None:
        """Close database connection."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    @contextmanager
    def cursor(self) -> Generator[sqlite3.Cursor, None, None]:
        """Context manager for a database cursor."""
        cur = self.connection.cursor()
        try:
            yield cur
        finally:
            cur.close()

    def is_initialized(self) -> bool:
        """Check if the database holds the match log tables."""
        with self.cursor() as cur:
            cur.execute("SELECT name FROM sqlite_master WHERE type='table'")
            tables = {row["name"] for row in cur.fetchall()}
        return all(table in tables for table in REQUIRED_TABLES)

    def get_database_stats(self) -> dict[str, Any]:
        """Get summary statistics about database contents."""
        with self.cursor() as cur:
            cur.execute("SELECT COUNT(*) as count FROM matches")
            total_matches = cur.fetchone()["count"]

            cur.execute("SELECT COUNT(*) as count FROM jersey")
            total_jerseys = cur.fetchone()["count"]

            cur.execute("SELECT COUNT(*) as count FROM venue")
            total_venues = cur.fetchone()["count"]

            cur.execute(
                "SELECT COUNT(*) as count FROM matches "
                "WHERE played_at IS NULL OR TRIM(played_at) = ''"
            )
            undated_matches = cur.fetchone()["count"]

        return {
            "total_matches": total_matches,
            "total_jerseys": total_jerseys,
            "total_venues": total_venues,
            "undated_matches": undated_matches,
        }

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


# Module-level database instance
_db_instance: Optional[Database] = None


def get_database(db_path: Optional[Path] = None) -> Database:
    """Get or create the database singleton.

    Args:
        db_path: Optional custom path for database

    Returns:
        Database instance
    """
    global _db_instance
    if _db_instance is None or (db_path and _db_instance.db_path != Path(db_path)):
        if _db_instance is not None:
            _db_instance.close()
        _db_instance = Database(db_path)
    return _db_instance
