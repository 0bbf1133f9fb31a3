"""
Database repository for reminders.
Uses SQLite as a flat snapshot store: load everything, replace everything.
"""

import sqlite3
import threading
from typing import Iterable, List
from contextlib import contextmanager

from rappel.config.logging_config import get_logger
from rappel.config import settings
from rappel.reminder.errors import StoreError
from rappel.reminder.models import ReminderContent

logger = get_logger(__name__)


class ReminderRepository:
    """
    Thread-safe SQLite repository for reminder snapshots.
    """

    SCHEMA = """
    CREATE TABLE IF NOT EXISTS reminders (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL,
        body TEXT NOT NULL,
        fire_at TEXT NOT NULL
    );

    CREATE INDEX IF NOT EXISTS idx_fire_at ON reminders(fire_at);
    """

    def __init__(self, db_path: str = None):
        """
        Initialize repository.

        Args:
            db_path: Path to SQLite database (default from settings)

        Raises:
            StoreError: If the database cannot be created or opened
        """
        self.db_path = db_path or str(settings.DB_PATH)
        self.lock = threading.Lock()

        logger.info(f"ReminderRepository initialized: {self.db_path}")
        self._initialize_database()

    def _initialize_database(self) -> None:
        """Create database schema if it doesn't exist."""
        try:
            with self._get_connection() as conn:
                conn.executescript(self.SCHEMA)
                conn.commit()
            logger.info("Database schema initialized")

        except sqlite3.Error as e:
            logger.error(f"Failed to initialize database: {e}", exc_info=True)
            raise StoreError(f"Cannot initialize {self.db_path}: {e}") from e

    @contextmanager
    def _get_connection(self):
        """
        Get database connection (context manager).

        Yields:
            SQLite connection
        """
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row  # Access columns by name
        try:
            yield conn
        finally:
            conn.close()

    def load_all(self) -> List[ReminderContent]:
        """
        Load every stored reminder.

        Returns:
            Reminders ordered by fire time ascending

        Raises:
            StoreError: If the query fails
        """
        try:
            with self._get_connection() as conn:
                rows = conn.execute(
                    """
                    SELECT title, body, fire_at FROM reminders
                    ORDER BY fire_at ASC
                    """
                ).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to load reminders: {e}") from e

        reminders = [ReminderContent.from_dict(dict(row)) for row in rows]
        logger.debug(f"Loaded {len(reminders)} reminders")
        return reminders

    def replace_all(self, reminders: Iterable[ReminderContent]) -> None:
        """
        Replace the whole table with the given reminders.

        Delete and insert run in a single transaction, so a failure leaves
        the previous contents in place.

        Args:
            reminders: New contents of the store

        Raises:
            StoreError: If the transaction fails
        """
        rows = [reminder.to_dict() for reminder in reminders]

        with self.lock:
            try:
                with self._get_connection() as conn:
                    with conn:
                        conn.execute("DELETE FROM reminders")
                        conn.executemany(
                            """
                            INSERT INTO reminders (title, body, fire_at)
                            VALUES (:title, :body, :fire_at)
                            """,
                            rows
                        )
            except sqlite3.Error as e:
                raise StoreError(f"Failed to replace reminders: {e}") from e

        logger.debug(f"Store replaced with {len(rows)} reminders")

    def count(self) -> int:
        """
        Count stored reminders.

        Returns:
            Number of rows in the store
        """
        try:
            with self._get_connection() as conn:
                return conn.execute("SELECT COUNT(*) FROM reminders").fetchone()[0]
        except sqlite3.Error as e:
            raise StoreError(f"Failed to count reminders: {e}") from e
