"""
Database utilities for SQLite operations.

Provides connection management, schema initialization and the user record store
used by the API service.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from utils.logging import get_logger
from utils.schemas import UserRecord

logger = get_logger(__name__)


class StorageError(Exception):
    """Raised when the record store cannot complete a read or write."""


class RecordStore:
    """
    Create-only, read-many store for user records backed by a single SQLite file.

    Every operation opens its own short-lived connection, so one instance can be
    shared across request threads. SQLite serialises concurrent writers.
    """

    def __init__(self, path: str, timeout: float = 5.0) -> None:
        """
        Initialize record store.

        Args:
            path: SQLite database file path
            timeout: Seconds to wait on a locked database before failing
        """
        self.path = path
        self.timeout = timeout

    def get_conn(self) -> sqlite3.Connection:
        """
        Get SQLite database connection with dict-friendly row factory.

        Returns:
            SQLite connection with row_factory set to sqlite3.Row

        Raises:
            sqlite3.Error: If connection fails
        """
        conn = sqlite3.connect(self.path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection that commits on success, rolls back on error and always closes."""
        try:
            conn = self.get_conn()
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e

        try:
            with conn:
                yield conn
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e
        finally:
            conn.close()

    def init_schema(self) -> None:
        """
        Initialize database schema by creating the users table if it doesn't exist.

        Raises:
            StorageError: If the directory or schema cannot be created
        """
        try:
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(str(e)) from e

        with self._transaction() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT,
                    email TEXT,
                    timestamp DATETIME DEFAULT CURRENT_TIMESTAMP
                )
            """)

        logger.info("DB schema ready: path=%s", self.path)

    def create_record(self, name: Optional[str], email: Optional[str]) -> int:
        """
        Insert a user record. Identity and timestamp are assigned by SQLite.

        Args:
            name: User name, stored as given
            email: User email, stored as given

        Returns:
            The id of the new record

        Raises:
            StorageError: If the insert fails; nothing is persisted in that case
        """
        with self._transaction() as conn:
            cursor = conn.execute(
                "INSERT INTO users (name, email) VALUES (?, ?)",
                (name, email),
            )
            record_id = cursor.lastrowid

        logger.debug("Inserted user row: id=%s", record_id)
        return record_id

    def list_records(self) -> list[UserRecord]:
        """
        Fetch all user records in insertion order.

        Raises:
            StorageError: If the read fails
        """
        with self._transaction() as conn:
            rows = conn.execute(
                "SELECT id, name, email, timestamp FROM users ORDER BY id"
            ).fetchall()

        return [UserRecord(**dict(row)) for row in rows]

    def count(self) -> int:
        """Return the number of stored records."""
        with self._transaction() as conn:
            (total,) = conn.execute("SELECT COUNT(*) FROM users").fetchone()
        return total
