"""
SQLite Persistence Layer

Owns the single connection behind a flags store: opening, configuring,
schema creation, statistics and release.
"""

import sqlite3
from pathlib import Path
from typing import Optional, Union

from cflagsdb.exceptions import StoreOpenError
from cflagsdb.logging_config import logger
from cflagsdb.schemas import StoreStats
from cflagsdb.storage.sqlite.config import BUSY_TIMEOUT_MS
from cflagsdb.storage.sqlite.schema import COUNT_SQL, init_schema

MEMORY_DB = ":memory:"


class SQLitePersistence:
    """
    Manages the SQLite connection of one flags database.

    The connection runs in autocommit mode: every statement is its own
    atomic write.
    """

    def __init__(self, db_path: Union[str, Path], busy_timeout_ms: int = BUSY_TIMEOUT_MS):
        """
        Open (or create) the database and ensure the schema.

        Args:
            db_path: Path to the .db file, or ":memory:"
            busy_timeout_ms: How long a locked database is waited on

        Raises:
            StoreOpenError: If the file cannot be opened or the schema created
        """
        self.db_path = db_path if str(db_path) == MEMORY_DB else Path(db_path)
        self.busy_timeout_ms = busy_timeout_ms
        self._conn: Optional[sqlite3.Connection] = self._connect()

    def _connect(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(
                str(self.db_path),
                timeout=self.busy_timeout_ms / 1000,
                isolation_level=None,
            )
        except sqlite3.Error as e:
            raise StoreOpenError(str(self.db_path), str(e))

        conn.row_factory = sqlite3.Row

        try:
            conn.execute(f"PRAGMA busy_timeout = {int(self.busy_timeout_ms)}")
        except sqlite3.Error as e:
            logger.warning(f"SQL: could not set busy timeout on {self.db_path}: {e}")

        try:
            init_schema(conn, str(self.db_path))
        except StoreOpenError:
            conn.close()
            raise

        logger.debug(f"Opened flags database {self.db_path}")
        return conn

    @property
    def connection(self) -> Optional[sqlite3.Connection]:
        """The open connection, or None once closed."""
        return self._conn

    @property
    def closed(self) -> bool:
        return self._conn is None

    def get_stats(self) -> Optional[StoreStats]:
        """
        Get database statistics.

        Returns:
            StoreStats, or None if the store is closed or unreadable
        """
        if self._conn is None:
            return None
        try:
            total, dirs = self._conn.execute(COUNT_SQL).fetchone()
        except sqlite3.Error as e:
            logger.warning(f"SQL: could not read statistics: {e}")
            return None

        size = 0
        if isinstance(self.db_path, Path) and self.db_path.exists():
            size = self.db_path.stat().st_size

        return StoreStats(total_records=total, total_directories=dirs, db_size_bytes=size)

    def close(self) -> None:
        """Release the connection. Calling it again is a no-op."""
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None
        logger.debug(f"Closed flags database {self.db_path}")
