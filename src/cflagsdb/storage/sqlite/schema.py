"""
SQLite Schema Definitions

The flags table, the statements run against it, and schema initialization.
"""

import sqlite3

from cflagsdb.exceptions import StoreOpenError
from cflagsdb.logging_config import logger
from cflagsdb.storage.sqlite.config import TABLE_NAME


# (dir, file) collisions overwrite the existing row as part of the INSERT itself
SCHEMA_SQL = f"""
CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
    dir TEXT,
    file TEXT,
    flags TEXT,
    PRIMARY KEY (dir, file) ON CONFLICT REPLACE
)
"""

INSERT_SQL = f"INSERT INTO {TABLE_NAME} (dir, file, flags) VALUES (?, ?, ?)"

QUERY_SQL = f"SELECT dir, file, flags FROM {TABLE_NAME} WHERE dir GLOB ?"

COUNT_SQL = f"SELECT COUNT(*), COUNT(DISTINCT dir) FROM {TABLE_NAME}"


def init_schema(conn: sqlite3.Connection, db_path: str) -> None:
    """
    Create the flags table if it does not exist yet.

    Args:
        conn: SQLite connection
        db_path: Path to database file (for logging)

    Raises:
        StoreOpenError: If schema initialization fails
    """
    try:
        conn.execute(SCHEMA_SQL)
        logger.debug(f"Initialized SQLite schema at {db_path}")
    except sqlite3.Error as e:
        raise StoreOpenError(db_path, f"schema creation failed: {e}")


def compile_statement(conn: sqlite3.Connection, sql: str, param_count: int) -> None:
    """
    Compile a statement against the current schema without running it.

    sqlite3 prepares lazily on first execute; EXPLAIN compiles the statement
    and stops, so schema errors surface before any row is touched.

    Raises:
        sqlite3.Error: If the statement cannot be compiled
    """
    conn.execute(f"EXPLAIN {sql}", (None,) * param_count).close()
