"""
SQLite Flag Record Operations

Bulk insertion of per-file flags and streaming glob queries over the
recorded directories.
"""

import sqlite3
from typing import Callable, Iterable, Sequence

from pydantic import ValidationError

from cflagsdb.logging_config import logger
from cflagsdb.paths import PathRef, normalize_dir, resolve_path
from cflagsdb.schemas import Record
from cflagsdb.storage.sqlite.config import ABORT_BATCH_ON_STEP_FAILURE, FLAG_SEPARATOR
from cflagsdb.storage.sqlite.persistence import SQLitePersistence
from cflagsdb.storage.sqlite.schema import INSERT_SQL, QUERY_SQL, compile_statement

RecordVisitor = Callable[[Record], bool]

# Errors raised while binding parameters, as opposed to executing.
# Text holding lone surrogates (undecodable file names) cannot be encoded for SQLite.
_BIND_ERRORS = (sqlite3.InterfaceError, sqlite3.ProgrammingError, UnicodeEncodeError)


class SQLiteRecordOperations:
    """
    Insert and query operations on the flags table.

    Neither operation raises for storage problems: failures are logged as
    warnings and reported through the return value.
    """

    def __init__(self, persistence: SQLitePersistence):
        self._persistence = persistence

    def insert(
        self,
        base_dir: PathRef,
        file_refs: Iterable[PathRef],
        flags_argv: Sequence[str],
        abort_on_step_failure: bool = ABORT_BATCH_ON_STEP_FAILURE,
    ) -> int:
        """
        Record one flag set for a batch of files.

        Every file gets the same space-joined flags string and is keyed by
        (base_dir, absolute file path). An existing row for that key is
        replaced. Rows are written one by one, so a batch that stops early
        keeps whatever was written before.

        Per-file failures:
        - unresolvable reference or bind error: the file is skipped
        - execution error: the rest of the batch is dropped, unless
          abort_on_step_failure is False, in which case only the file is skipped

        Args:
            base_dir: Directory relative references are resolved against; stored as ``dir``
            file_refs: Absolute or relative file references
            flags_argv: Flag tokens in argument order
            abort_on_step_failure: Stop the batch at the first failed write

        Returns:
            Number of rows written
        """
        conn = self._persistence.connection
        if conn is None:
            logger.warning("SQL: insert on a closed flags database")
            return 0

        directory = normalize_dir(base_dir)
        if directory is None:
            logger.warning(f"Invalid base directory {base_dir!r}, nothing recorded")
            return 0

        try:
            flags = FLAG_SEPARATOR.join(flags_argv)
        except TypeError as e:
            logger.warning(f"Flags must be strings, nothing recorded: {e}")
            return 0

        try:
            compile_statement(conn, INSERT_SQL, 3)
        except sqlite3.Error as e:
            logger.warning(f"SQL: Could not prepare statement: {e}")
            return 0

        written = 0
        cursor = conn.cursor()
        try:
            for ref in file_refs:
                abspath = resolve_path(directory, ref)
                if abspath is None:
                    logger.warning(f"Could not resolve path for {ref!r}, skipping")
                    continue

                try:
                    cursor.execute(INSERT_SQL, (directory, abspath, flags))
                except _BIND_ERRORS as e:
                    logger.warning(f"SQL: could not bind for {ref!r}: {e}")
                    continue
                except sqlite3.DatabaseError as e:
                    logger.warning(f"SQL: could not insert for {ref}: {e}")
                    if abort_on_step_failure:
                        break
                    continue

                written += 1
        finally:
            cursor.close()

        logger.debug(f"Recorded flags for {written} file(s) in {directory}")
        return written

    def query(self, pattern: str, visitor: RecordVisitor) -> bool:
        """
        Stream the records whose directory matches a glob pattern.

        Matching uses SQLite GLOB (``*``, ``?``, ``[...]``, case sensitive).
        Rows arrive in storage order. Each valid row is handed to ``visitor``;
        a falsy return stops the iteration. Rows with missing columns are
        skipped.

        Args:
            pattern: Glob pattern matched against the stored directory
            visitor: Called once per record, returns whether to continue

        Returns:
            False if the statement could not be prepared, the pattern could
            not be bound, or fetching failed; True otherwise, including when
            the visitor stopped early.
        """
        conn = self._persistence.connection
        if conn is None:
            logger.warning("SQL: query on a closed flags database")
            return False

        if not isinstance(pattern, str):
            logger.warning(f"SQL: could not bind for {pattern!r}: pattern must be a string")
            return False

        try:
            compile_statement(conn, QUERY_SQL, 1)
        except sqlite3.Error as e:
            logger.warning(f"SQL: Could not prepare statement: {e}")
            return False

        cursor = conn.cursor()
        try:
            try:
                cursor.execute(QUERY_SQL, (pattern,))
            except _BIND_ERRORS as e:
                logger.warning(f"SQL: could not bind for {pattern!r}: {e}")
                return False
            except sqlite3.DatabaseError as e:
                logger.warning(f"SQL: Could not get data: {e}")
                return False

            while True:
                try:
                    row = cursor.fetchone()
                except sqlite3.DatabaseError as e:
                    logger.warning(f"SQL: Could not get data: {e}")
                    return False

                if row is None:
                    break

                if row["dir"] is None or row["file"] is None or row["flags"] is None:
                    logger.warning("SQL: NULL values in row, skipping")
                    continue

                try:
                    record = Record(directory=row["dir"], file=row["file"], flags=row["flags"])
                except ValidationError as e:
                    logger.warning(f"SQL: malformed row, skipping: {e}")
                    continue

                if not visitor(record):
                    break

            return True
        finally:
            cursor.close()
