"""
SQLite Storage Facade

Public API of the flags store. Delegates to the persistence and record
operation modules.
"""

import os
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from cflagsdb.exceptions import StoreOpenError
from cflagsdb.logging_config import logger
from cflagsdb.paths import PathRef, glob_escape, resolve_path
from cflagsdb.schemas import Record, StoreStats
from cflagsdb.storage.sqlite.config import ABORT_BATCH_ON_STEP_FAILURE, BUSY_TIMEOUT_MS
from cflagsdb.storage.sqlite.persistence import SQLitePersistence
from cflagsdb.storage.sqlite.records import RecordVisitor, SQLiteRecordOperations


class FlagStore:
    """
    Per-file compiler flags, keyed by (directory, file).

    Holds one connection for its whole lifetime. Use ``FlagStore.open`` (or
    ``open_store``) to get one and close it with ``close`` or a ``with``
    block:

        store = open_store(path)
        if store is None:
            ...  # store unavailable
        with store:
            store.insert(os.getcwd(), ["main.c"], ["-O2", "-Wall"])
            store.query("/src/*", visitor)

    A store is driven by one thread at a time.
    """

    def __init__(self, persistence: SQLitePersistence):
        self.persistence = persistence
        self.records = SQLiteRecordOperations(persistence)
        self.db_path = persistence.db_path

    @classmethod
    def open(
        cls,
        db_path: Union[str, Path],
        busy_timeout_ms: int = BUSY_TIMEOUT_MS,
    ) -> Optional["FlagStore"]:
        """
        Open or create a flags database.

        Returns:
            The store, or None if the database is unavailable
        """
        try:
            persistence = SQLitePersistence(db_path, busy_timeout_ms)
        except StoreOpenError as e:
            logger.warning(str(e))
            return None
        return cls(persistence)

    # ========== LIFECYCLE ==========

    @property
    def closed(self) -> bool:
        return self.persistence.closed

    def close(self) -> None:
        """Release the connection; safe to call more than once."""
        self.persistence.close()

    def __enter__(self) -> "FlagStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ========== RECORDS ==========

    def insert(
        self,
        base_dir: PathRef,
        file_refs: Iterable[PathRef],
        flags_argv: Sequence[str],
        abort_on_step_failure: bool = ABORT_BATCH_ON_STEP_FAILURE,
    ) -> int:
        """Record one flag set for a batch of files."""
        return self.records.insert(base_dir, file_refs, flags_argv, abort_on_step_failure)

    def query(self, pattern: str, visitor: RecordVisitor) -> bool:
        """Stream records whose directory matches a glob pattern to a visitor."""
        return self.records.query(pattern, visitor)

    def find(self, file_ref: PathRef, base_dir: Optional[PathRef] = None) -> Optional[Record]:
        """
        Look up the recorded flags of a single file.

        Directories are tried from the file's own directory upwards, since a
        file is usually recorded from one of its ancestors; a full scan
        covers files recorded from elsewhere. The first hit wins.

        Args:
            file_ref: Absolute or relative file path
            base_dir: Directory for relative references (defaults to CWD)

        Returns:
            The record, or None if the file was never recorded
        """
        target = resolve_path(base_dir if base_dir is not None else os.getcwd(), file_ref)
        if target is None:
            logger.warning(f"Could not resolve path for {file_ref!r}")
            return None

        found: List[Record] = []

        def visit(record: Record) -> bool:
            if record.file == target:
                found.append(record)
                return False
            return True

        for pattern in [glob_escape(d) for d in _ancestors(target)] + ["*"]:
            if not self.records.query(pattern, visit):
                return None
            if found:
                return found[0]
        return None

    # ========== STATS ==========

    def get_stats(self) -> Optional[StoreStats]:
        """Get database statistics."""
        return self.persistence.get_stats()


def _ancestors(path: str) -> List[str]:
    result = []
    current = os.path.dirname(path)
    while True:
        result.append(current)
        parent = os.path.dirname(current)
        if parent == current:
            return result
        current = parent


def open_store(db_path: Union[str, Path], busy_timeout_ms: int = BUSY_TIMEOUT_MS) -> Optional[FlagStore]:
    """Open or create a flags database; None if it is unavailable."""
    return FlagStore.open(db_path, busy_timeout_ms)


def close_store(store: Optional[FlagStore]) -> None:
    """Close a store; None and already closed stores are ignored."""
    if store is not None:
        store.close()
