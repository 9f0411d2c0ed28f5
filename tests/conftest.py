"""
Pytest configuration for the cflagsdb test suite.

This conftest.py provides:
- Machine-mode logging (suppresses console output)
- A fixture capturing warnings emitted through loguru
- Flags store fixtures backed by temporary databases
"""

import os

import pytest
from loguru import logger

from cflagsdb.logging_config import reset_logging, setup_logging
from cflagsdb.storage import open_store


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

def pytest_configure(config):
    os.environ.setdefault("CFLAGSDB_MACHINE_MODE", "1")


# ============================================================================
# LOGGING FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def setup_test_logging():
    """
    Machine mode by default - suppress console logs for clean test output.
    """
    reset_logging()
    setup_logging(level="DEBUG", suppress_console=True, enable_file_logging=False)


@pytest.fixture
def warnings_log():
    """
    Collects the messages of every WARNING (and above) logged during a test.

    Usage:
        def test_something(warnings_log):
            do_something_that_warns()
            assert len(warnings_log) == 1
    """
    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="WARNING")
    yield messages
    logger.remove(handler_id)


# ============================================================================
# STORE FIXTURES
# ============================================================================

@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "cflags.db"


@pytest.fixture
def store(db_path):
    """
    An open FlagStore on a fresh database file.
    """
    flag_store = open_store(db_path)
    assert flag_store is not None
    yield flag_store
    flag_store.close()


def _collect(flag_store, pattern):
    records = []

    def visit(record):
        records.append(record)
        return True

    ok = flag_store.query(pattern, visit)
    return ok, records


@pytest.fixture
def collect():
    """
    Runs a query that keeps every record and returns (success, records).
    """
    return _collect
