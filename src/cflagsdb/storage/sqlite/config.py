"""
SQLite Storage Configuration

Centralized configuration for the flags storage subsystem.
"""

TABLE_NAME = "cflags"

# Lock wait before a write against a busy database fails
BUSY_TIMEOUT_MS = 1000

# Flag tokens are stored as one string
FLAG_SEPARATOR = " "

# A failed row write stops the rest of the batch; bind failures only skip the row
ABORT_BATCH_ON_STEP_FAILURE = True
