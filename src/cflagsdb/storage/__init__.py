"""
Storage layer for cflagsdb.

SQLite-backed persistence of per-file compiler flags.
"""

from .sqlite import FlagStore, close_store, open_store

__all__ = [
    "FlagStore",
    "open_store",
    "close_store",
]
