"""
cflagsdb - Per-file compiler flags database

Records the flags each source file was compiled with and answers
directory-glob lookups over them.
"""

__version__ = "0.1.0"

from cflagsdb.paths import glob_escape, resolve_path
from cflagsdb.schemas import Record, StoreStats
from cflagsdb.storage import FlagStore, close_store, open_store

__all__ = [
    "__version__",
    "FlagStore",
    "open_store",
    "close_store",
    "Record",
    "StoreStats",
    "resolve_path",
    "glob_escape",
]
