"""
SQLite Storage Package

Public API:
- FlagStore: Main facade for storage operations
- open_store / close_store: Lifecycle helpers

Internal Modules:
- schema: Table definition, statements and schema initialization
- persistence: Connection management, statistics
- records: Flag record insert and glob query
- config: Configuration constants
"""

from cflagsdb.storage.sqlite.facade import FlagStore, close_store, open_store

__all__ = ['FlagStore', 'open_store', 'close_store']
