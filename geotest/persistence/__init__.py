"""
Persistence Layer

Key-value storage for shareable reports and their analytics log.

Backends:
- MemoryKeyValueStore: in-process (tests, development)
- SQLKeyValueStore: SQLAlchemy table ``kv_entries`` (PostgreSQL or SQLite)
"""

from .store import KeyValueStore, MemoryKeyValueStore
from .session import (
    get_database_url,
    create_db_engine,
    get_engine,
    create_session_factory,
    session_scope,
)
from .sql_store import Base, KVEntry, SQLKeyValueStore

__all__ = [
    "KeyValueStore",
    "MemoryKeyValueStore",
    "get_database_url",
    "create_db_engine",
    "get_engine",
    "create_session_factory",
    "session_scope",
    "Base",
    "KVEntry",
    "SQLKeyValueStore",
]
