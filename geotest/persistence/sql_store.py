"""
SQL Key-Value Store

SQLAlchemy-backed KeyValueStore: one row per key in ``kv_entries``.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base

from .session import create_session_factory, get_engine, session_scope
from .store import KeyValueStore
from ..utils.errors import StorageError

logger = logging.getLogger(__name__)

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class KVEntry(Base):
    """One stored key."""
    __tablename__ = "kv_entries"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<KVEntry {self.key}>"


class SQLKeyValueStore(KeyValueStore):
    """
    KeyValueStore persisted through SQLAlchemy.

    Usage:
        store = SQLKeyValueStore(create_db_engine("sqlite:///geotest.db"))
        store.set_item("k", "v")
    """

    def __init__(self, engine: Optional[Engine] = None, create_tables: bool = True):
        """
        Args:
            engine: Engine to use (global engine from DATABASE_URL by default)
            create_tables: Create ``kv_entries`` if missing
        """
        self.engine = engine or get_engine()
        self._session_factory = create_session_factory(self.engine)

        if create_tables:
            try:
                Base.metadata.create_all(bind=self.engine)
            except SQLAlchemyError as e:
                raise StorageError(f"Could not create kv_entries table: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        try:
            with session_scope(self._session_factory) as db:
                entry = db.get(KVEntry, key)
                return entry.value if entry else None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read '{key}': {e}") from e

    def set_item(self, key: str, value: str) -> None:
        try:
            with session_scope(self._session_factory) as db:
                entry = db.get(KVEntry, key)
                if entry is None:
                    db.add(KVEntry(key=key, value=value))
                else:
                    entry.value = value
        except SQLAlchemyError as e:
            logger.error(f"Failed to write '{key}': {e}")
            raise StorageError(f"Failed to write '{key}': {e}") from e

    def remove_item(self, key: str) -> None:
        try:
            with session_scope(self._session_factory) as db:
                db.query(KVEntry).filter(KVEntry.key == key).delete()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to delete '{key}': {e}") from e

    def keys(self) -> List[str]:
        try:
            with session_scope(self._session_factory) as db:
                return [row[0] for row in db.query(KVEntry.key).all()]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list keys: {e}") from e
