"""
Key-Value Store

String-keyed, string-valued persistence used by the report service.
Callers serialize to JSON themselves; stores only move strings.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Abstract base class for key-value backends."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Load the value stored under key, or None."""
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Store value under key, replacing any existing value.

        Raises:
            StorageError: if the backend rejects the write
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete key. Missing keys are ignored."""
        pass

    @abstractmethod
    def keys(self) -> List[str]:
        """List all stored keys."""
        pass


class MemoryKeyValueStore(KeyValueStore):
    """
    In-process store.

    Used for tests and single-process development servers; contents are lost
    when the process exits.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data)
