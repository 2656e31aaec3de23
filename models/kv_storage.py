"""
Key-value storage used by the identity store and the refresh token registry.

KeyValueStorage is the injectable interface: any backend (Redis, a SQL
table, ...) can sit behind it as long as each primitive is atomic on its
own. MemoryStorage is the in-process backend used in development and tests.
"""
from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple


class KeyValueStorage(ABC):

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Fetch one value by key, None if absent"""

    @abstractmethod
    def set_if_absent(self, key: str, value: Any) -> bool:
        """Insert only when key is free. Returns False if it was taken."""

    @abstractmethod
    def delete(self, key: str) -> Optional[Any]:
        """Remove key and return the old value, None if it was absent"""

    @abstractmethod
    def replace(self, old_key: str, new_key: str, value: Any) -> bool:
        """
        Atomically remove old_key and store value under new_key.
        Returns False (and changes nothing) when old_key is absent.
        Raises KeyError (and changes nothing) when new_key is taken.
        """

    @abstractmethod
    def items(self) -> List[Tuple[str, Any]]:
        """Snapshot of all (key, value) pairs"""

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self.items())


class MemoryStorage(KeyValueStorage):
    """Dict-backed storage; every primitive is one critical section."""

    def __init__(self):
        self._lock = threading.RLock()
        self.__objects: Dict[str, Any] = {}

    def get(self, key):
        with self._lock:
            return self.__objects.get(key)

    def set_if_absent(self, key, value):
        with self._lock:
            if key in self.__objects:
                return False
            self.__objects[key] = value
            return True

    def delete(self, key):
        with self._lock:
            return self.__objects.pop(key, None)

    def replace(self, old_key, new_key, value):
        with self._lock:
            if old_key not in self.__objects:
                return False
            if new_key != old_key and new_key in self.__objects:
                raise KeyError(new_key)
            del self.__objects[old_key]
            self.__objects[new_key] = value
            return True

    def items(self):
        with self._lock:
            return list(self.__objects.items())

    def __contains__(self, key):
        with self._lock:
            return key in self.__objects

    def __len__(self):
        with self._lock:
            return len(self.__objects)
