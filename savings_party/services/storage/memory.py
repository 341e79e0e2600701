"""In-memory key-value store, for tests and throwaway sessions."""

import copy
import threading
from typing import Any, Optional

from savings_party.services.storage.interface import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """
    Dict-backed store.

    Values are deep-copied in and out so callers never share state with
    the store, matching the behaviour of a serializing backend.
    """

    def __init__(self, initial: Optional[dict[str, Any]] = None):
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}
        self._lock = threading.Lock()

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        with self._lock:
            if key not in self._data:
                return default
            return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = copy.deepcopy(value)

    def remove(self, key: str) -> bool:
        with self._lock:
            if key not in self._data:
                return False
            del self._data[key]
            return True

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._data)
