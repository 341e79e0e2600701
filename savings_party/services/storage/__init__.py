"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
The party is kept in JSON files by default, but the backend is swappable.
"""

from savings_party.services.storage.interface import (
    AccountRepository,
    CorruptDataError,
    KeyValueStore,
    StorageError,
    StorageUnavailableError,
)
from savings_party.services.storage.json_file import JsonFileKeyValueStore
from savings_party.services.storage.memory import InMemoryKeyValueStore
from savings_party.services.storage.repository import (
    KeyValueAccountRepository,
    KeyValueSettingsRepository,
)

__all__ = [
    # Interfaces
    "AccountRepository",
    "KeyValueStore",
    # Exceptions
    "CorruptDataError",
    "StorageError",
    "StorageUnavailableError",
    # Implementations
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueAccountRepository",
    "KeyValueSettingsRepository",
]
