"""Services package."""

from savings_party.services.preferences import PreferencesService
from savings_party.services.storage import (
    AccountRepository,
    CorruptDataError,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueAccountRepository,
    KeyValueSettingsRepository,
    KeyValueStore,
    StorageError,
    StorageUnavailableError,
)

__all__ = [
    # Preferences
    "PreferencesService",
    # Storage services
    "AccountRepository",
    "CorruptDataError",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueAccountRepository",
    "KeyValueSettingsRepository",
    "KeyValueStore",
    "StorageError",
    "StorageUnavailableError",
]
