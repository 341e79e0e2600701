"""
Abstract Storage Interface

DESIGN DECISION: We define abstract interfaces for storage operations.
This allows us to:
1. Keep the party in JSON files today and somewhere else later
2. Use in-memory storage for testing
3. Keep the mutation engine free of any storage details

Two layers:
- KeyValueStore: get/set/remove of JSON-compatible blobs
- AccountRepository: load/save of the whole account collection
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from savings_party.models.savings import SavingsAccount


class KeyValueStore(ABC):
    """
    Abstract key-value store.

    Values are JSON-compatible structures (dicts, lists, scalars).
    """

    @abstractmethod
    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """
        Read a value.

        Args:
            key: Storage key
            default: Returned when the key is absent

        Raises:
            CorruptDataError: If the stored value cannot be decoded
        """
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """
        Write a value, replacing any previous one.

        Raises:
            StorageUnavailableError: If the write fails
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> bool:
        """
        Delete a key.

        Returns:
            True if the key existed
        """
        pass


class AccountRepository(ABC):
    """
    Abstract repository for the account collection.

    The mutation engine loads the collection once and saves the whole
    collection after every change.
    """

    @abstractmethod
    def load_accounts(self) -> list[SavingsAccount]:
        """
        Load all accounts in insertion order.

        Returns:
            The stored accounts, or an empty list if nothing is stored
        """
        pass

    @abstractmethod
    def save_accounts(self, accounts: list[SavingsAccount]) -> None:
        """
        Replace the stored collection.

        Raises:
            StorageError: If the save fails
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove the stored collection entirely."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptDataError(StorageError):
    """Stored data could not be decoded or validated."""
    pass


class StorageUnavailableError(StorageError):
    """Storage backend could not be read or written."""
    pass
