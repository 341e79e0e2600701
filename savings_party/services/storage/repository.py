"""
Key-Value Backed Repositories

Serializes the account collection and the user's preferences into
a KeyValueStore using the camelCase interchange format.
"""

from typing import Optional

import structlog
from pydantic import ValidationError

from savings_party.models.savings import SavingsAccount, UserSettings
from savings_party.services.storage.interface import (
    AccountRepository,
    CorruptDataError,
    KeyValueStore,
)

logger = structlog.get_logger(__name__)


class KeyValueAccountRepository(AccountRepository):
    """Stores the whole party as a list under a single key."""

    def __init__(self, store: KeyValueStore, key: str = "pokemon-savings-accounts"):
        self._store = store
        self._key = key

    def load_accounts(self) -> list[SavingsAccount]:
        raw = self._store.get(self._key, default=[])
        if not isinstance(raw, list):
            raise CorruptDataError(
                f"Expected a list of accounts under {self._key!r}, got {type(raw).__name__}"
            )

        try:
            accounts = [SavingsAccount.model_validate(item) for item in raw]
        except ValidationError as e:
            raise CorruptDataError(f"Stored accounts failed validation: {e}")

        logger.debug("accounts_loaded", key=self._key, count=len(accounts))
        return accounts

    def save_accounts(self, accounts: list[SavingsAccount]) -> None:
        self._store.set(self._key, [account.to_storage_dict() for account in accounts])

    def clear(self) -> None:
        self._store.remove(self._key)


class KeyValueSettingsRepository:
    """Stores UserSettings under a single key."""

    def __init__(self, store: KeyValueStore, key: str = "pokemon-savings-settings"):
        self._store = store
        self._key = key

    def load(self) -> Optional[UserSettings]:
        """Stored settings, or None if nothing valid is stored."""
        raw = self._store.get(self._key)
        if raw is None:
            return None
        try:
            return UserSettings.model_validate(raw)
        except ValidationError as e:
            logger.warning("settings_invalid", key=self._key, error=str(e))
            return None

    def save(self, settings: UserSettings) -> None:
        self._store.set(self._key, settings.to_storage_dict())

    def clear(self) -> None:
        self._store.remove(self._key)
