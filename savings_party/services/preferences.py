"""
User Preferences Service

Reads and writes the user's display preferences (currency, sound).
Unknown or invalid stored preferences fall back to the defaults.
"""

from typing import Any, Optional

import structlog

from savings_party.models.savings import UserSettings, find_currency
from savings_party.services.storage import (
    InMemoryKeyValueStore,
    KeyValueSettingsRepository,
    StorageError,
)

logger = structlog.get_logger(__name__)


class PreferencesService:
    """Holds the current UserSettings and persists every change."""

    def __init__(self, repository: Optional[KeyValueSettingsRepository] = None):
        self._repository = repository or KeyValueSettingsRepository(InMemoryKeyValueStore())
        try:
            stored = self._repository.load()
        except StorageError as e:
            logger.error("settings_load_failed", error=str(e))
            stored = None
        self._settings = stored or UserSettings()

    def get(self) -> UserSettings:
        return self._settings.model_copy(deep=True)

    def update(self, **changes: Any) -> UserSettings:
        """
        Apply partial changes, e.g. update(sound_volume=40).

        Raises:
            ValueError: If the result is not a valid UserSettings
                (pydantic.ValidationError is a ValueError)
        """
        merged = {**self._settings.model_dump(), **changes}
        self._settings = UserSettings.model_validate(merged)
        self._save()
        return self.get()

    def set_currency(self, code: str) -> bool:
        """Switch to a built-in currency. Returns False for unknown codes."""
        currency = find_currency(code)
        if currency is None:
            return False
        self.update(currency=currency)
        return True

    def reset(self) -> UserSettings:
        self._settings = UserSettings()
        self._save()
        return self.get()

    def _save(self) -> None:
        try:
            self._repository.save(self._settings)
        except StorageError as e:
            logger.error("settings_save_failed", error=str(e))

