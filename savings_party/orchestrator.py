"""
Main Orchestrator for Savings Party

This module ties together all the components and is the single caller
of the mutation engine used by the UI:
1. Party changes (create / release / background)
2. Entries (deposit / withdraw / delete)
3. Preferences

DESIGN DECISION: The engine only returns results. This flow is the event
sink: it forwards those results to the activity log and the achievement
tracker, then hands the engine's result back unchanged. The engine never
knows either of them exists.
"""

from typing import Any, Optional

import structlog

from savings_party.accounts import AccountEngine
from savings_party.achievements import AchievementId, AchievementTracker
from savings_party.activity import ActivityLogger, configure_logging
from savings_party.catalog import CreatureCatalogInterface, StarterCatalog
from savings_party.config import Settings, get_settings
from savings_party.models.savings import (
    BackgroundConfig,
    SavingsAccount,
    TransitionEvent,
    UserSettings,
)
from savings_party.services import PreferencesService
from savings_party.services.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueAccountRepository,
    KeyValueSettingsRepository,
    KeyValueStore,
    StorageError,
)

logger = structlog.get_logger(__name__)


class SavingsTrackerFlow:
    """
    Orchestrates every user action on the party.

    Flow for a deposit:
    1. Engine records the entry → maybe a TransitionEvent
    2. Activity log gets the entry (and the level-up / evolution)
    3. Achievement tracker re-checks the party
    4. The TransitionEvent goes back to the UI for the overlay

    Achievements unlocked along the way are queued; the UI drains them
    with pop_unlocked().
    """

    def __init__(
        self,
        engine: AccountEngine,
        preferences: Optional[PreferencesService] = None,
        activity_logger: Optional[ActivityLogger] = None,
        achievements: Optional[AchievementTracker] = None,
        catalog: Optional[CreatureCatalogInterface] = None,
    ):
        self.engine = engine
        self.preferences = preferences or PreferencesService()
        self.activity = activity_logger or ActivityLogger()
        self.achievements = achievements or AchievementTracker(
            max_accounts=engine.max_accounts,
            activity_logger=self.activity,
        )
        self.catalog = catalog or StarterCatalog()
        self._pending_unlocks: list[AchievementId] = []

    # ==================== PARTY ====================

    def create_account(
        self,
        creature_ref: str,
        nickname: str,
        target_amount: float,
    ) -> Optional[SavingsAccount]:
        """Add a creature to the party. None if full or unknown creature."""
        account = self.engine.create_account(creature_ref, nickname, target_amount)

        if account is None:
            if self.catalog.resolve(creature_ref) is None:
                reason = "unknown creature"
            elif not self.engine.can_add_account():
                reason = "party is full"
            else:
                reason = "invalid goal amount"
            self.activity.log_account_create_rejected(creature_ref, reason)
            return None

        self.activity.log_account_created(
            account_id=account.id,
            nickname=account.nickname,
            creature_ref=account.creature_ref,
            target_amount=account.target_amount,
        )
        self._after_mutation()
        return account

    def delete_account(self, account_id: str) -> bool:
        """Release a creature and everything saved with it."""
        account = self.engine.get_account(account_id)
        deleted = self.engine.delete_account(account_id)
        if deleted:
            self.activity.log_account_released(
                account_id, account.nickname if account else None
            )
            self._after_mutation()
        return deleted

    def update_background(self, account_id: str, theme: Optional[str]) -> bool:
        background = BackgroundConfig(theme=theme) if theme and theme != "default" else None
        updated = self.engine.update_account_background(account_id, background)
        if updated:
            self.activity.log_background_changed(account_id, theme or "default")
            self._check_storage()
        return updated

    # ==================== ENTRIES ====================

    def add_entry(
        self,
        account_id: str,
        amount: float,
        note: Optional[str] = None,
    ) -> Optional[TransitionEvent]:
        """Deposit or withdraw; returns the engine's transition, if any."""
        account = self.engine.get_account(account_id)
        transition = self.engine.add_entry(account_id, amount, note)
        after = self.engine.get_account(account_id)
        if account is None or after is None or len(after.entries) == len(account.entries):
            return transition

        self.activity.log_entry_added(
            account_id=account_id,
            nickname=account.nickname,
            amount=amount,
            note=note,
        )
        if transition is not None:
            self.activity.log_transition(
                transition,
                nickname=account.nickname,
                new_form=self._form_name(account.creature_ref, transition.new_stage),
            )
        self._after_mutation()
        return transition

    def delete_entry(self, account_id: str, entry_id: str) -> bool:
        deleted = self.engine.delete_entry(account_id, entry_id)
        if deleted:
            self.activity.log_entry_deleted(account_id, entry_id)
            self._check_storage()
        return deleted

    # ==================== PREFERENCES ====================

    def update_settings(self, **changes: Any) -> UserSettings:
        settings = self.preferences.update(**changes)
        self.activity.log_settings_updated({"fields": sorted(changes)})
        return settings

    def reset_settings(self) -> UserSettings:
        settings = self.preferences.reset()
        self.activity.log_settings_updated({"reset": True})
        return settings

    # ==================== ACHIEVEMENTS ====================

    def pop_unlocked(self) -> list[AchievementId]:
        """Achievements unlocked since the last call."""
        unlocked, self._pending_unlocks = self._pending_unlocks, []
        return unlocked

    # ==================== INTERNALS ====================

    def _after_mutation(self) -> None:
        self._check_storage()
        unlocked = self.achievements.check_and_unlock(self.engine.accounts_with_stats())
        self._pending_unlocks.extend(unlocked)

    def _check_storage(self) -> None:
        if self.engine.last_storage_error:
            self.activity.log_storage_error("save_accounts", self.engine.last_storage_error)

    def _form_name(self, creature_ref: str, stage: int) -> Optional[str]:
        line = self.catalog.resolve(creature_ref)
        return line.stage(stage).name if line else None


def create_store(settings: Settings) -> KeyValueStore:
    """Build the configured key-value store."""
    storage = settings.storage
    if storage.backend == "memory":
        return InMemoryKeyValueStore()
    return JsonFileKeyValueStore(storage.data_dir, write_retries=storage.write_retries)


def create_app_components(
    use_storage: bool = True,
    settings: Optional[Settings] = None,
) -> SavingsTrackerFlow:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to use the configured storage backend.
                    Set to False for a throwaway in-memory party.
        settings: Settings to use; defaults to get_settings().

    Returns:
        The wired SavingsTrackerFlow
    """
    settings = settings or get_settings()
    configure_logging(settings.logging)
    app = settings.app
    storage = settings.storage

    store: KeyValueStore = InMemoryKeyValueStore()
    if use_storage:
        store = create_store(settings)

    catalog = StarterCatalog()
    try:
        engine = AccountEngine(
            repository=KeyValueAccountRepository(store, storage.accounts_key),
            catalog=catalog,
            max_accounts=app.max_accounts,
        )
    except StorageError as e:
        # Stored party unreadable - continue in memory without touching it
        logger.error("party_load_failed", error=str(e))
        store = InMemoryKeyValueStore()
        engine = AccountEngine(
            repository=KeyValueAccountRepository(store, storage.accounts_key),
            catalog=catalog,
            max_accounts=app.max_accounts,
        )

    activity = ActivityLogger(
        store=store,
        key=storage.activity_key,
        max_entries=app.max_activity_entries,
    )
    achievements = AchievementTracker(
        store=store,
        key=storage.achievements_key,
        max_accounts=app.max_accounts,
        big_saver_threshold=app.big_saver_threshold,
        activity_logger=activity,
    )
    preferences = PreferencesService(KeyValueSettingsRepository(store, storage.settings_key))

    return SavingsTrackerFlow(
        engine=engine,
        preferences=preferences,
        activity_logger=activity,
        achievements=achievements,
        catalog=catalog,
    )
