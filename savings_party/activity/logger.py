"""
Activity Logger

DESIGN DECISION: Every significant action on the party is recorded.
This provides:
1. The "recent activity" feed shown on the dashboard
2. Debugging capability ("why is my level lower than yesterday?")
3. A single place the achievement tracker reports into

The activity logger:
- Always logs locally through structlog
- Keeps a capped, newest-first list in the key-value store when one is configured
- Gracefully handles storage failures (a broken log never breaks a deposit)
"""

import logging
from typing import Optional

import structlog
from pydantic import ValidationError

from savings_party.config import LoggingSettings
from savings_party.models.activity import ActivityEvent, ActivityEventBuilder
from savings_party.models.savings import TransitionEvent
from savings_party.services.storage import KeyValueStore, StorageError

DEFAULT_MAX_ENTRIES = 50


def configure_logging(settings: Optional[LoggingSettings] = None) -> None:
    """Configure structlog (and the stdlib root logger it writes through)."""
    settings = settings or LoggingSettings()
    logging.basicConfig(format="%(message)s", level=settings.level)

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.json_output
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class ActivityLogger:
    """
    Central activity logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. The key-value store (for the in-app activity feed)
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        key: str = "pokemon-savings-activity",
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ):
        """
        Initialize activity logger.

        Args:
            store: Storage backend for the feed.
                   If None, only logs locally.
            key: Storage key for the feed.
            max_entries: Newest entries kept in the feed.
        """
        self._store = store
        self._key = key
        self._max_entries = max_entries
        self._logger = structlog.get_logger(__name__)

    def log(self, event: ActivityEvent) -> bool:
        """
        Log an activity event.

        Always logs locally. Persists to storage if available.

        Returns True if the storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value == "error":
            self._logger.error("activity_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("activity_event", **log_dict)
        else:
            self._logger.info("activity_event", **log_dict)

        if self._store is None:
            return True

        try:
            feed = self._store.get(self._key, default=[])
            if not isinstance(feed, list):
                feed = []
            feed.insert(0, event.model_dump(mode="json"))
            self._store.set(self._key, feed[: self._max_entries])
            return True
        except StorageError as e:
            # Log failure but don't raise
            self._logger.error(
                "activity_storage_failed",
                error=str(e),
                event_id=event.event_id,
            )
            return False

    def recent(self, limit: Optional[int] = None) -> list[ActivityEvent]:
        """Stored events, newest first. Unreadable entries are skipped."""
        if self._store is None:
            return []

        try:
            feed = self._store.get(self._key, default=[])
        except StorageError as e:
            self._logger.error("activity_read_failed", error=str(e))
            return []

        events = []
        for item in feed if isinstance(feed, list) else []:
            try:
                events.append(ActivityEvent.model_validate(item))
            except ValidationError:
                self._logger.warning("activity_entry_skipped")
        return events[:limit] if limit is not None else events

    def clear(self) -> None:
        if self._store is None:
            return
        try:
            self._store.remove(self._key)
        except StorageError as e:
            self._logger.error("activity_clear_failed", error=str(e))

    def log_account_created(
        self,
        account_id: str,
        nickname: str,
        creature_ref: str,
        target_amount: float,
    ) -> None:
        """Log a new party member."""
        self.log(ActivityEventBuilder.account_created(
            account_id=account_id,
            nickname=nickname,
            creature_ref=creature_ref,
            target_amount=target_amount,
        ))

    def log_account_create_rejected(self, creature_ref: str, reason: str) -> None:
        self.log(ActivityEventBuilder.account_create_rejected(creature_ref, reason))

    def log_account_released(self, account_id: str, nickname: Optional[str]) -> None:
        self.log(ActivityEventBuilder.account_released(account_id, nickname))

    def log_background_changed(self, account_id: str, theme: str) -> None:
        self.log(ActivityEventBuilder.background_changed(account_id, theme))

    def log_entry_added(
        self,
        account_id: str,
        nickname: str,
        amount: float,
        note: Optional[str],
    ) -> None:
        """Log a deposit or withdrawal."""
        self.log(ActivityEventBuilder.entry_added(
            account_id=account_id,
            nickname=nickname,
            amount=amount,
            note=note,
        ))

    def log_entry_deleted(self, account_id: str, entry_id: str) -> None:
        self.log(ActivityEventBuilder.entry_deleted(account_id, entry_id))

    def log_transition(
        self,
        transition: TransitionEvent,
        nickname: str,
        new_form: Optional[str] = None,
    ) -> None:
        """Log a level-up, and the evolution too if one happened."""
        if transition.new_level > transition.old_level:
            self.log(ActivityEventBuilder.level_up(transition, nickname))
        if transition.evolved:
            self.log(ActivityEventBuilder.evolution(transition, nickname, new_form))

    def log_achievement_unlocked(self, achievement_id: str, name: str) -> None:
        self.log(ActivityEventBuilder.achievement_unlocked(achievement_id, name))

    def log_settings_updated(self, changes: dict) -> None:
        self.log(ActivityEventBuilder.settings_updated(changes))

    def log_storage_error(self, operation: str, error_message: str) -> None:
        """Log a storage failure reported by another component."""
        self.log(ActivityEventBuilder.storage_error(operation, error_message))
