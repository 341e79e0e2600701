"""
Activity Models for Savings Party

Every significant action on the party is recorded as an activity event.
This provides:
1. A history the user can scroll through ("Charmander reached Lv. 21")
2. Debugging information when numbers look wrong
3. The feed the achievement tracker reports into

DESIGN DECISION: The activity log is append-only and capped. Old events
fall off the end; events are never edited.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from savings_party.models.savings import TransitionEvent, utcnow


class ActivityEventType(str, Enum):
    """Types of events we record."""
    # Party
    ACCOUNT_CREATED = "account_created"
    ACCOUNT_CREATE_REJECTED = "account_create_rejected"
    ACCOUNT_RELEASED = "account_released"
    BACKGROUND_CHANGED = "background_changed"

    # Entries
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    ENTRY_DELETED = "entry_deleted"

    # Milestones
    LEVEL_UP = "level_up"
    EVOLUTION = "evolution"
    ACHIEVEMENT_UNLOCKED = "achievement_unlocked"

    # Settings
    SETTINGS_UPDATED = "settings_updated"

    # System events
    STORAGE_ERROR = "storage_error"


class ActivitySeverity(str, Enum):
    """Severity level for activity events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ActivityEvent(BaseModel):
    """
    A single activity event.

    Every user-visible change to the party creates one of these.
    """

    # Identity
    event_id: str = Field(
        default_factory=lambda: str(uuid4()),
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: ActivityEventType
    severity: ActivitySeverity = ActivitySeverity.INFO

    # Context
    account_id: Optional[str] = Field(
        default=None,
        description="Account this event relates to, if any"
    )
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered directly by the user?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": self.event_id,
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "account_id": self.account_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class ActivityEventBuilder:
    """
    Helper class to build activity events with common patterns.

    Usage:
        event = ActivityEventBuilder.account_created(account_id, nickname, line)
        event = ActivityEventBuilder.level_up(transition, nickname)
    """

    @staticmethod
    def account_created(
        account_id: str,
        nickname: str,
        creature_ref: str,
        target_amount: float,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.ACCOUNT_CREATED,
            account_id=account_id,
            description=f"{nickname} joined the party",
            details={
                "creature_ref": creature_ref,
                "target_amount": target_amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def account_create_rejected(
        creature_ref: str,
        reason: str,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.ACCOUNT_CREATE_REJECTED,
            severity=ActivitySeverity.WARNING,
            description=f"Could not add {creature_ref}: {reason}",
            details={
                "creature_ref": creature_ref,
                "reason": reason,
            },
            is_user_action=True,
        )

    @staticmethod
    def account_released(
        account_id: str,
        nickname: Optional[str],
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.ACCOUNT_RELEASED,
            account_id=account_id,
            description=f"{nickname or 'A creature'} was released",
            is_user_action=True,
        )

    @staticmethod
    def background_changed(account_id: str, theme: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.BACKGROUND_CHANGED,
            account_id=account_id,
            description=f"Background changed to {theme}",
            details={"theme": theme},
            is_user_action=True,
        )

    @staticmethod
    def entry_added(
        account_id: str,
        nickname: str,
        amount: float,
        note: Optional[str],
    ) -> ActivityEvent:
        deposit = amount >= 0
        return ActivityEvent(
            event_type=(
                ActivityEventType.DEPOSIT if deposit else ActivityEventType.WITHDRAWAL
            ),
            account_id=account_id,
            description=(
                f"Saved {amount:,.2f} for {nickname}"
                if deposit
                else f"Withdrew {abs(amount):,.2f} from {nickname}"
            ),
            details={
                "amount": amount,
                "note": note,
            },
            is_user_action=True,
        )

    @staticmethod
    def entry_deleted(account_id: str, entry_id: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.ENTRY_DELETED,
            account_id=account_id,
            description="Entry removed",
            details={"entry_id": entry_id},
            is_user_action=True,
        )

    @staticmethod
    def level_up(transition: TransitionEvent, nickname: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.LEVEL_UP,
            account_id=transition.account_id,
            description=f"{nickname} grew to Lv. {transition.new_level}",
            details={
                "old_level": transition.old_level,
                "new_level": transition.new_level,
            },
        )

    @staticmethod
    def evolution(
        transition: TransitionEvent,
        nickname: str,
        new_form: Optional[str] = None,
    ) -> ActivityEvent:
        into = f" into {new_form}" if new_form else ""
        return ActivityEvent(
            event_type=ActivityEventType.EVOLUTION,
            account_id=transition.account_id,
            description=f"{nickname} evolved{into}!",
            details={
                "old_stage": transition.old_stage,
                "new_stage": transition.new_stage,
                "new_level": transition.new_level,
            },
        )

    @staticmethod
    def achievement_unlocked(achievement_id: str, name: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.ACHIEVEMENT_UNLOCKED,
            description=f"Achievement unlocked: {name}",
            details={"achievement_id": achievement_id},
        )

    @staticmethod
    def settings_updated(changes: dict[str, Any]) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.SETTINGS_UPDATED,
            description="Settings updated",
            details=changes,
            is_user_action=True,
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.STORAGE_ERROR,
            severity=ActivitySeverity.ERROR,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={"operation": operation},
        )
