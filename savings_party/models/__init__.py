"""
Data Models Package

This package contains all Pydantic models used by Savings Party.
Everything persisted or handed to the UI conforms to these schemas.
"""

from savings_party.models.savings import (
    CURRENCIES,
    BackgroundConfig,
    CurrencyOption,
    ProgressStats,
    SavingsAccount,
    SavingsEntry,
    TransitionEvent,
    UserSettings,
    find_currency,
)
from savings_party.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
)

__all__ = [
    # Savings models
    "CURRENCIES",
    "BackgroundConfig",
    "CurrencyOption",
    "ProgressStats",
    "SavingsAccount",
    "SavingsEntry",
    "TransitionEvent",
    "UserSettings",
    "find_currency",
    # Activity models
    "ActivityEvent",
    "ActivityEventBuilder",
    "ActivityEventType",
    "ActivitySeverity",
]
