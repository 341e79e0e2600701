"""Achievements package."""

from savings_party.achievements.tracker import (
    ACHIEVEMENTS,
    Achievement,
    AchievementId,
    AchievementStatus,
    AchievementTracker,
)

__all__ = [
    "ACHIEVEMENTS",
    "Achievement",
    "AchievementId",
    "AchievementStatus",
    "AchievementTracker",
]
