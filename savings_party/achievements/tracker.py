"""
Achievement Tracker

Watches the party and unlocks achievements when their conditions hold.
It only observes: accounts and stats come in, unlock records go out.

Unlocks are permanent. Withdrawing below a milestone later does not take
an achievement away.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

import structlog
from pydantic import BaseModel, Field

from savings_party.accounts.engine import PartyMember
from savings_party.activity import ActivityLogger
from savings_party.models.savings import utcnow
from savings_party.services.storage import KeyValueStore, StorageError

logger = structlog.get_logger(__name__)


class AchievementId(str, Enum):
    FIRST_STEPS = "first_steps"
    FIRST_EVOLUTION = "first_evolution"
    FULL_PARTY = "full_party"
    LEVEL_50 = "level_50"
    MASTER_TRAINER = "master_trainer"
    FINAL_FORM = "final_form"
    GOAL_CRUSHER = "goal_crusher"
    BIG_SAVER = "big_saver"
    DEDICATED = "dedicated"
    COLLECTOR = "collector"


class Achievement(BaseModel):
    id: AchievementId
    name: str
    description: str
    icon: str


ACHIEVEMENTS: list[Achievement] = [
    Achievement(id=AchievementId.FIRST_STEPS, name="First Steps",
                description="Start your first savings goal", icon="🥚"),
    Achievement(id=AchievementId.FIRST_EVOLUTION, name="First Evolution",
                description="Evolve a creature for the first time", icon="✨"),
    Achievement(id=AchievementId.FULL_PARTY, name="Full Party",
                description="Fill every slot in your party", icon="🎒"),
    Achievement(id=AchievementId.LEVEL_50, name="Halfway Hero",
                description="Reach level 50 with any creature", icon="⭐"),
    Achievement(id=AchievementId.MASTER_TRAINER, name="Master Trainer",
                description="Reach level 100 with any creature", icon="🏆"),
    Achievement(id=AchievementId.FINAL_FORM, name="Final Form",
                description="Fully evolve a creature", icon="🐉"),
    Achievement(id=AchievementId.GOAL_CRUSHER, name="Goal Crusher",
                description="Reach 100% of a savings goal", icon="🎯"),
    Achievement(id=AchievementId.BIG_SAVER, name="Big Saver",
                description="Save a large total across all goals", icon="💰"),
    Achievement(id=AchievementId.DEDICATED, name="Dedicated",
                description="Make 10 deposits", icon="📅"),
    Achievement(id=AchievementId.COLLECTOR, name="Collector",
                description="Fully evolve 3 creatures", icon="📚"),
]

DEDICATED_DEPOSITS = 10
COLLECTOR_COUNT = 3


class AchievementStatus(BaseModel):
    """An achievement with its unlock state and numeric progress."""

    achievement: Achievement
    is_unlocked: bool
    unlocked_at: Optional[datetime] = None
    progress: Optional[tuple[float, float]] = Field(
        default=None,
        description="(current, target) for achievements with a count",
    )


class AchievementTracker:
    """
    Checks achievement conditions against the party and records unlocks.

    Unlock records are kept in memory and, if a store is given, persisted
    under a single key as {achievement_id: {"unlockedAt": iso-timestamp}}.
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        key: str = "pokemon-savings-achievements",
        max_accounts: int = 6,
        big_saver_threshold: float = 1000.0,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self._store = store
        self._key = key
        self._max_accounts = max_accounts
        self._big_saver_threshold = big_saver_threshold
        self._activity_logger = activity_logger
        self._unlocked: dict[str, datetime] = self._load()

    # ==================== CONDITIONS ====================

    def is_met(self, achievement_id: AchievementId, members: list[PartyMember]) -> bool:
        """Does the party currently satisfy this achievement?"""
        stats = [m.stats for m in members]

        if achievement_id == AchievementId.FIRST_STEPS:
            return len(members) >= 1
        if achievement_id == AchievementId.FIRST_EVOLUTION:
            return any(s.evolution_stage >= 1 for s in stats)
        if achievement_id == AchievementId.FULL_PARTY:
            return len(members) >= self._max_accounts
        if achievement_id == AchievementId.LEVEL_50:
            return any(s.level >= 50 for s in stats)
        if achievement_id == AchievementId.MASTER_TRAINER:
            return any(s.level >= 100 for s in stats)
        if achievement_id == AchievementId.FINAL_FORM:
            return any(s.evolution_stage >= 2 for s in stats)
        if achievement_id == AchievementId.GOAL_CRUSHER:
            return any(s.progress_percentage >= 100 for s in stats)
        if achievement_id == AchievementId.BIG_SAVER:
            return _party_total(members) >= self._big_saver_threshold
        if achievement_id == AchievementId.DEDICATED:
            return _deposit_count(members) >= DEDICATED_DEPOSITS
        if achievement_id == AchievementId.COLLECTOR:
            return _fully_evolved(members) >= COLLECTOR_COUNT
        return False

    def progress(
        self,
        achievement_id: AchievementId,
        members: list[PartyMember],
    ) -> Optional[tuple[float, float]]:
        """(current, target) for counted achievements, None for yes/no ones."""
        max_level = max((m.stats.level for m in members), default=0)

        if achievement_id == AchievementId.FULL_PARTY:
            return len(members), self._max_accounts
        if achievement_id == AchievementId.LEVEL_50:
            return min(max_level, 50), 50
        if achievement_id == AchievementId.MASTER_TRAINER:
            return max_level, 100
        if achievement_id == AchievementId.BIG_SAVER:
            threshold = self._big_saver_threshold
            return min(_party_total(members), threshold), threshold
        if achievement_id == AchievementId.DEDICATED:
            return min(_deposit_count(members), DEDICATED_DEPOSITS), DEDICATED_DEPOSITS
        if achievement_id == AchievementId.COLLECTOR:
            return min(_fully_evolved(members), COLLECTOR_COUNT), COLLECTOR_COUNT
        return None

    # ==================== UNLOCKING ====================

    def unlock(self, achievement_id: AchievementId) -> bool:
        """Record an unlock. Returns False if it was already unlocked."""
        key = AchievementId(achievement_id).value
        if key in self._unlocked:
            return False

        self._unlocked[key] = utcnow()
        self._save()

        achievement = _definition(AchievementId(key))
        logger.info("achievement_unlocked", achievement_id=key)
        if self._activity_logger:
            self._activity_logger.log_achievement_unlocked(key, achievement.name)
        return True

    def check_and_unlock(self, members: list[PartyMember]) -> list[AchievementId]:
        """Unlock everything whose condition now holds; return the new unlocks."""
        newly_unlocked = []
        for achievement in ACHIEVEMENTS:
            if achievement.id.value in self._unlocked:
                continue
            if self.is_met(achievement.id, members) and self.unlock(achievement.id):
                newly_unlocked.append(achievement.id)
        return newly_unlocked

    # ==================== VIEWS ====================

    def is_unlocked(self, achievement_id: AchievementId) -> bool:
        return AchievementId(achievement_id).value in self._unlocked

    def statuses(self, members: list[PartyMember]) -> list[AchievementStatus]:
        return [
            AchievementStatus(
                achievement=achievement,
                is_unlocked=achievement.id.value in self._unlocked,
                unlocked_at=self._unlocked.get(achievement.id.value),
                progress=self.progress(achievement.id, members),
            )
            for achievement in ACHIEVEMENTS
        ]

    def unlocked_count(self) -> int:
        return len(self._unlocked)

    def completion_percentage(self) -> float:
        return self.unlocked_count() / len(ACHIEVEMENTS) * 100

    def recently_unlocked(self, limit: int = 3) -> list[Achievement]:
        newest = sorted(self._unlocked.items(), key=lambda item: item[1], reverse=True)
        return [_definition(AchievementId(key)) for key, _ in newest[:limit]]

    # ==================== PERSISTENCE ====================

    def _load(self) -> dict[str, datetime]:
        if self._store is None:
            return {}
        try:
            raw = self._store.get(self._key, default={})
        except StorageError as e:
            logger.error("achievements_load_failed", error=str(e))
            return {}

        unlocked = {}
        known = {a.id.value for a in ACHIEVEMENTS}
        for key, record in (raw if isinstance(raw, dict) else {}).items():
            if key not in known or not isinstance(record, dict):
                continue
            try:
                unlocked[key] = datetime.fromisoformat(record["unlockedAt"])
            except (KeyError, TypeError, ValueError):
                logger.warning("achievement_record_skipped", achievement_id=key)
        return unlocked

    def _save(self) -> None:
        if self._store is None:
            return
        payload = {
            key: {"unlockedAt": unlocked_at.isoformat()}
            for key, unlocked_at in self._unlocked.items()
        }
        try:
            self._store.set(self._key, payload)
        except StorageError as e:
            logger.error("achievements_save_failed", error=str(e))


def _definition(achievement_id: AchievementId) -> Achievement:
    for achievement in ACHIEVEMENTS:
        if achievement.id == achievement_id:
            return achievement
    raise KeyError(achievement_id)


def _party_total(members: list[PartyMember]) -> float:
    return sum((m.stats.total_saved for m in members), 0.0)


def _deposit_count(members: list[PartyMember]) -> int:
    return sum(m.account.deposit_count for m in members)


def _fully_evolved(members: list[PartyMember]) -> int:
    return sum(1 for m in members if m.stats.evolution_stage >= 2)
