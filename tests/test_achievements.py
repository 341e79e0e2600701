"""Tests for the achievement tracker."""

import pytest

from savings_party.accounts import AccountEngine
from savings_party.achievements import ACHIEVEMENTS, AchievementId, AchievementTracker
from savings_party.activity import ActivityLogger
from savings_party.models.activity import ActivityEventType
from savings_party.services.storage import InMemoryKeyValueStore


@pytest.fixture
def engine():
    return AccountEngine()


class TestConditions:
    """Tests for individual achievement conditions."""

    def test_nothing_for_empty_party(self, engine):
        """Test an empty party unlocks nothing."""
        tracker = AchievementTracker()
        assert tracker.check_and_unlock(engine.accounts_with_stats()) == []

    def test_first_steps(self, engine):
        """Test creating an account unlocks first_steps."""
        engine.create_account("charmander-line", "C", 1000)
        tracker = AchievementTracker()
        assert tracker.check_and_unlock(engine.accounts_with_stats()) == [AchievementId.FIRST_STEPS]

    def test_evolution_milestones(self, engine):
        """Test a full deposit unlocks every level and stage milestone."""
        account = engine.create_account("charmander-line", "C", 100)
        engine.add_entry(account.id, 100)
        tracker = AchievementTracker(big_saver_threshold=1000)
        unlocked = set(tracker.check_and_unlock(engine.accounts_with_stats()))
        assert unlocked == {
            AchievementId.FIRST_STEPS,
            AchievementId.FIRST_EVOLUTION,
            AchievementId.LEVEL_50,
            AchievementId.MASTER_TRAINER,
            AchievementId.FINAL_FORM,
            AchievementId.GOAL_CRUSHER,
        }

    def test_full_party(self):
        """Test filling every slot unlocks full_party."""
        engine = AccountEngine(max_accounts=2)
        engine.create_account("bulbasaur-line", "", 100)
        engine.create_account("squirtle-line", "", 100)
        tracker = AchievementTracker(max_accounts=2)
        assert tracker.is_met(AchievementId.FULL_PARTY, engine.accounts_with_stats())

    def test_big_saver(self, engine):
        """Test the party-wide total threshold."""
        account = engine.create_account("charmander-line", "C", 5000)
        engine.add_entry(account.id, 600)
        tracker = AchievementTracker(big_saver_threshold=1000)
        assert not tracker.is_met(AchievementId.BIG_SAVER, engine.accounts_with_stats())
        engine.add_entry(account.id, 400)
        assert tracker.is_met(AchievementId.BIG_SAVER, engine.accounts_with_stats())

    def test_dedicated_counts_deposits_only(self, engine):
        """Test withdrawals do not count towards dedicated."""
        account = engine.create_account("charmander-line", "C", 10000)
        for _ in range(9):
            engine.add_entry(account.id, 1)
        engine.add_entry(account.id, -1)
        tracker = AchievementTracker()
        members = engine.accounts_with_stats()
        assert not tracker.is_met(AchievementId.DEDICATED, members)
        assert tracker.progress(AchievementId.DEDICATED, members) == (9, 10)
        engine.add_entry(account.id, 1)
        assert tracker.is_met(AchievementId.DEDICATED, engine.accounts_with_stats())

    def test_collector(self, engine):
        """Test three fully evolved creatures unlock collector."""
        for ref in ("bulbasaur-line", "charmander-line", "squirtle-line"):
            account = engine.create_account(ref, "", 10)
            engine.add_entry(account.id, 10)
        tracker = AchievementTracker()
        assert tracker.is_met(AchievementId.COLLECTOR, engine.accounts_with_stats())


class TestUnlocking:
    """Tests for unlock records."""

    def test_unlock_once(self):
        """Test an achievement unlocks only once."""
        tracker = AchievementTracker()
        assert tracker.unlock(AchievementId.FIRST_STEPS) is True
        assert tracker.unlock(AchievementId.FIRST_STEPS) is False
        assert tracker.unlocked_count() == 1

    def test_unlocks_are_permanent(self, engine):
        """Test withdrawing does not revoke an achievement."""
        account = engine.create_account("charmander-line", "C", 100)
        engine.add_entry(account.id, 100)
        tracker = AchievementTracker()
        tracker.check_and_unlock(engine.accounts_with_stats())
        engine.add_entry(account.id, -100)
        assert tracker.check_and_unlock(engine.accounts_with_stats()) == []
        assert tracker.is_unlocked(AchievementId.MASTER_TRAINER)

    def test_persisted(self):
        """Test unlocks are stored and reloaded."""
        store = InMemoryKeyValueStore()
        AchievementTracker(store=store, key="ach").unlock(AchievementId.DEDICATED)
        assert "unlockedAt" in store.get("ach")["dedicated"]
        assert AchievementTracker(store=store, key="ach").is_unlocked(AchievementId.DEDICATED)

    def test_bad_records_ignored(self):
        """Test unknown or malformed stored records are skipped."""
        store = InMemoryKeyValueStore({"ach": {
            "bogus": {"unlockedAt": "2024-01-01T00:00:00+00:00"},
            "dedicated": {"unlockedAt": "yesterday"},
            "first_steps": {"unlockedAt": "2024-01-01T00:00:00+00:00"},
        }})
        tracker = AchievementTracker(store=store, key="ach")
        assert tracker.unlocked_count() == 1
        assert tracker.is_unlocked(AchievementId.FIRST_STEPS)

    def test_logs_activity(self):
        """Test unlocks appear in the activity feed."""
        activity = ActivityLogger(store=InMemoryKeyValueStore())
        tracker = AchievementTracker(activity_logger=activity)
        tracker.unlock(AchievementId.COLLECTOR)
        [event] = activity.recent()
        assert event.event_type == ActivityEventType.ACHIEVEMENT_UNLOCKED
        assert event.details["achievement_id"] == "collector"


class TestViews:
    """Tests for status views."""

    def test_statuses(self, engine):
        """Test one status per achievement with progress where counted."""
        engine.create_account("charmander-line", "C", 100)
        tracker = AchievementTracker()
        tracker.check_and_unlock(engine.accounts_with_stats())
        statuses = tracker.statuses(engine.accounts_with_stats())
        assert len(statuses) == len(ACHIEVEMENTS) == 10
        by_id = {s.achievement.id: s for s in statuses}
        assert by_id[AchievementId.FIRST_STEPS].is_unlocked
        assert by_id[AchievementId.FIRST_STEPS].progress is None
        assert by_id[AchievementId.FULL_PARTY].progress == (1, 6)

    def test_completion_percentage(self):
        """Test completion is a share of all achievements."""
        tracker = AchievementTracker()
        tracker.unlock(AchievementId.FIRST_STEPS)
        assert tracker.completion_percentage() == pytest.approx(10.0)

    def test_recently_unlocked(self):
        """Test the newest unlocks come first."""
        tracker = AchievementTracker()
        tracker.unlock(AchievementId.FIRST_STEPS)
        tracker.unlock(AchievementId.DEDICATED)
        recent = tracker.recently_unlocked(limit=1)
        assert len(recent) == 1
        assert recent[0].id in {AchievementId.FIRST_STEPS, AchievementId.DEDICATED}
