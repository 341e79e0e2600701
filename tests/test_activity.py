"""Tests for the activity logger."""

from savings_party.activity import ActivityLogger
from savings_party.models.activity import ActivityEventBuilder, ActivityEventType
from savings_party.models.savings import TransitionEvent
from savings_party.services.storage import InMemoryKeyValueStore, KeyValueStore, StorageUnavailableError


class BrokenStore(KeyValueStore):
    """Store that fails on every call."""

    def get(self, key, default=None):
        raise StorageUnavailableError("offline")

    def set(self, key, value):
        raise StorageUnavailableError("offline")

    def remove(self, key):
        raise StorageUnavailableError("offline")


def transition(old_level, new_level, old_stage=0, new_stage=0):
    return TransitionEvent(
        account_id="a",
        old_level=old_level,
        new_level=new_level,
        evolved=new_stage > old_stage,
        old_stage=old_stage,
        new_stage=new_stage,
    )


class TestActivityLogger:
    """Tests for ActivityLogger."""

    def test_local_only(self):
        """Test logging without a store succeeds and keeps no feed."""
        activity = ActivityLogger()
        assert activity.log(ActivityEventBuilder.entry_deleted("a", "e")) is True
        assert activity.recent() == []

    def test_feed_is_newest_first(self):
        """Test the feed lists the newest event first."""
        activity = ActivityLogger(store=InMemoryKeyValueStore())
        activity.log_entry_added("a", "Charry", 10, None)
        activity.log_entry_added("a", "Charry", -5, None)
        events = activity.recent()
        assert [e.event_type for e in events] == [
            ActivityEventType.WITHDRAWAL,
            ActivityEventType.DEPOSIT,
        ]

    def test_feed_is_capped(self):
        """Test only the newest entries are kept."""
        store = InMemoryKeyValueStore()
        activity = ActivityLogger(store=store, key="feed", max_entries=3)
        for i in range(5):
            activity.log_entry_added("a", "Charry", i + 1, None)
        assert len(store.get("feed")) == 3
        assert activity.recent(limit=1)[0].details["amount"] == 5

    def test_storage_failure_not_raised(self):
        """Test a broken store reports False instead of raising."""
        activity = ActivityLogger(store=BrokenStore())
        assert activity.log(ActivityEventBuilder.entry_deleted("a", "e")) is False
        assert activity.recent() == []
        activity.clear()

    def test_unreadable_entries_skipped(self):
        """Test malformed stored events are skipped."""
        store = InMemoryKeyValueStore({"feed": [{"bogus": True}]})
        activity = ActivityLogger(store=store, key="feed")
        activity.log_entry_deleted("a", "e")
        assert [e.event_type for e in activity.recent()] == [ActivityEventType.ENTRY_DELETED]

    def test_transition_with_evolution(self):
        """Test an evolving transition logs a level-up and an evolution."""
        activity = ActivityLogger(store=InMemoryKeyValueStore())
        activity.log_transition(transition(1, 21, 0, 1), "Charry", "Charmeleon")
        types = [e.event_type for e in activity.recent()]
        assert types == [ActivityEventType.EVOLUTION, ActivityEventType.LEVEL_UP]

    def test_transition_level_only(self):
        """Test a plain level-up logs one event."""
        activity = ActivityLogger(store=InMemoryKeyValueStore())
        activity.log_transition(transition(1, 7), "Charry")
        assert [e.event_type for e in activity.recent()] == [ActivityEventType.LEVEL_UP]

    def test_clear(self):
        """Test clearing empties the feed."""
        activity = ActivityLogger(store=InMemoryKeyValueStore())
        activity.log_settings_updated({"reset": True})
        activity.clear()
        assert activity.recent() == []
