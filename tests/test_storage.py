"""
Tests for the storage layer.

Test strategy:
1. In-memory store semantics (copy in, copy out)
2. JSON file store on a temp directory
3. Repositories over the in-memory store
"""

import pytest

from savings_party.models.savings import SavingsAccount, UserSettings, find_currency
from savings_party.services.storage import (
    CorruptDataError,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueAccountRepository,
    KeyValueSettingsRepository,
    StorageUnavailableError,
)


class TestInMemoryStore:
    """Tests for InMemoryKeyValueStore."""

    def test_get_default(self):
        """Test missing keys return the default."""
        store = InMemoryKeyValueStore()
        assert store.get("missing") is None
        assert store.get("missing", default=[]) == []

    def test_values_are_copied(self):
        """Test callers never share state with the store."""
        store = InMemoryKeyValueStore()
        value = {"items": [1]}
        store.set("k", value)
        value["items"].append(2)
        assert store.get("k") == {"items": [1]}

        read = store.get("k")
        read["items"].append(3)
        assert store.get("k") == {"items": [1]}

    def test_remove(self):
        """Test remove reports whether the key existed."""
        store = InMemoryKeyValueStore({"k": None})
        assert store.remove("k") is True
        assert store.remove("k") is False
        assert store.keys() == []


class TestJsonFileStore:
    """Tests for JsonFileKeyValueStore."""

    def test_set_and_get(self, tmp_path):
        """Test values round-trip through a file."""
        store = JsonFileKeyValueStore(tmp_path / "data")
        store.set("pokemon-savings-accounts", [{"a": 1}])
        assert (tmp_path / "data" / "pokemon-savings-accounts.json").exists()
        assert store.get("pokemon-savings-accounts") == [{"a": 1}]

    def test_missing_key(self, tmp_path):
        """Test missing files return the default."""
        store = JsonFileKeyValueStore(tmp_path)
        assert store.get("nothing", default={}) == {}
        assert store.remove("nothing") is False

    def test_remove(self, tmp_path):
        """Test remove deletes the file."""
        store = JsonFileKeyValueStore(tmp_path)
        store.set("k", 1)
        assert store.remove("k") is True
        assert not (tmp_path / "k.json").exists()

    def test_corrupt_file(self, tmp_path):
        """Test invalid JSON raises CorruptDataError."""
        (tmp_path / "k.json").write_text("{not json", encoding="utf-8")
        store = JsonFileKeyValueStore(tmp_path)
        with pytest.raises(CorruptDataError):
            store.get("k")

    def test_non_utf8_file(self, tmp_path):
        """Test undecodable bytes raise CorruptDataError."""
        (tmp_path / "k.json").write_bytes(b'["\xff\xfe"]')
        store = JsonFileKeyValueStore(tmp_path)
        with pytest.raises(CorruptDataError):
            store.get("k")

    def test_invalid_key(self, tmp_path):
        """Test keys must be path-safe."""
        store = JsonFileKeyValueStore(tmp_path)
        with pytest.raises(ValueError):
            store.set("../escape", 1)

    def test_no_temp_files_left(self, tmp_path):
        """Test atomic writes clean up after themselves."""
        store = JsonFileKeyValueStore(tmp_path)
        store.set("k", {"x": 1})
        store.set("k", {"x": 2})
        assert sorted(p.name for p in tmp_path.iterdir()) == ["k.json"]

    def test_write_failure(self, tmp_path):
        """Test a write that keeps failing raises StorageUnavailableError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory", encoding="utf-8")
        store = JsonFileKeyValueStore(blocker / "data", write_retries=1)
        with pytest.raises(StorageUnavailableError):
            store.set("k", 1)


class TestAccountRepository:
    """Tests for KeyValueAccountRepository."""

    def test_empty(self):
        """Test an empty store loads no accounts."""
        assert KeyValueAccountRepository(InMemoryKeyValueStore()).load_accounts() == []

    def test_save_and_load(self):
        """Test accounts survive a save/load."""
        repo = KeyValueAccountRepository(InMemoryKeyValueStore())
        account = SavingsAccount(nickname="A", creature_ref="charmander-line", target_amount=10)
        repo.save_accounts([account])
        [loaded] = repo.load_accounts()
        assert loaded.id == account.id

    def test_invalid_account(self):
        """Test an invalid stored account raises CorruptDataError."""
        store = InMemoryKeyValueStore({"pokemon-savings-accounts": [{"nickname": "no ref"}]})
        with pytest.raises(CorruptDataError):
            KeyValueAccountRepository(store).load_accounts()

    def test_clear(self):
        """Test clear removes the key."""
        store = InMemoryKeyValueStore()
        repo = KeyValueAccountRepository(store)
        repo.save_accounts([])
        repo.clear()
        assert store.keys() == []


class TestSettingsRepository:
    """Tests for KeyValueSettingsRepository."""

    def test_missing(self):
        """Test nothing stored loads as None."""
        assert KeyValueSettingsRepository(InMemoryKeyValueStore()).load() is None

    def test_invalid_falls_back(self):
        """Test invalid settings load as None."""
        store = InMemoryKeyValueStore({"pokemon-savings-settings": {"soundVolume": 500}})
        assert KeyValueSettingsRepository(store).load() is None

    def test_save_and_load(self):
        """Test settings survive a save/load."""
        repo = KeyValueSettingsRepository(InMemoryKeyValueStore())
        repo.save(UserSettings(currency=find_currency("EUR"), sound_volume=10))
        loaded = repo.load()
        assert loaded.currency.code == "EUR"
        assert loaded.sound_volume == 10
