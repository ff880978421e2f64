"""Tests for the key-value store backends."""

import pytest

from finance_tracker.services.storage import (
    InMemoryStore,
    JsonFileStore,
    KeyValueStoreInterface,
    PersistenceError,
    StorageError,
)


class TestInMemoryStore:
    """Tests for the dict-backed store."""

    def test_set_get_delete(self):
        """Test the basic key-value contract."""
        store = InMemoryStore()
        assert store.get("k") is None
        store.set("k", "v")
        assert store.get("k") == "v"
        assert store.delete("k") is True
        assert store.delete("k") is False

    def test_initial_contents_are_copied(self):
        """Test that the seed dict is not shared."""
        initial = {"k": "v"}
        store = InMemoryStore(initial)
        store.set("k", "changed")
        assert initial["k"] == "v"


class TestJsonFileStore:
    """Tests for the file-backed store."""

    def test_is_a_key_value_store(self, tmp_path):
        """Test the interface."""
        assert isinstance(JsonFileStore(tmp_path), KeyValueStoreInterface)

    def test_write_creates_directory_and_file(self, tmp_path):
        """Test that a value lands in <dir>/<key>.json."""
        store = JsonFileStore(tmp_path / "nested" / "data")
        store.set("moneyTrackerData", '{"transactions": []}')
        path = tmp_path / "nested" / "data" / "moneyTrackerData.json"
        assert path.read_text(encoding="utf-8") == '{"transactions": []}'
        assert not path.with_suffix(".json.tmp").exists()

    def test_overwrite_and_read_back(self, tmp_path):
        """Test replacing an existing value."""
        store = JsonFileStore(tmp_path)
        store.set("k", "one")
        store.set("k", "two")
        assert store.get("k") == "two"

    def test_missing_key(self, tmp_path):
        """Test reading and deleting an absent key."""
        store = JsonFileStore(tmp_path)
        assert store.get("absent") is None
        assert store.delete("absent") is False

    def test_delete(self, tmp_path):
        """Test removing a stored key."""
        store = JsonFileStore(tmp_path)
        store.set("k", "v")
        assert store.delete("k") is True
        assert store.get("k") is None

    def test_unwritable_location_raises_persistence_error(self, tmp_path):
        """Test that write failures surface as PersistenceError after retries."""
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory", encoding="utf-8")
        store = JsonFileStore(blocker / "data")

        with pytest.raises(PersistenceError):
            store.set("k", "v")

    def test_persistence_error_is_a_storage_error(self):
        """Test the exception hierarchy."""
        assert issubclass(PersistenceError, StorageError)
