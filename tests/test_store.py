"""
Tests for the key-value stores backing the used-recipe memory.
"""

import json

from meal_randomizer.store import InMemoryStore, JsonFileStore


class TestInMemoryStore:
    """Test cases for InMemoryStore."""

    def test_get_missing_key(self):
        assert InMemoryStore().get("usedIds") is None

    def test_set_and_get(self):
        store = InMemoryStore()
        store.set("usedIds", "[1, 2]")
        assert store.get("usedIds") == "[1, 2]"

    def test_clear(self):
        store = InMemoryStore({"lastReset": "0"})
        store.clear()
        assert store.get("lastReset") is None


class TestJsonFileStore:
    """Test cases for JsonFileStore."""

    def test_missing_file_reads_empty(self, tmp_path):
        store = JsonFileStore(tmp_path / "memory.json")
        assert store.get("usedIds") is None

    def test_set_creates_file_and_parents(self, tmp_path):
        """Test that set() writes a JSON object, creating directories as needed."""
        path = tmp_path / "nested" / "memory.json"
        store = JsonFileStore(path)
        store.set("usedIds", "[3]")
        store.set("lastReset", "1000")

        assert json.loads(path.read_text(encoding="utf-8")) == {"usedIds": "[3]", "lastReset": "1000"}

    def test_values_survive_new_instance(self, tmp_path):
        path = tmp_path / "memory.json"
        JsonFileStore(path).set("usedIds", "[1]")
        assert JsonFileStore(path).get("usedIds") == "[1]"

    def test_corrupt_file_reads_empty(self, tmp_path):
        """Test that an unparseable file is treated as empty and then replaced on write."""
        path = tmp_path / "memory.json"
        path.write_text("{not json", encoding="utf-8")
        store = JsonFileStore(path)

        assert store.get("usedIds") is None
        store.set("usedIds", "[]")
        assert store.get("usedIds") == "[]"

    def test_non_object_file_reads_empty(self, tmp_path):
        path = tmp_path / "memory.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert JsonFileStore(path).get("usedIds") is None
