"""Tests for JSON data persistence."""

import json

import pytest

from shopping_list.data_store import DataStore, DataStoreError
from shopping_list.models import (
    CustomCategory,
    HistoryEntry,
    ShoppingItem,
    ShoppingList,
    Store,
)


class TestDataStoreInit:
    """Tests for DataStore initialization."""

    def test_creates_data_dir(self, tmp_path):
        """Missing data directory is created."""
        data_dir = tmp_path / "nested" / "data"
        DataStore(data_dir=data_dir)
        assert data_dir.is_dir()

    def test_empty_collections(self, data_store):
        """A fresh store has nothing in it."""
        assert data_store.load_lists() == []
        assert data_store.load_history() == []
        assert data_store.load_custom_categories() == []
        assert data_store.load_stores() == []


class TestLists:
    """Tests for list persistence."""

    def test_save_and_load(self, data_store):
        """Lists and their items survive a save/load."""
        lst = ShoppingList(name="Weekly", items=[ShoppingItem(name="Milk", category="dairy")])
        data_store.save_lists([lst])

        loaded = data_store.load_lists()
        assert len(loaded) == 1
        assert loaded[0].id == lst.id
        assert loaded[0].items[0].name == "Milk"
        assert loaded[0].items[0].category == "dairy"

    def test_file_is_json(self, data_store, temp_data_dir):
        """Lists are written as a JSON array."""
        data_store.save_lists([ShoppingList(name="Weekly")])
        data = json.loads((temp_data_dir / "lists.json").read_text())
        assert data[0]["name"] == "Weekly"
        assert data[0]["items"] == []

    def test_corrupt_file_raises(self, data_store, temp_data_dir):
        """Unparseable files raise DataStoreError."""
        (temp_data_dir / "lists.json").write_text("{not json")
        with pytest.raises(DataStoreError):
            data_store.load_lists()

    def test_wrong_shape_raises(self, data_store, temp_data_dir):
        """A JSON object instead of an array is rejected."""
        (temp_data_dir / "lists.json").write_text('{"name": "x"}')
        with pytest.raises(DataStoreError, match="JSON array"):
            data_store.load_lists()

    def test_non_utf8_file_raises(self, data_store, temp_data_dir):
        """Undecodable bytes raise DataStoreError."""
        (temp_data_dir / "lists.json").write_bytes(b"\xff\xfe\x00[\x80]")
        with pytest.raises(DataStoreError):
            data_store.load_lists()

    def test_invalid_record_raises(self, data_store, temp_data_dir):
        """Records that fail validation raise DataStoreError."""
        (temp_data_dir / "lists.json").write_text('[{"items": []}]')
        with pytest.raises(DataStoreError):
            data_store.load_lists()


class TestHistory:
    """Tests for history persistence."""

    def test_append_history(self, data_store):
        """Appended names are stored in order."""
        data_store.append_history(["Milk", "Eggs"])
        data_store.append_history(["Milk"])
        assert [e.name for e in data_store.load_history()] == ["Milk", "Eggs", "Milk"]

    def test_append_nothing(self, data_store, temp_data_dir):
        """Appending no names doesn't touch the file."""
        data_store.append_history([])
        assert not (temp_data_dir / "history.json").exists()

    def test_history_limit(self, temp_data_dir):
        """Only the most recent entries are kept."""
        store = DataStore(data_dir=temp_data_dir, history_limit=3)
        store.append_history(["A", "B", "C", "D", "E"])
        assert [e.name for e in store.load_history()] == ["C", "D", "E"]

    def test_unlimited_history(self, temp_data_dir):
        """A limit of 0 keeps everything."""
        store = DataStore(data_dir=temp_data_dir, history_limit=0)
        store.save_history([HistoryEntry(name=str(i)) for i in range(600)])
        assert len(store.load_history()) == 600


class TestCategoriesAndStores:
    """Tests for custom category and store persistence."""

    def test_custom_categories_sorted_by_order(self, data_store):
        """Custom categories load in display order."""
        data_store.save_custom_categories(
            [
                CustomCategory(key="custom_b", name="B", order=1),
                CustomCategory(key="custom_a", name="A", order=0),
            ]
        )
        assert [c.key for c in data_store.load_custom_categories()] == ["custom_a", "custom_b"]

    def test_stores_sorted_by_order(self, data_store):
        """Stores load in display order with their aisles."""
        data_store.save_stores(
            [
                Store(name="Second", order=1),
                Store(name="First", order=0, aisles=["1", "2"]),
            ]
        )
        stores = data_store.load_stores()
        assert [s.name for s in stores] == ["First", "Second"]
        assert stores[0].aisles == ["1", "2"]
