"""Shared test fixtures for Shopping List."""

import pytest

from shopping_list.data_store import DataStore
from shopping_list.list_manager import ListManager
from shopping_list.logging_config import configure_logging
from shopping_list.models import CustomCategory, HistoryEntry


@pytest.fixture(autouse=True)
def quiet_logging():
    """Keep debug log lines out of test output."""
    configure_logging(level="WARNING")


@pytest.fixture
def temp_data_dir(tmp_path):
    """Create a temporary data directory."""
    data_dir = tmp_path / "test_data"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def data_store(temp_data_dir):
    """Create a DataStore with temporary directory."""
    return DataStore(data_dir=temp_data_dir)


@pytest.fixture
def list_manager(data_store):
    """Create a ListManager with temporary storage."""
    return ListManager(data_store=data_store)


@pytest.fixture
def list_id(list_manager):
    """Create an empty list and return its ID."""
    result = list_manager.create_list("Groceries")
    return result["data"]["shopping_list"]["id"]


@pytest.fixture
def tofu_category():
    """Custom category claiming tofu and plant-based products."""
    return CustomCategory(
        key="custom_vegan",
        name="Vegan",
        color="#8bc34a",
        keywords=["Tofu", "oat milk", "tempeh"],
    )


@pytest.fixture
def sample_history():
    """History with repeated and recent purchases, oldest first."""
    names = ["Milk", "Eggs", "Milk", "Apples", "Coffee", "Milk", "Eggs", "Bananas"]
    return [HistoryEntry(name=name) for name in names]
