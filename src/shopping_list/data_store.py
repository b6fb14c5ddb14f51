"""JSON file persistence for Shopping List.

Every collection lives in its own file under the data directory and is
rewritten in full on save.
"""

import json
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from .categories import sort_custom_categories
from .models import CustomCategory, HistoryEntry, ShoppingList, Store

logger = structlog.get_logger()


class DataStoreError(Exception):
    """Raised when a data file cannot be read."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"Could not read {path}: {reason}")


class DataStore:
    """Manages JSON file persistence for shopping data."""

    def __init__(self, data_dir: Path | None = None, history_limit: int = 500):
        """Initialize data store.

        Args:
            data_dir: Directory for data files. Defaults to ./data
            history_limit: Most recent history entries to keep; 0 keeps all
        """
        self.data_dir = data_dir or Path.cwd() / "data"
        self.history_limit = history_limit
        self._ensure_directories()

    def _ensure_directories(self) -> None:
        """Create the data directory if it doesn't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _lists_path(self) -> Path:
        return self.data_dir / "lists.json"

    def _history_path(self) -> Path:
        return self.data_dir / "history.json"

    def _custom_categories_path(self) -> Path:
        return self.data_dir / "custom_categories.json"

    def _stores_path(self) -> Path:
        return self.data_dir / "stores.json"

    def _read(self, path: Path) -> list[dict[str, Any]]:
        """Read a JSON array file, empty if the file doesn't exist."""
        if not path.exists():
            return []
        try:
            with open(path) as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DataStoreError(path, str(e)) from e
        if not isinstance(data, list):
            raise DataStoreError(path, "expected a JSON array")
        return data

    def _write(self, path: Path, records: list[Any]) -> None:
        payload = [record.model_dump(mode="json") for record in records]
        with open(path, "w") as f:
            json.dump(payload, f, indent=2)
        logger.debug("data_saved", file=path.name, records=len(payload))

    def _parse(self, path: Path, model: type, rows: list[dict[str, Any]]) -> list:
        try:
            return [model.model_validate(row) for row in rows]
        except ValidationError as e:
            raise DataStoreError(path, str(e)) from e

    # --- Shopping Lists ---

    def load_lists(self) -> list[ShoppingList]:
        """Load all shopping lists, oldest first."""
        path = self._lists_path()
        lists = self._parse(path, ShoppingList, self._read(path))
        return sorted(lists, key=lambda lst: lst.created_at)

    def save_lists(self, lists: list[ShoppingList]) -> None:
        """Save all shopping lists."""
        self._write(self._lists_path(), lists)

    # --- History ---

    def load_history(self) -> list[HistoryEntry]:
        """Load item history, oldest first."""
        path = self._history_path()
        return self._parse(path, HistoryEntry, self._read(path))

    def save_history(self, history: list[HistoryEntry]) -> None:
        """Save item history, keeping only the most recent entries."""
        if self.history_limit > 0:
            history = history[-self.history_limit :]
        self._write(self._history_path(), history)

    def append_history(self, names: list[str]) -> None:
        """Record item names as added now.

        Args:
            names: Item names, one history entry each
        """
        if not names:
            return
        history = self.load_history()
        history.extend(HistoryEntry(name=name) for name in names)
        self.save_history(history)

    # --- Custom Categories ---

    def load_custom_categories(self) -> list[CustomCategory]:
        """Load custom categories sorted by display order."""
        path = self._custom_categories_path()
        categories = self._parse(path, CustomCategory, self._read(path))
        return sort_custom_categories(categories)

    def save_custom_categories(self, categories: list[CustomCategory]) -> None:
        """Save custom categories."""
        self._write(self._custom_categories_path(), categories)

    # --- Stores ---

    def load_stores(self) -> list[Store]:
        """Load stores sorted by display order."""
        path = self._stores_path()
        stores = self._parse(path, Store, self._read(path))
        return sorted(stores, key=lambda s: s.order)

    def save_stores(self, stores: list[Store]) -> None:
        """Save stores."""
        self._write(self._stores_path(), stores)
