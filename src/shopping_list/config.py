"""Configuration management for Shopping List."""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .suggestions import DEFAULT_MAX_SUGGESTIONS


@dataclass
class DataConfig:
    """Data storage configuration."""

    storage_dir: Path


@dataclass
class SuggestionsConfig:
    """Suggestion engine configuration."""

    max_suggestions: int = DEFAULT_MAX_SUGGESTIONS
    history_limit: int = 500


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "WARNING"
    json: bool = False


@dataclass
class DefaultsConfig:
    """Default values configuration."""

    list_name: str = "My List"


@dataclass
class Config:
    """Complete application configuration."""

    data: DataConfig
    suggestions: SuggestionsConfig
    logging: LoggingConfig
    defaults: DefaultsConfig


class ConfigManager:
    """Manages application configuration from TOML files."""

    def __init__(self, config_path: Path | None = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional explicit path to config file.
                        If not provided, searches standard locations.
        """
        self.config_path = config_path or self._find_config()
        self._config = self._load_config()

    @property
    def data(self) -> DataConfig:
        """Get data configuration."""
        return self._config.data

    @property
    def suggestions(self) -> SuggestionsConfig:
        """Get suggestion engine configuration."""
        return self._config.suggestions

    @property
    def logging(self) -> LoggingConfig:
        """Get logging configuration."""
        return self._config.logging

    @property
    def defaults(self) -> DefaultsConfig:
        """Get defaults configuration."""
        return self._config.defaults

    def _find_config(self) -> Path:
        """Find config file in standard locations."""
        locations = [
            Path.cwd() / "config.toml",
            Path.home() / ".config" / "shopping-list" / "config.toml",
            Path.home() / ".shopping-list" / "config.toml",
        ]

        for loc in locations:
            if loc.exists():
                return loc

        return Path.home() / ".config" / "shopping-list" / "config.toml"

    def _load_config(self) -> Config:
        """Load configuration from TOML file."""
        if not self.config_path.exists():
            return self._default_config()

        with open(self.config_path, "rb") as f:
            data = tomllib.load(f)

        suggestions = data.get("suggestions", {})
        log = data.get("logging", {})

        return Config(
            data=DataConfig(
                storage_dir=Path(
                    data.get("data", {}).get("storage_dir", "~/shopping-list/data")
                ).expanduser(),
            ),
            suggestions=SuggestionsConfig(
                max_suggestions=suggestions.get("max_suggestions", DEFAULT_MAX_SUGGESTIONS),
                history_limit=suggestions.get("history_limit", 500),
            ),
            logging=LoggingConfig(
                level=str(log.get("level", "WARNING")).upper(),
                json=log.get("json", False),
            ),
            defaults=DefaultsConfig(
                list_name=data.get("defaults", {}).get("list_name", "My List"),
            ),
        )

    def _default_config(self) -> Config:
        """Return default configuration."""
        return Config(
            data=DataConfig(storage_dir=Path.home() / "shopping-list" / "data"),
            suggestions=SuggestionsConfig(),
            logging=LoggingConfig(),
            defaults=DefaultsConfig(),
        )

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get config value by dot-notation path.

        Args:
            key_path: Dot-separated path like 'data.storage_dir'
            default: Default value if path not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split(".")
        value: Any = self._config

        for key in keys:
            if hasattr(value, key):
                value = getattr(value, key)
            else:
                return default

        return value if value is not None else default
