"""
Configuration management for nostrsync.

This module handles loading and accessing configuration values from config.yaml.
Values the user edits at runtime (identifier, relays, interval) are persisted
separately by the settings store; the YAML file provides their defaults and
everything else (paths, note layout, logging).
"""

import yaml
from pathlib import Path
from typing import Any, Dict, List
import logging


class ConfigManager:
    """
    Manages configuration loading and access for nostrsync.
    """

    def __init__(self, config_path: str = "config.yaml"):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the configuration file
        """
        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from YAML file, falling back to defaults."""
        defaults = self._get_default_config()

        if not self.config_path.exists():
            logging.info(f"Configuration file not found: {self.config_path}, using defaults")
            self._config = defaults
            return

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}

            if not isinstance(loaded, dict):
                raise ValueError("top-level YAML value must be a mapping")

            self._config = self._merge(defaults, loaded)
            logging.info(f"Configuration loaded from {self.config_path}")

        except (yaml.YAMLError, ValueError, OSError) as e:
            logging.error(f"Failed to load configuration: {e}")
            self._config = defaults

    @classmethod
    def _merge(cls, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively overlay ``override`` on ``base``."""
        merged = dict(base)
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = cls._merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration values."""
        return {
            "nostr": {
                "identifier": "",
                "relays": ["wss://relay.damus.io", "wss://nos.lol"],
                "fetch_timeout": 10.0,
                "nip05_timeout": 10.0
            },
            "sync": {
                "interval_minutes": 10
            },
            "paths": {
                "vault_dir": ".",
                "notes_dir": "DailyNotes/Nostr",
                "data_dir": ".nostrsync",
                "ledger_file": "synced-events.json",
                "state_file": "data.json",
                "log_file": "nostrsync.log"
            },
            "notes": {
                "marker": "#Nostr",
                "time_format": "%H:%M",
                "timezone": "UTC"
            },
            "logging": {
                "level": "INFO",
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        }

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key_path: Dot-separated path to the configuration value (e.g., "paths.notes_dir")
            default: Default value if key is not found

        Returns:
            The configuration value

        Examples:
            config.get("nostr.relays")      # Returns ["wss://relay.damus.io", "wss://nos.lol"]
            config.get("notes.timezone")    # Returns "UTC"
        """
        keys = key_path.split('.')
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get an entire configuration section.

        Args:
            section: Name of the configuration section

        Returns:
            Dictionary containing the section configuration
        """
        return self._config.get(section, {})

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    # Convenience properties for commonly used values

    @property
    def identifier(self) -> str:
        """Get the default author identifier."""
        return self.get("nostr.identifier", "") or ""

    @property
    def relays(self) -> List[str]:
        """Get the default relay list."""
        return self.get("nostr.relays", ["wss://relay.damus.io", "wss://nos.lol"])

    @property
    def fetch_timeout(self) -> float:
        """Get relay fetch timeout in seconds."""
        return float(self.get("nostr.fetch_timeout", 10.0))

    @property
    def nip05_timeout(self) -> float:
        """Get NIP-05 lookup timeout in seconds."""
        return float(self.get("nostr.nip05_timeout", 10.0))

    @property
    def interval_minutes(self) -> int:
        """Get the default sync interval."""
        return self.get("sync.interval_minutes", 10)

    @property
    def vault_directory(self) -> str:
        """Get the root directory of the notes vault."""
        return self.get("paths.vault_dir", ".")

    @property
    def notes_directory(self) -> str:
        """Get the vault-relative folder for daily notes."""
        return self.get("paths.notes_dir", "DailyNotes/Nostr")

    @property
    def data_directory(self) -> Path:
        """Get the private data directory for the ledger and settings state."""
        return Path(self.get("paths.data_dir", ".nostrsync"))

    @property
    def ledger_path(self) -> Path:
        """Get the full path of the event ledger file."""
        return self.data_directory / self.get("paths.ledger_file", "synced-events.json")

    @property
    def state_path(self) -> Path:
        """Get the full path of the settings state file."""
        return self.data_directory / self.get("paths.state_file", "data.json")

    @property
    def log_filename(self) -> str:
        """Get log file name."""
        return self.get("paths.log_file", "nostrsync.log")

    @property
    def note_marker(self) -> str:
        """Get the marker line written at the top of a new daily note."""
        return self.get("notes.marker", "#Nostr")

    @property
    def time_format(self) -> str:
        """Get the strftime format used for per-post headers."""
        return self.get("notes.time_format", "%H:%M")

    @property
    def timezone_name(self) -> str:
        """Get the zone used for day boundaries and post times."""
        return self.get("notes.timezone", "UTC")
