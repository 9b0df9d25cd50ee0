"""
Settings persistence for nostrsync.

Stores the user-editable settings and the sync cursor in a JSON file in the
private data directory. Saved values take precedence over the defaults that
come from config.yaml.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from ..config import ConfigManager
from ..errors import PersistenceFailed
from .files import write_json_atomic
from ..models import SyncSettings


class SettingsStore:
    """
    Loads, validates and saves SyncSettings.
    """

    def __init__(self, path: Optional[Path], defaults: Optional[SyncSettings] = None):
        """
        Initialize the settings store and load any saved state.

        Args:
            path: JSON state file; ``None`` keeps settings in memory only
            defaults: Settings used for keys missing from the state file
        """
        self.path = Path(path) if path is not None else None
        self.defaults = defaults or SyncSettings()
        self._lock = threading.RLock()
        self._settings = self.load()

    @classmethod
    def from_config(cls, config: ConfigManager) -> "SettingsStore":
        """Create a store whose defaults come from the YAML configuration."""
        try:
            defaults = SyncSettings(
                identifier=config.identifier,
                relays=config.relays,
                interval_minutes=config.interval_minutes,
            )
        except ValidationError as e:
            logging.error(f"Invalid sync defaults in configuration, using built-in defaults: {e}")
            defaults = SyncSettings()
        return cls(config.state_path, defaults)

    @property
    def settings(self) -> SyncSettings:
        return self._settings

    def load(self) -> SyncSettings:
        """
        Read the state file and overlay it on the defaults.

        A missing, unreadable or invalid file falls back to the defaults.
        """
        saved = self._read_state()
        return saved if saved is not None else self.defaults

    def reload(self) -> SyncSettings:
        """
        Re-read the state file, picking up changes made by another process.

        If the file cannot be read the current settings are kept, so the
        cursor never moves backwards because of a bad read.
        """
        with self._lock:
            saved = self._read_state()
            if saved is not None:
                self._settings = saved
            return self._settings

    def _read_state(self) -> Optional[SyncSettings]:
        if self.path is None or not self.path.exists():
            return None

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                saved = json.load(f)
            if not isinstance(saved, dict):
                raise ValueError("state file must contain a JSON object")
            merged = {**self.defaults.model_dump(), **saved}
            return SyncSettings.model_validate(merged)
        except (json.JSONDecodeError, ValidationError, ValueError, OSError) as e:
            logging.warning(f"Ignoring unreadable settings state {self.path}: {e}")
            return None

    def save(self, settings: SyncSettings) -> None:
        """
        Persist settings and make them current.

        Raises:
            PersistenceFailed: If the state file cannot be written
        """
        with self._lock:
            if self.path is not None:
                try:
                    write_json_atomic(self.path, settings.model_dump(), indent=2)
                except OSError as e:
                    raise PersistenceFailed(f"Failed to save settings to {self.path}: {e}") from e
            self._settings = settings

    def update(self, **changes: Any) -> SyncSettings:
        """
        Validate and persist a partial settings change.

        Raises:
            pydantic.ValidationError: If a changed value is invalid
            PersistenceFailed: If the state file cannot be written
        """
        with self._lock:
            data: Dict[str, Any] = self._settings.model_dump()
            data.update(changes)
            updated = SyncSettings.model_validate(data)
            self.save(updated)
            return updated
