"""Persistent sync state: event ledger, settings and cursor."""

from .ledger import EventLedger
from .settings_store import SettingsStore
from .cursor import SyncCursor

__all__ = ["EventLedger", "SettingsStore", "SyncCursor"]
