"""
Sync cursor for nostrsync.
"""

import logging

from .settings_store import SettingsStore


class SyncCursor:
    """
    Watermark of the last completed sync, stored with the settings.

    The value never decreases. It is only advanced by the orchestrator once a
    cycle has written its notes and saved the ledger.
    """

    def __init__(self, store: SettingsStore):
        self.store = store

    @property
    def value(self) -> int:
        return self.store.settings.last_sync_timestamp

    def advance(self, timestamp: int) -> int:
        """
        Move the cursor forward to ``timestamp`` and persist it.

        Args:
            timestamp: New watermark in seconds since epoch

        Returns:
            The stored cursor value

        Raises:
            PersistenceFailed: If the settings file cannot be written
        """
        current = self.value
        if timestamp <= current:
            logging.debug(f"Cursor already at {current}, not moving back to {timestamp}")
            return current

        self.store.update(last_sync_timestamp=int(timestamp))
        logging.debug(f"Sync cursor advanced to {timestamp}")
        return int(timestamp)
