"""
Error types for nostrsync.

Every failure a sync cycle can report derives from SyncError so the
orchestrator can turn it into a single short reason string.
"""


class SyncError(Exception):
    """Base class for all sync failures."""


class ConfigurationError(SyncError):
    """The author identifier is missing or unusable."""


class InvalidIdentifier(ConfigurationError):
    """The configured identifier is not a valid npub, hex key or NIP-05 address."""


class FetchFailed(SyncError):
    """No relay could be reached or the relay query failed."""


class MergeFailed(SyncError):
    """Writing one date's events into its daily note failed."""

    def __init__(self, date: str, reason: str):
        super().__init__(f"{date}: {reason}")
        self.date = date
        self.reason = reason


class PersistenceFailed(SyncError):
    """The event ledger or the sync cursor could not be written."""
