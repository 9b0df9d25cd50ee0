"""
nostrsync: Nostr posts to daily notes.

Fetches a user's short text posts from Nostr relays and appends them as
dated journal entries in a Markdown vault.
"""

__version__ = "0.1.0"
__author__ = "nostrsync Project"

# Import main components
from .models import NostrEvent, SyncFilter, SyncSettings, SyncResult
from .state import EventLedger, SettingsStore, SyncCursor
from .relays import RelayFetcher, MockRelayFetcher, NostrRelayFetcher
from .notes import NoteStore, FileSystemNoteStore, InMemoryNoteStore, NoteMerger
from .sync import SyncOrchestrator, SyncScheduler

__all__ = [
    "NostrEvent",
    "SyncFilter",
    "SyncSettings",
    "SyncResult",
    "EventLedger",
    "SettingsStore",
    "SyncCursor",
    "RelayFetcher",
    "MockRelayFetcher",
    "NostrRelayFetcher",
    "NoteStore",
    "FileSystemNoteStore",
    "InMemoryNoteStore",
    "NoteMerger",
    "SyncOrchestrator",
    "SyncScheduler"
]
