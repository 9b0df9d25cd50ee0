"""Data models for nostrsync."""

from .events import NostrEvent, SyncFilter, TEXT_NOTE_KIND
from .settings import SyncSettings, SyncResult, DEFAULT_RELAYS

__all__ = [
    "NostrEvent",
    "SyncFilter",
    "TEXT_NOTE_KIND",
    "SyncSettings",
    "SyncResult",
    "DEFAULT_RELAYS"
]
