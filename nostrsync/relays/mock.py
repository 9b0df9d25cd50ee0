"""
Mock relay fetcher for testing nostrsync.

Returns a fixed batch of events without touching the network, so the sync
pipeline can be exercised offline.
"""

import hashlib
from typing import List, Optional

from ..errors import FetchFailed
from ..models import NostrEvent, SyncFilter, TEXT_NOTE_KIND
from .base import RelayFetcher


class MockRelayFetcher(RelayFetcher):
    """
    Mock fetcher that returns the same batch on every call.

    Like a relay that ignores ``since``, it hands back its whole batch each
    time, which leaves de-duplication entirely to the event ledger.
    """

    def __init__(self, events: Optional[List[NostrEvent]] = None, fail_with: Optional[str] = None):
        """
        Initialize the mock fetcher.

        Args:
            events: Batch to return; sample posts are generated when omitted
            fail_with: If set, every fetch raises FetchFailed with this reason
        """
        self.events = events
        self.fail_with = fail_with
        self.calls: List[SyncFilter] = []

    def fetch(self, relays: List[str], sync_filter: SyncFilter) -> List[NostrEvent]:
        self.calls.append(sync_filter)

        if self.fail_with:
            raise FetchFailed(self.fail_with)

        if self.events is None:
            author = sync_filter.authors[0] if sync_filter.authors else "0" * 64
            self.events = self._create_sample_events(author)

        return list(self.events)

    @staticmethod
    def _create_sample_events(author: str) -> List[NostrEvent]:
        """
        Create a few sample posts spread over two days.

        Timestamps and ids are fixed so repeated runs return the same batch.
        """
        posts = [
            (1716282900, "GM nostr! Trying out a new journaling setup."),
            (1716327600, "Long walk today, finally finished the book I was reading."),
            (1716365100, "Notes sync straight into my vault now."),
        ]

        events = []
        for created_at, content in posts:
            digest = hashlib.sha256(f"{author}:{created_at}:{content}".encode('utf-8')).hexdigest()
            events.append(NostrEvent(
                id=digest,
                pubkey=author,
                created_at=created_at,
                kind=TEXT_NOTE_KIND,
                content=content,
            ))
        return events
