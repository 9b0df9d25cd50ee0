"""
Base relay fetcher interface for nostrsync.

This module defines the abstract interface that all relay fetchers must implement.
"""

from abc import ABC, abstractmethod
from typing import List

from ..models import NostrEvent, SyncFilter


class RelayFetcher(ABC):
    """
    Abstract base class for relay fetchers.

    A fetcher queries a set of relays and returns the events that match a
    filter, de-duplicated by id. Results are best effort: an unreachable relay
    may cause matching events to be missing, so callers must never treat a
    batch as exhaustive.
    """

    @abstractmethod
    def fetch(self, relays: List[str], sync_filter: SyncFilter) -> List[NostrEvent]:
        """
        Fetch events matching ``sync_filter`` from ``relays``.

        Args:
            relays: Relay WebSocket URLs
            sync_filter: Kinds, authors and optional lower time bound

        Returns:
            Matching events, unique by id

        Raises:
            FetchFailed: If no relay is reachable or the query fails
        """
        pass
