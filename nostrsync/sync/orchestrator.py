"""
Sync orchestrator for nostrsync.

Drives one sync cycle end to end:

1. Resolve the configured identifier to a hex public key.
2. Fetch the author's text posts, bounded below by the sync cursor.
3. Drop events already recorded in the event ledger.
4. Group the rest by date and merge each group into its daily note.
5. Record merged event ids in the ledger and save it.
6. Advance the cursor to the current time.

A configuration or fetch failure aborts the cycle before anything is
written. When nothing new arrives the cursor is left where it was, so a relay
outage that returns an empty batch does not move the ``since`` boundary.
"""

import logging
import threading
import time
from datetime import timezone, tzinfo
from typing import Callable, List, Optional

from ..errors import ConfigurationError, FetchFailed, MergeFailed, PersistenceFailed
from ..identity import resolve_identifier
from ..models import NostrEvent, SyncFilter, SyncResult, TEXT_NOTE_KIND
from ..notes import NoteMerger
from ..relays import RelayFetcher
from ..state import EventLedger, SettingsStore, SyncCursor
from .engine import filter_new_events, group_by_date


class SyncOrchestrator:
    """
    Runs sync cycles against injected state, fetcher and note merger.
    """

    def __init__(self, settings_store: SettingsStore, ledger: EventLedger,
                 fetcher: RelayFetcher, merger: NoteMerger,
                 resolver: Callable[[str], str] = resolve_identifier,
                 clock: Callable[[], float] = time.time,
                 tz: Optional[tzinfo] = None):
        """
        Initialize the orchestrator.

        Args:
            settings_store: Holds the identifier, relays and sync cursor
            ledger: Event ids already merged into notes
            fetcher: Relay client used to query events
            merger: Writes events into daily notes
            resolver: Maps the configured identifier to a hex public key
            clock: Returns the current time in seconds since epoch
            tz: Zone for day boundaries; defaults to the merger's zone
        """
        self.settings_store = settings_store
        self.ledger = ledger
        self.fetcher = fetcher
        self.merger = merger
        self.resolver = resolver
        self.clock = clock
        self.tz = tz or getattr(merger, "tz", timezone.utc)
        self.cursor = SyncCursor(settings_store)
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    def build_filter(self, pubkey: str) -> SyncFilter:
        """Build the relay query for ``pubkey``, bounded by the cursor once one exists."""
        since = self.cursor.value
        return SyncFilter(
            kinds=[TEXT_NOTE_KIND],
            authors=[pubkey],
            since=since if since > 0 else None,
        )

    def run_sync_cycle(self) -> SyncResult:
        """
        Run one sync cycle unless another one is already in progress.

        Returns:
            The cycle outcome; ``skipped`` is set when the call overlapped
            a running cycle
        """
        if not self._lock.acquire(blocking=False):
            logging.warning("Sync already in progress, skipping this trigger")
            return SyncResult(skipped=True)

        try:
            return self._run_cycle()
        finally:
            self._lock.release()

    def _run_cycle(self) -> SyncResult:
        settings = self.settings_store.settings

        if not settings.identifier:
            return self._report_failure("Please configure your identifier (npub) in settings")

        logging.info("Syncing posts...")

        try:
            pubkey = self.resolver(settings.identifier)
            sync_filter = self.build_filter(pubkey)
            logging.debug(f"Relay filter: {sync_filter.to_wire()}")
            events = self.fetcher.fetch(settings.relays, sync_filter)
        except ConfigurationError as e:
            return self._report_failure(f"Configuration error - {e}")
        except FetchFailed as e:
            return self._report_failure(f"Fetch failed - {e}")

        new_events = filter_new_events(events, self.ledger)
        if not new_events:
            logging.info("No new posts to sync")
            return SyncResult()

        merged, failed_dates = self._merge_groups(new_events)

        try:
            if merged:
                self.ledger.add_all(event.id for event in merged)
                self.ledger.save()
            if not failed_dates:
                self.cursor.advance(int(self.clock()))
        except PersistenceFailed as e:
            return self._report_failure(
                f"Sync state not saved - {e}",
                synced_count=len(merged),
                failed_dates=failed_dates,
            )

        if failed_dates:
            return self._report_failure(
                f"Failed to write notes for {', '.join(failed_dates)}",
                synced_count=len(merged),
                failed_dates=failed_dates,
            )

        logging.info(f"Synced {len(merged)} new post(s)")
        return SyncResult(synced_count=len(merged))

    def _merge_groups(self, events: List[NostrEvent]):
        """
        Merge each date group independently.

        Returns:
            Tuple of (events merged, dates that failed)
        """
        merged: List[NostrEvent] = []
        failed_dates: List[str] = []

        for date, date_events in group_by_date(events, self.tz).items():
            try:
                self.merger.merge(date, date_events)
            except MergeFailed as e:
                logging.error(f"Failed to merge posts into note for {e.date}: {e.reason}")
                failed_dates.append(date)
                continue
            merged.extend(date_events)

        return merged, failed_dates

    @staticmethod
    def _report_failure(reason: str, synced_count: int = 0,
                        failed_dates: Optional[List[str]] = None) -> SyncResult:
        logging.error(f"Sync failed - {reason}")
        return SyncResult(
            synced_count=synced_count,
            error=reason,
            failed_dates=failed_dates or [],
        )
