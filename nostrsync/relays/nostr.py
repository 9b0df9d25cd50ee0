"""
Relay fetcher backed by nostr-sdk.

Connects a nostr-sdk client to the configured relays, runs one query and
converts the verified results into NostrEvent models.
"""

import asyncio
import contextlib
import logging
from datetime import timedelta
from typing import List

from nostr_sdk import Client, Filter, Kind, PublicKey, RelayUrl, Timestamp
from nostr_sdk import Event as SdkEvent

from ..errors import FetchFailed
from ..models import NostrEvent, SyncFilter
from .base import RelayFetcher


def build_sdk_filter(sync_filter: SyncFilter) -> Filter:
    """Build a nostr-sdk ``Filter`` from a SyncFilter."""
    f = Filter().kinds([Kind(k) for k in sync_filter.kinds])
    if sync_filter.authors:
        f = f.authors([PublicKey.parse(author) for author in sync_filter.authors])
    if sync_filter.since is not None:
        f = f.since(Timestamp.from_secs(sync_filter.since))
    return f


def to_model(evt: SdkEvent) -> NostrEvent:
    """Convert a nostr-sdk event into a NostrEvent."""
    return NostrEvent(
        id=evt.id().to_hex(),
        pubkey=evt.author().to_hex(),
        created_at=evt.created_at().as_secs(),
        kind=evt.kind().as_u16(),
        tags=[tag.as_vec() for tag in evt.tags().to_vec()],
        content=evt.content(),
        sig=str(evt.signature()),
    )


class NostrRelayFetcher(RelayFetcher):
    """
    Fetches events from relays with a short-lived nostr-sdk client per query.
    """

    def __init__(self, timeout: float = 10.0):
        """
        Initialize the fetcher.

        Args:
            timeout: Seconds to wait for relays to answer a query
        """
        self.timeout = timeout

    def fetch(self, relays: List[str], sync_filter: SyncFilter) -> List[NostrEvent]:
        if not relays:
            raise FetchFailed("No relays configured")

        try:
            raw_events = asyncio.run(self._fetch_async(relays, sync_filter))
        except FetchFailed:
            raise
        except Exception as e:
            raise FetchFailed(f"Relay query failed: {e}") from e

        events: List[NostrEvent] = []
        seen = set()
        invalid = 0

        for evt in raw_events:
            if not evt.verify():
                invalid += 1
                continue
            event = to_model(evt)
            if event.id in seen:
                continue
            seen.add(event.id)
            events.append(event)

        if invalid:
            logging.warning(f"Dropped {invalid} event(s) with invalid signatures")

        logging.info(f"Fetched {len(events)} event(s) from {len(relays)} relay(s)")
        return events

    async def _fetch_async(self, relays: List[str], sync_filter: SyncFilter) -> List[SdkEvent]:
        client = Client()
        added = 0

        for url in relays:
            try:
                await client.add_relay(RelayUrl.parse(url))
                added += 1
            except Exception as e:
                logging.warning(f"Skipping relay {url}: {e}")

        if not added:
            raise FetchFailed("No valid relay URLs configured")

        try:
            output = await client.try_connect(timedelta(seconds=self.timeout))
            for url, reason in dict(output.failed).items():
                logging.warning(f"Could not connect to relay {url}: {reason}")
            if not output.success:
                raise FetchFailed(f"None of {added} relay(s) could be reached")

            events = await client.fetch_events(
                build_sdk_filter(sync_filter), timedelta(seconds=self.timeout)
            )
            return events.to_vec()
        finally:
            # shutdown() can raise from the FFI layer during cleanup
            with contextlib.suppress(Exception):
                await client.shutdown()
