import json

import pytest
from nostr_sdk import Event, EventBuilder, Keys

from nostrsync.errors import FetchFailed
from nostrsync.models import SyncFilter
from nostrsync.relays.nostr import NostrRelayFetcher, build_sdk_filter, to_model


class CannedRelayFetcher(NostrRelayFetcher):
    """NostrRelayFetcher whose relay round-trip returns fixed SDK events."""

    def __init__(self, raw_events):
        super().__init__(timeout=1)
        self.raw_events = raw_events
        self.queries = []

    async def _fetch_async(self, relays, sync_filter):
        self.queries.append((relays, sync_filter))
        return self.raw_events


@pytest.fixture
def keys():
    return Keys.generate()


def text_note(keys, content):
    return EventBuilder.text_note(content).sign_with_keys(keys)


def tampered(event, content):
    data = json.loads(event.as_json())
    data["content"] = content
    return Event.from_json(json.dumps(data))


def test_filter_maps_kinds_authors_and_since(keys):
    pubkey = keys.public_key().to_hex()

    wire = json.loads(build_sdk_filter(SyncFilter(authors=[pubkey], since=1700000000)).as_json())

    assert wire["kinds"] == [1]
    assert wire["authors"] == [pubkey]
    assert wire["since"] == 1700000000


def test_filter_without_since_has_no_lower_bound(keys):
    wire = json.loads(build_sdk_filter(SyncFilter(authors=[keys.public_key().to_hex()])).as_json())

    assert "since" not in wire


def test_to_model_copies_event_fields(keys):
    event = text_note(keys, "gm ✨")

    model = to_model(event)

    assert model.id == event.id().to_hex()
    assert model.pubkey == keys.public_key().to_hex()
    assert model.created_at == event.created_at().as_secs()
    assert model.kind == 1
    assert model.content == "gm ✨"
    assert len(model.sig) == 128


def test_fetch_drops_bad_signatures_and_duplicates(keys, caplog):
    first = text_note(keys, "first")
    second = text_note(keys, "second")
    forged = tampered(text_note(keys, "original"), "forged")
    fetcher = CannedRelayFetcher([first, forged, second, first])

    with caplog.at_level("WARNING"):
        events = fetcher.fetch(["wss://relay.example"], SyncFilter())

    assert [event.content for event in events] == ["first", "second"]
    assert "invalid signatures" in caplog.text


def test_fetch_without_relays_fails():
    with pytest.raises(FetchFailed):
        NostrRelayFetcher().fetch([], SyncFilter())


def test_fetch_with_only_invalid_relay_urls_fails():
    with pytest.raises(FetchFailed, match="No valid relay"):
        NostrRelayFetcher(timeout=1).fetch(["not a relay url"], SyncFilter())


def test_fetch_with_unreachable_relays_fails(keys):
    fetcher = NostrRelayFetcher(timeout=2)
    sync_filter = SyncFilter(authors=[keys.public_key().to_hex()])

    with pytest.raises(FetchFailed, match="could be reached"):
        fetcher.fetch(["ws://127.0.0.1:1", "ws://127.0.0.1:2"], sync_filter)
