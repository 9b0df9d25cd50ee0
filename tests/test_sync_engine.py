import time
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pytest

from nostrsync.errors import ConfigurationError
from nostrsync.models import NostrEvent
from nostrsync.sync.engine import (
    LocalTimezone, date_key, filter_new_events, group_by_date, resolve_timezone,
)


def make_event(event_id, created_at, content=""):
    return NostrEvent(id=event_id, pubkey="ab" * 32, created_at=created_at, content=content)


# 2024-05-22T00:00:00Z
MIDNIGHT = 1716336000


@pytest.fixture
def batch():
    return [
        make_event("a", MIDNIGHT + 3600, "one"),
        make_event("b", MIDNIGHT - 1, "two"),
        make_event("c", MIDNIGHT, "three"),
        make_event("d", MIDNIGHT + 86400 + 5, "four"),
    ]


def test_filter_drops_ledger_ids_and_keeps_order(batch):
    result = filter_new_events(batch, {"b", "x"})
    assert [event.id for event in result] == ["a", "c", "d"]


def test_filter_is_idempotent(batch):
    ledger = {"c"}
    once = filter_new_events(batch, ledger)
    assert filter_new_events(once, ledger) == once


def test_filtered_ids_are_disjoint_from_ledger(batch):
    ledger = {"a", "d", "zzz"}
    result = filter_new_events(batch, ledger)
    assert not {event.id for event in result} & ledger


def test_filter_collapses_repeated_ids(batch):
    duplicate = make_event("a", MIDNIGHT + 7200, "same id again")
    result = filter_new_events(batch + [duplicate], set())
    assert [event.id for event in result] == ["a", "b", "c", "d"]
    assert result[0].content == "one"


def test_filter_with_empty_ledger_returns_everything(batch):
    assert filter_new_events(batch, set()) == batch


def test_group_by_date_partitions_batch(batch):
    groups = group_by_date(batch)

    assert list(groups) == ["2024-05-22", "2024-05-21", "2024-05-23"]
    assert [event.id for event in groups["2024-05-22"]] == ["a", "c"]
    assert [event.id for event in groups["2024-05-21"]] == ["b"]
    assert [event.id for event in groups["2024-05-23"]] == ["d"]

    flattened = [event for events in groups.values() for event in events]
    assert sorted(event.id for event in flattened) == sorted(event.id for event in batch)


def test_event_at_midnight_lands_in_new_day():
    assert date_key(MIDNIGHT) == "2024-05-22"
    assert date_key(MIDNIGHT - 1) == "2024-05-21"


def test_group_by_date_respects_zone():
    plus_two = timezone(timedelta(hours=2))
    event = make_event("late", MIDNIGHT - 3600)

    assert list(group_by_date([event])) == ["2024-05-21"]
    assert list(group_by_date([event], plus_two)) == ["2024-05-22"]


def test_group_by_date_empty():
    assert group_by_date([]) == {}


def test_resolve_timezone_defaults_to_utc():
    assert resolve_timezone("UTC") is timezone.utc
    assert resolve_timezone("") is timezone.utc


def test_resolve_timezone_rejects_unknown_zone():
    with pytest.raises(ConfigurationError):
        resolve_timezone("Not/AZone")


# 2024-01-15T04:30:00Z and 2024-07-15T03:30:00Z, both 23:30 the previous
# evening in New York (EST and EDT respectively)
WINTER_EVENING = 1705293000
SUMMER_EVENING = 1721014200


@pytest.fixture
def new_york(monkeypatch):
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    try:
        ZoneInfo("America/New_York")
    except ZoneInfoNotFoundError:
        pytest.skip("no time zone database installed")
    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


def test_resolve_timezone_local():
    assert isinstance(resolve_timezone("local"), LocalTimezone)
    assert isinstance(resolve_timezone("Local"), LocalTimezone)


def test_local_zone_matches_host_clock():
    tz = LocalTimezone()
    for timestamp in (0, MIDNIGHT, WINTER_EVENING, SUMMER_EVENING):
        local = datetime.fromtimestamp(timestamp, tz)
        assert local.replace(tzinfo=None) == datetime.fromtimestamp(timestamp)
        assert local.timestamp() == timestamp


def test_local_zone_follows_daylight_saving(new_york):
    tz = resolve_timezone("local")

    assert date_key(WINTER_EVENING, tz) == "2024-01-14"
    assert date_key(SUMMER_EVENING, tz) == "2024-07-14"
    assert datetime.fromtimestamp(WINTER_EVENING, tz).strftime("%H:%M") == "23:30"
    assert datetime.fromtimestamp(SUMMER_EVENING, tz).strftime("%H:%M") == "23:30"
    assert datetime.fromtimestamp(WINTER_EVENING, tz).utcoffset() == timedelta(hours=-5)
    assert datetime.fromtimestamp(SUMMER_EVENING, tz).utcoffset() == timedelta(hours=-4)
