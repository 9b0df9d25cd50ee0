"""
Pure steps of the differential sync: ledger filtering and grouping by day.
"""

import time
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Container, Dict, Iterable, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..errors import ConfigurationError
from ..models import NostrEvent


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class LocalTimezone(tzinfo):
    """
    The host's zone, looked up per instant.

    Each conversion asks the C library for the offset at that moment, so
    timestamps on either side of a daylight-saving change get their own
    offset.
    """

    def fromutc(self, dt: datetime) -> datetime:
        timestamp = (dt.replace(tzinfo=timezone.utc) - _EPOCH).total_seconds()
        return dt + timedelta(seconds=time.localtime(timestamp).tm_gmtoff)

    def utcoffset(self, dt: Optional[datetime]) -> timedelta:
        return timedelta(seconds=self._local_time(dt).tm_gmtoff)

    def dst(self, dt: Optional[datetime]) -> timedelta:
        if self._local_time(dt).tm_isdst > 0:
            return self.utcoffset(dt) - timedelta(seconds=-time.timezone)
        return timedelta(0)

    def tzname(self, dt: Optional[datetime]) -> str:
        return self._local_time(dt).tm_zone

    @staticmethod
    def _local_time(dt: Optional[datetime]) -> time.struct_time:
        if dt is None:
            return time.localtime()
        return time.localtime(time.mktime(dt.replace(tzinfo=None).timetuple()))

    def __repr__(self) -> str:
        return "LocalTimezone()"


def resolve_timezone(name: str) -> tzinfo:
    """
    Map a configured zone name to a tzinfo.

    ``UTC`` (the default) gives fixed day boundaries; ``local`` uses the
    host's zone; anything else is read as an IANA name.
    """
    if not name or name.upper() == "UTC":
        return timezone.utc
    if name.lower() == "local":
        return LocalTimezone()
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(f"Unknown time zone: {name}") from e


def filter_new_events(batch: Iterable[NostrEvent], ledger: Container[str]) -> List[NostrEvent]:
    """
    Drop events whose id is already in the ledger.

    Input order is preserved. A repeated id within the batch is kept only at
    its first occurrence.
    """
    new_events = []
    seen = set()
    for event in batch:
        if event.id in ledger or event.id in seen:
            continue
        seen.add(event.id)
        new_events.append(event)
    return new_events


def date_key(timestamp: int, tz: tzinfo = timezone.utc) -> str:
    """Return the YYYY-MM-DD calendar date of ``timestamp`` in ``tz``."""
    return datetime.fromtimestamp(timestamp, tz).strftime("%Y-%m-%d")


def group_by_date(events: Iterable[NostrEvent], tz: tzinfo = timezone.utc) -> Dict[str, List[NostrEvent]]:
    """
    Partition events by calendar date.

    Groups appear in order of first occurrence and keep batch order inside.
    """
    groups: Dict[str, List[NostrEvent]] = {}
    for event in events:
        groups.setdefault(date_key(event.created_at, tz), []).append(event)
    return groups
