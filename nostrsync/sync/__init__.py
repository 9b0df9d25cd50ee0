"""Differential sync engine, orchestrator and timer."""

from .engine import filter_new_events, group_by_date, date_key, resolve_timezone
from .orchestrator import SyncOrchestrator
from .scheduler import SyncScheduler

__all__ = [
    "filter_new_events",
    "group_by_date",
    "date_key",
    "resolve_timezone",
    "SyncOrchestrator",
    "SyncScheduler"
]
