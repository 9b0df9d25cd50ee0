"""
Settings and result models for nostrsync.
"""

from typing import List, Optional
from pydantic import BaseModel, Field, field_validator


DEFAULT_RELAYS = ["wss://relay.damus.io", "wss://nos.lol"]
DEFAULT_INTERVAL_MINUTES = 10


class SyncSettings(BaseModel):
    """
    User settings plus the persisted sync cursor.

    ``last_sync_timestamp`` is stored with the settings but is owned by the
    sync orchestrator; it is not meant to be edited by hand.
    """

    identifier: str = Field(
        "",
        description="The author's public identifier (npub, hex key or NIP-05 address)"
    )

    relays: List[str] = Field(
        default_factory=lambda: list(DEFAULT_RELAYS),
        description="Ordered list of relay WebSocket URLs"
    )

    interval_minutes: int = Field(
        DEFAULT_INTERVAL_MINUTES,
        description="How often the timer runs a sync cycle"
    )

    last_sync_timestamp: int = Field(
        0,
        description="Watermark (seconds since epoch) of the last completed sync"
    )

    @field_validator("identifier", mode="before")
    @classmethod
    def _strip_identifier(cls, value):
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("relays", mode="before")
    @classmethod
    def _split_relays(cls, value):
        # The settings form takes a comma-separated string
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        return [str(relay).strip() for relay in value if str(relay).strip()]

    @field_validator("interval_minutes")
    @classmethod
    def _positive_interval(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("interval_minutes must be a positive integer")
        return value

    @field_validator("last_sync_timestamp")
    @classmethod
    def _non_negative_cursor(cls, value: int) -> int:
        if value < 0:
            raise ValueError("last_sync_timestamp cannot be negative")
        return value


class SyncResult(BaseModel):
    """
    Outcome of one sync cycle.
    """

    synced_count: int = Field(
        0,
        description="Number of events merged into notes and recorded in the ledger"
    )

    error: Optional[str] = Field(
        None,
        description="Short reason string when the cycle failed, fully or partially"
    )

    failed_dates: List[str] = Field(
        default_factory=list,
        description="Dates whose notes could not be written; their events are retried next cycle"
    )

    skipped: bool = Field(
        False,
        description="True when the trigger was ignored because another cycle was running"
    )

    @property
    def status(self) -> str:
        """One of ``skipped``, ``idle``, ``synced``, ``partial`` or ``failed``."""
        if self.skipped:
            return "skipped"
        if self.error is None:
            return "synced" if self.synced_count else "idle"
        return "partial" if self.synced_count else "failed"
