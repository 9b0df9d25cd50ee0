"""
Event models for nostrsync.

This module defines the immutable record of a fetched Nostr event and the
query filter sent to relays.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


# NIP-01 short text note
TEXT_NOTE_KIND = 1


class NostrEvent(BaseModel):
    """
    A signed Nostr event as returned by a relay.

    Events are produced by the relay client and never mutated afterwards.
    The sync engine only reads ``id``, ``created_at`` and ``content``.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        description="Content-addressed event identifier (hex SHA-256 of the serialized event)"
    )

    pubkey: str = Field(
        ...,
        description="Author public key in hex"
    )

    created_at: int = Field(
        ...,
        description="The timestamp (seconds since epoch) when the event was created"
    )

    kind: int = Field(
        TEXT_NOTE_KIND,
        description="Event kind tag"
    )

    tags: List[List[str]] = Field(
        default_factory=list,
        description="Raw event tags"
    )

    content: str = Field(
        "",
        description="The text content of the post"
    )

    sig: str = Field(
        "",
        description="Schnorr signature over the event id"
    )


class SyncFilter(BaseModel):
    """
    Relay query for one sync cycle.

    ``since`` is only an optimization: relays may still return events that
    were already merged, so results are always re-filtered against the ledger.
    """

    kinds: List[int] = Field(
        default_factory=lambda: [TEXT_NOTE_KIND],
        description="Event kinds to request"
    )

    authors: List[str] = Field(
        default_factory=list,
        description="Hex public keys of the authors to request"
    )

    since: Optional[int] = Field(
        None,
        description="Lower time bound (seconds since epoch), omitted on the first sync"
    )

    def to_wire(self) -> Dict[str, Any]:
        """Return the filter in its relay wire shape, without unset fields."""
        return self.model_dump(exclude_none=True)
