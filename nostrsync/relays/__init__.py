"""Relay fetchers for nostrsync."""

from .base import RelayFetcher
from .mock import MockRelayFetcher
from .nostr import NostrRelayFetcher

__all__ = ["RelayFetcher", "MockRelayFetcher", "NostrRelayFetcher"]
