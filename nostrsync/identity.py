"""
Author identifier resolution for nostrsync.

Turns the human-readable identifier from the settings into the canonical
hex public key used in relay filters. Supported forms:

- ``npub1...`` bech32 keys (NIP-19)
- 64-character hex keys
- ``name@domain`` internet identifiers (NIP-05), looked up over HTTPS
"""

import logging
import re
from typing import Optional

import httpx
from nostr_sdk import PublicKey

from .errors import ConfigurationError, FetchFailed, InvalidIdentifier


HEX_KEY_PATTERN = re.compile(r"^[0-9a-fA-F]{64}$")
NIP05_PATTERN = re.compile(r"^([a-zA-Z0-9._-]+)@([a-zA-Z0-9-]+(?:\.[a-zA-Z0-9-]+)+)$")


def resolve_identifier(identifier: str, timeout: float = 10.0,
                       client: Optional[httpx.Client] = None) -> str:
    """
    Resolve a configured identifier to a lowercase hex public key.

    Args:
        identifier: npub, hex key or NIP-05 address
        timeout: Timeout for NIP-05 lookups in seconds
        client: Optional HTTP client for NIP-05 lookups

    Returns:
        The author's public key in hex

    Raises:
        ConfigurationError: If no identifier is configured
        InvalidIdentifier: If the identifier is malformed or unknown
        FetchFailed: If a NIP-05 lookup cannot reach the domain
    """
    value = (identifier or "").strip()
    if not value:
        raise ConfigurationError("No identifier configured")

    if NIP05_PATTERN.match(value):
        return resolve_nip05(value, timeout=timeout, client=client)

    if HEX_KEY_PATTERN.match(value):
        value = value.lower()
    elif not value.startswith("npub1"):
        raise InvalidIdentifier(f"Unsupported identifier format: {value}")

    try:
        return PublicKey.parse(value).to_hex()
    except Exception as e:
        raise InvalidIdentifier(f"Invalid public key {value}: {e}") from e


def resolve_nip05(address: str, timeout: float = 10.0,
                  client: Optional[httpx.Client] = None) -> str:
    """
    Look up a NIP-05 address via ``https://<domain>/.well-known/nostr.json``.

    Args:
        address: Internet identifier in ``name@domain`` form
        timeout: Request timeout in seconds
        client: Optional HTTP client; a temporary one is created otherwise

    Returns:
        The hex public key published for ``name``
    """
    name, domain = address.split("@", 1)
    name = name.lower()
    url = f"https://{domain}/.well-known/nostr.json"

    owns_client = client is None
    http = client or httpx.Client(timeout=timeout, follow_redirects=False)

    try:
        response = http.get(url, params={"name": name})
        response.raise_for_status()
        payload = response.json()
    except httpx.RequestError as e:
        raise FetchFailed(f"Failed to reach {domain} for NIP-05 lookup: {e}") from e
    except httpx.HTTPStatusError as e:
        raise InvalidIdentifier(f"NIP-05 lookup for {address} failed: {e}") from e
    except ValueError as e:
        raise InvalidIdentifier(f"NIP-05 document at {url} is not valid JSON") from e
    finally:
        if owns_client:
            http.close()

    names = payload.get("names") if isinstance(payload, dict) else None
    pubkey = names.get(name) if isinstance(names, dict) else None

    if not isinstance(pubkey, str) or not HEX_KEY_PATTERN.match(pubkey):
        raise InvalidIdentifier(f"{address} is not published by {domain}")

    logging.info(f"Resolved {address} to {pubkey[:8]}...")
    return pubkey.lower()
