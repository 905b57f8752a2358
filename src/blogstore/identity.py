"""
Caller identity helpers.

Talk messages are attributed to a pseudonym derived from the caller's network
address, never to anything the client sends. This module holds the three
pieces of that derivation:

- :func:`client_address`: best-effort originating address of a request.
- :func:`derive_identity`: one-way, deterministic ``user_<12 hex>`` pseudonym.
- :func:`avatar_url`: deterministic avatar URL for a pseudonym.
"""

from __future__ import annotations

import hashlib
from collections.abc import Mapping

from starlette.requests import Request

UNKNOWN_ADDRESS = "unknown"
IDENTITY_PREFIX = "user_"
IDENTITY_HEX_LENGTH = 12


def address_from_headers(headers: Mapping[str, str], peer: str | None = None) -> str:
    """
    Resolve the originating address from proxy headers and the socket peer.

    Order: first entry of ``X-Forwarded-For``, then ``X-Real-IP``, then
    ``peer``. Falls back to ``"unknown"``; never raises.
    """
    forwarded = headers.get("x-forwarded-for") or ""
    first = forwarded.split(",")[0].strip()
    if first:
        return first

    real_ip = (headers.get("x-real-ip") or "").strip()
    if real_ip:
        return real_ip

    if peer:
        return peer
    return UNKNOWN_ADDRESS


def client_address(request: Request) -> str:
    """Return the best-effort originating address of ``request``."""
    peer = request.client.host if request.client else None
    return address_from_headers(request.headers, peer)


def derive_identity(address: str | None) -> str:
    """Hash ``address`` (SHA-256) into a stable ``user_<12 hex chars>`` pseudonym."""
    digest = hashlib.sha256((address or UNKNOWN_ADDRESS).encode("utf-8")).hexdigest()
    return f"{IDENTITY_PREFIX}{digest[:IDENTITY_HEX_LENGTH]}"


def avatar_url(user: str, base_url: str) -> str:
    return f"{base_url}{user}"


__all__ = [
    "UNKNOWN_ADDRESS",
    "address_from_headers",
    "avatar_url",
    "client_address",
    "derive_identity",
]
