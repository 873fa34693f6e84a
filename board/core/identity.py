"""Caller identity derivation.

The board has no accounts. Each requester is attributed to a coarse
fingerprint derived from its network address, which keys both post
ownership and the posting rate limit. Distinct people behind one address
share a fingerprint.
"""

from __future__ import annotations

import hashlib
from typing import Protocol

from fastapi import Request

UNKNOWN_ADDRESS = "unknown"


class IdentityDeriver(Protocol):
    """Turns a raw requester address into an opaque, stable identity key."""

    def derive(self, address: str) -> str: ...


class AddressHashIdentity:
    """Identity as a truncated SHA-256 of the requester address.

    Args:
        prefix_bytes: Digest bytes kept; the key is twice as many hex chars.

    Examples:
        >>> AddressHashIdentity().derive("127.0.0.1")
        '12ca17b49af22894'
    """

    def __init__(self, prefix_bytes: int = 8) -> None:
        if not 1 <= prefix_bytes <= hashlib.sha256().digest_size:
            raise ValueError("prefix_bytes must be between 1 and 32")
        self._prefix_bytes = prefix_bytes

    def derive(self, address: str) -> str:
        digest = hashlib.sha256(address.encode("utf-8")).digest()
        return digest[: self._prefix_bytes].hex()


def resolve_client_address(request: Request, *, trust_proxy_headers: bool = True) -> str:
    """Return the best-known address of the client behind ``request``.

    With proxy headers trusted, the first ``X-Forwarded-For`` hop wins, then
    ``X-Real-IP``; otherwise (or when neither is set) the socket peer is used.
    """

    if trust_proxy_headers:
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            first_hop = forwarded_for.split(",")[0].strip()
            if first_hop:
                return first_hop
        real_ip = request.headers.get("x-real-ip", "").strip()
        if real_ip:
            return real_ip

    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_ADDRESS


def get_current_user(request: Request) -> str:
    """FastAPI dependency returning the caller's identity key."""

    state = request.app.state
    address = resolve_client_address(
        request,
        trust_proxy_headers=state.settings.app.trust_proxy_headers,
    )
    return state.identity.derive(address)
