"""Forwarded header resolution — walk the proxy chain back to the client.

``X-Forwarded-For: <client>, <proxy1>, <proxy2>`` lists addresses oldest
first; each proxy appends the address it received the request from. The walk
therefore starts at the rightmost entry, which was written by the direct peer,
and moves left while the sender of each entry is trusted and the forward limit
allows it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from forwarded_headers.config import ForwardedHeadersOptions
from forwarded_headers.core.addresses import IPAddress, PeerAddress, parse_ip

logger = logging.getLogger("forwarded_headers.resolver")

X_FORWARDED_FOR = "x-forwarded-for"
X_REAL_IP = "x-real-ip"

ForwardedChain = tuple[IPAddress | None, ...]


def parse_forwarded_for(value: str) -> ForwardedChain:
    """Split an X-Forwarded-For value into a chain, keeping malformed entries as None."""
    return tuple(parse_ip(part) for part in value.split(","))


def build_chain(forwarded_for: str | None, real_ip: str | None) -> ForwardedChain:
    """X-Forwarded-For wins; X-Real-IP is a single-entry fallback."""
    if forwarded_for and forwarded_for.strip():
        return parse_forwarded_for(forwarded_for)
    if real_ip and real_ip.strip():
        return (parse_ip(real_ip),)
    return ()


def _walk_chain(
    chain: ForwardedChain, options: ForwardedHeadersOptions,
) -> tuple[IPAddress | None, int]:
    """Return (last well-formed entry consumed, hops consumed).

    The direct peer has already been checked, so the rightmost entry is always
    eligible. A malformed entry uses up a hop and ends the walk: nothing to its
    left can be attributed to a known sender.
    """
    resolved: IPAddress | None = None
    sender: IPAddress | None = None
    consumed = 0

    for entry in reversed(chain):
        if options.forward_limit and consumed >= options.forward_limit:
            break
        if consumed and options.check_intermediate_hops and not options.is_trusted_proxy(sender):
            break
        consumed += 1
        if entry is None:
            break
        resolved = entry
        sender = entry

    return resolved, consumed


def resolve_client_address(
    peer: PeerAddress | None,
    forwarded_for: str | None,
    real_ip: str | None,
    options: ForwardedHeadersOptions,
) -> PeerAddress | None:
    """Resolve the effective client address for a request.

    Resolution order:
    1. No transport peer → None.
    2. Peer not a trusted proxy → peer unchanged (headers never read).
    3. Otherwise walk X-Forwarded-For (or X-Real-IP) from the right.
    4. Nothing usable in the headers → peer unchanged.
    """
    if peer is None:
        return None

    if not options.is_trusted_proxy(peer.ip):
        if forwarded_for or real_ip:
            logger.debug("Ignoring forwarded headers from untrusted peer %s", peer)
        return peer

    chain = build_chain(forwarded_for, real_ip)
    if not chain:
        return peer

    resolved, hops = _walk_chain(chain, options)
    if resolved is None:
        logger.debug("No usable forwarded address from %s after %d hop(s)", peer, hops)
        return peer

    logger.debug("Resolved client %s via %d hop(s) from peer %s", resolved, hops, peer)
    return PeerAddress.forwarded(resolved)


def join_forwarded_for(values: Iterable[str]) -> str | None:
    """Fold repeated X-Forwarded-For lines into one value, keeping arrival order.

    Proxies may append their own header line instead of extending the existing
    one; the last line is still the most recent hop.
    """
    lines = [value for value in values if value is not None]
    return ", ".join(lines) if lines else None


def _get_header(headers: Mapping[str, str], name: str) -> str | None:
    value = headers.get(name)
    if value is not None:
        return value
    for key, candidate in headers.items():
        if key.lower() == name:
            return candidate
    return None


def _get_forwarded_for(headers: Mapping[str, str]) -> str | None:
    # Starlette's Headers.get returns only the first of several lines.
    getlist = getattr(headers, "getlist", None)
    if callable(getlist):
        return join_forwarded_for(getlist(X_FORWARDED_FOR))
    return _get_header(headers, X_FORWARDED_FOR)


def resolve_from_headers(
    peer: PeerAddress | None,
    headers: Mapping[str, str],
    options: ForwardedHeadersOptions,
) -> PeerAddress | None:
    """Same as resolve_client_address, reading both headers from a mapping (any key case).

    Multi-value mappings (``getlist``) have repeated X-Forwarded-For lines joined.
    """
    return resolve_client_address(
        peer,
        _get_forwarded_for(headers),
        _get_header(headers, X_REAL_IP),
        options,
    )
