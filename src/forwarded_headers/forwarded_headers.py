"""ForwardedHeaders — instance-based proxy trust configuration and entry point."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from forwarded_headers.config import (
    TRUST_ALL_WILDCARD,
    ForwardedHeadersOptions,
    parse_network,
)
from forwarded_headers.core.addresses import PeerAddress, parse_ip
from forwarded_headers.core.resolver import resolve_from_headers

if TYPE_CHECKING:
    from fastapi import FastAPI, Request

logger = logging.getLogger("forwarded_headers.forwarded_headers")


class ForwardedHeaders:
    """Main instance — holds the trusted proxy policy and hands out integrations.

    Args:
        forward_limit: Number of X-Forwarded-For entries processed, right to left
            (default 1; 0 = no limit). Negative values keep the default.
        trusted_proxies: Proxy IPs (or CIDRs, or "*") allowed to set forwarded
            headers. None keeps the loopback default; a list replaces it.
        trusted_networks: CIDR ranges allowed to set forwarded headers.
        trust_all: Trust every peer. Only safe when the app is unreachable
            except through the proxy.
        check_intermediate_hops: Also require each hop within the limit to be a
            trusted proxy before reading further left.

    Invalid entries are dropped with a warning rather than raising.
    """

    def __init__(
        self,
        *,
        forward_limit: int = 1,
        trusted_proxies: Iterable[str] | None = None,
        trusted_networks: Iterable[str] | None = None,
        trust_all: bool = False,
        check_intermediate_hops: bool = False,
    ) -> None:
        options = ForwardedHeadersOptions()

        limited = options.with_forward_limit(forward_limit)
        if limited is options:
            logger.warning("Invalid forward_limit %r, keeping %d", forward_limit, options.forward_limit)
        options = limited

        if trusted_proxies is not None:
            options = options.clear_trusted_proxies()
            for entry in trusted_proxies:
                options = _add_proxy_entry(options, entry)

        for entry in trusted_networks or ():
            if parse_network(entry) is None:
                logger.warning("Ignoring invalid trusted network %r", entry)
                continue
            options = options.add_trusted_network(entry)

        if trust_all:
            options = options.trust_all_proxies()
        if check_intermediate_hops:
            options = options.with_intermediate_hop_checks()

        self._options = options

    @property
    def options(self) -> ForwardedHeadersOptions:
        """Read-only access to the resolved options."""
        return self._options

    # ------ Resolution ------

    def resolve(
        self, peer: PeerAddress | tuple[str, int] | None, headers: Mapping[str, str],
    ) -> PeerAddress | None:
        """Resolve a (peer, headers) pair outside any web framework."""
        if isinstance(peer, tuple):
            peer = PeerAddress.from_client(peer)
        return resolve_from_headers(peer, headers, self._options)

    def client_ip(self, request: Request) -> str | None:
        from forwarded_headers.integrations.fastapi.proxy import get_client_ip

        return get_client_ip(request, self._options)

    # ------ FastAPI integration ------

    def add_middleware(self, app: FastAPI) -> None:
        """Install ForwardedHeadersMiddleware on a FastAPI/Starlette app."""
        from forwarded_headers.integrations.fastapi.middleware import ForwardedHeadersMiddleware

        app.add_middleware(ForwardedHeadersMiddleware, options=self._options)

    def client_ip_dep(self):
        """FastAPI dependency yielding the resolved client IP string."""
        from forwarded_headers.integrations.fastapi.deps import create_client_ip_dep

        return create_client_ip_dep(self._options)


def _add_proxy_entry(options: ForwardedHeadersOptions, entry: str) -> ForwardedHeadersOptions:
    """Route one trusted_proxies entry: "*" → trust all, CIDR → network, else exact IP."""
    text = entry.strip() if isinstance(entry, str) else ""
    if text == TRUST_ALL_WILDCARD:
        return options.trust_all_proxies()
    if "/" in text:
        if parse_network(text) is None:
            logger.warning("Ignoring invalid trusted proxy %r", entry)
            return options
        return options.add_trusted_network(text)
    if parse_ip(text) is None:
        logger.warning("Ignoring invalid trusted proxy %r", entry)
        return options
    return options.add_trusted_proxy(text)
