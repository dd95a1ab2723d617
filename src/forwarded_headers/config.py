"""Forwarded headers configuration — trusted proxy policy and fluent builders."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from ipaddress import IPv4Address, IPv4Network, IPv6Address, IPv6Network, ip_network

from forwarded_headers.core.addresses import parse_ip

logger = logging.getLogger("forwarded_headers.config")

TRUST_ALL_WILDCARD = "*"
DEFAULT_FORWARD_LIMIT = 1
DEFAULT_TRUSTED_PROXIES = (IPv4Address("127.0.0.1"),)


def parse_network(cidr: str) -> IPv4Network | IPv6Network | None:
    """Parse an ``addr/prefix`` string. Host bits are masked off; bare IPs are rejected."""
    text = cidr.strip() if isinstance(cidr, str) else ""
    if "/" not in text:
        return None
    try:
        return ip_network(text, strict=False)
    except ValueError:
        return None


@dataclass(frozen=True, slots=True)
class ForwardedHeadersOptions:
    """Which senders may assert a forwarded client address, and how far to walk.

    Immutable: every builder method returns a new instance, so an options value
    shared by concurrent requests can never change underneath them.

    Example:
        ForwardedHeadersOptions()                                   # loopback only, 1 hop
        ForwardedHeadersOptions().with_forward_limit(2)
        ForwardedHeadersOptions().clear_trusted_proxies().add_trusted_network("10.0.0.0/8")
    """

    forward_limit: int = DEFAULT_FORWARD_LIMIT
    trusted_proxies: tuple[IPv4Address | IPv6Address, ...] = DEFAULT_TRUSTED_PROXIES
    trusted_networks: tuple[IPv4Network | IPv6Network, ...] = ()
    trust_all: bool = False
    check_intermediate_hops: bool = False

    def __post_init__(self) -> None:
        """Validate typed fields at construction time."""
        if isinstance(self.forward_limit, bool) or not isinstance(self.forward_limit, int):
            raise ValueError(f"forward_limit must be an integer, got {self.forward_limit!r}")
        if self.forward_limit < 0:
            raise ValueError(f"forward_limit must be >= 0, got {self.forward_limit}")

    # ------ Trust decision ------

    def is_trusted_proxy(self, ip: str | IPv4Address | IPv6Address | None) -> bool:
        addr = parse_ip(ip)
        if addr is None:
            return False
        if self.trust_all:
            return True
        if addr in self.trusted_proxies:
            return True
        return any(addr in net for net in self.trusted_networks)

    # ------ Builders ------

    def with_forward_limit(self, limit: int) -> ForwardedHeadersOptions:
        """Set how many header entries are processed (0 = no limit). Negative values are ignored."""
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
            logger.debug("Ignoring invalid forward limit %r", limit)
            return self
        return replace(self, forward_limit=limit)

    def clear_trusted_proxies(self) -> ForwardedHeadersOptions:
        """Drop every exact-address entry, including the ``*`` wildcard."""
        return replace(self, trusted_proxies=(), trust_all=False)

    def add_trusted_proxy(self, ip: str) -> ForwardedHeadersOptions:
        if isinstance(ip, str) and ip.strip() == TRUST_ALL_WILDCARD:
            return self.trust_all_proxies()
        addr = parse_ip(ip)
        if addr is None:
            logger.debug("Ignoring invalid trusted proxy %r", ip)
            return self
        if addr in self.trusted_proxies:
            return self
        return replace(self, trusted_proxies=(*self.trusted_proxies, addr))

    def clear_trusted_networks(self) -> ForwardedHeadersOptions:
        return replace(self, trusted_networks=())

    def add_trusted_network(self, cidr: str) -> ForwardedHeadersOptions:
        network = parse_network(cidr)
        if network is None:
            logger.debug("Ignoring invalid trusted network %r", cidr)
            return self
        if network in self.trusted_networks:
            return self
        return replace(self, trusted_networks=(*self.trusted_networks, network))

    def trust_all_proxies(self) -> ForwardedHeadersOptions:
        return replace(self, trust_all=True)

    def with_intermediate_hop_checks(self, enabled: bool = True) -> ForwardedHeadersOptions:
        """Require every hop inside the forward limit to be a trusted proxy too."""
        return replace(self, check_intermediate_hops=bool(enabled))
