"""Address model — peer addresses and IP literal parsing."""

from __future__ import annotations

from dataclasses import dataclass
from ipaddress import IPv4Address, IPv6Address, ip_address

IPAddress = IPv4Address | IPv6Address


def parse_ip(value: str | IPAddress | None) -> IPAddress | None:
    """Parse an IP literal, returning None for anything unparseable.

    IPv4-mapped IPv6 addresses (``::ffff:10.0.0.1``) are unwrapped to IPv4 so
    dual-stack listeners compare equal to their IPv4 trust entries.
    """
    if value is None:
        return None
    if isinstance(value, (IPv4Address, IPv6Address)):
        addr = value
    else:
        text = value.strip()
        if not text:
            return None
        try:
            addr = ip_address(text)
        except ValueError:
            return None
    if isinstance(addr, IPv6Address) and addr.ipv4_mapped is not None:
        return addr.ipv4_mapped
    return addr


@dataclass(frozen=True, slots=True)
class PeerAddress:
    """Host/port pair as seen by the next layer.

    Forwarded addresses carry port 0: the original client port is not
    recoverable from proxy headers.
    """

    host: str
    port: int = 0

    @property
    def ip(self) -> IPAddress | None:
        return parse_ip(self.host)

    @classmethod
    def from_client(cls, client: tuple[str, int] | None) -> PeerAddress | None:
        """Build from an ASGI ``scope["client"]`` tuple."""
        if client is None:
            return None
        host, port = client
        return cls(host=host, port=port or 0)

    @classmethod
    def forwarded(cls, ip: IPAddress) -> PeerAddress:
        return cls(host=str(ip), port=0)

    def to_client(self) -> tuple[str, int]:
        return (self.host, self.port)

    def __str__(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"
