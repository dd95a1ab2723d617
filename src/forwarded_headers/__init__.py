"""forwarded-headers — trusted reverse proxy client address resolution."""

__version__ = "0.1.0"

from forwarded_headers.config import ForwardedHeadersOptions
from forwarded_headers.core.addresses import PeerAddress, parse_ip
from forwarded_headers.core.resolver import (
    build_chain,
    parse_forwarded_for,
    resolve_client_address,
    resolve_from_headers,
)
from forwarded_headers.forwarded_headers import ForwardedHeaders

__all__ = [
    "ForwardedHeaders",
    "ForwardedHeadersOptions",
    "PeerAddress",
    "build_chain",
    "parse_forwarded_for",
    "parse_ip",
    "resolve_client_address",
    "resolve_from_headers",
]
