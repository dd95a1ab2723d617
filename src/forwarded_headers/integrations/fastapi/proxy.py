"""Reverse proxy IP extraction for FastAPI requests."""

from fastapi import Request

from forwarded_headers.config import ForwardedHeadersOptions
from forwarded_headers.core.addresses import PeerAddress
from forwarded_headers.core.resolver import resolve_from_headers


def get_client_ip(request: Request, options: ForwardedHeadersOptions) -> str | None:
    """Extract the real client IP, respecting the trusted proxy policy.

    Use this when ForwardedHeadersMiddleware is not installed. Returns None
    when the server did not report a transport peer.
    """
    if request.client is None:
        return None

    peer = PeerAddress(host=request.client.host, port=request.client.port or 0)
    resolved = resolve_from_headers(peer, request.headers, options)
    return resolved.host if resolved is not None else None
