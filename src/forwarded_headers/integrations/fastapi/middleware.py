"""ASGI middleware that replaces the transport peer with the forwarded client address."""

from __future__ import annotations

from starlette.types import ASGIApp, Receive, Scope, Send

from forwarded_headers.config import ForwardedHeadersOptions
from forwarded_headers.core.addresses import PeerAddress
from forwarded_headers.core.resolver import (
    X_FORWARDED_FOR,
    X_REAL_IP,
    join_forwarded_for,
    resolve_client_address,
)

_X_FORWARDED_FOR = X_FORWARDED_FOR.encode("latin-1")
_X_REAL_IP = X_REAL_IP.encode("latin-1")


def _read_headers(scope: Scope) -> tuple[str | None, str | None]:
    """Collect X-Forwarded-For (repeated headers joined) and the first X-Real-IP."""
    forwarded_for: list[str] = []
    real_ip: str | None = None
    for name, value in scope.get("headers", []):
        name = name.lower()
        if name == _X_FORWARDED_FOR:
            forwarded_for.append(value.decode("latin-1"))
        elif name == _X_REAL_IP and real_ip is None:
            real_ip = value.decode("latin-1")
    return join_forwarded_for(forwarded_for), real_ip


class ForwardedHeadersMiddleware:
    """Rewrite ``scope["client"]`` for http and websocket connections.

    Downstream code (``request.client.host``, rate limiters, access logs) then
    sees the resolved client. The original peer is kept in
    ``scope["state"]["forwarded_peer"]``; headers are left untouched.

    Usage:
        app.add_middleware(ForwardedHeadersMiddleware, options=options)
    """

    def __init__(self, app: ASGIApp, options: ForwardedHeadersOptions | None = None) -> None:
        self.app = app
        self.options = options or ForwardedHeadersOptions()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] in ("http", "websocket"):
            peer = PeerAddress.from_client(scope.get("client"))
            forwarded_for, real_ip = _read_headers(scope)
            resolved = resolve_client_address(peer, forwarded_for, real_ip, self.options)
            if resolved is not None and resolved != peer:
                scope.setdefault("state", {})["forwarded_peer"] = peer
                scope["client"] = resolved.to_client()

        await self.app(scope, receive, send)
