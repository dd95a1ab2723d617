"""Test fixtures for forwarded header resolution tests."""

from unittest.mock import MagicMock

import pytest_asyncio
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient

from forwarded_headers import ForwardedHeadersOptions, PeerAddress
from forwarded_headers.integrations.fastapi import ForwardedHeadersMiddleware

# httpx's ASGITransport reports the connecting client as 127.0.0.1:123.
TRANSPORT_CLIENT = ("127.0.0.1", 123)


def make_peer(host: str = "127.0.0.1", port: int = 111) -> PeerAddress:
    return PeerAddress(host=host, port=port)


def make_request(host: str | None, headers: dict | None = None, port: int = 111) -> MagicMock:
    """Create a mock Request with the given client host and headers."""
    request = MagicMock()
    if host is None:
        request.client = None
    else:
        request.client.host = host
        request.client.port = port
    request.headers = headers or {}
    return request


def build_app(options: ForwardedHeadersOptions | None = None) -> FastAPI:
    """App echoing the client address downstream handlers observe."""
    app = FastAPI()
    app.add_middleware(ForwardedHeadersMiddleware, options=options)

    @app.get("/whoami")
    async def whoami(request: Request):
        original = getattr(request.state, "forwarded_peer", None)
        return {
            "host": request.client.host,
            "port": request.client.port,
            "peer": str(original) if original is not None else None,
            "x_forwarded_for": request.headers.get("x-forwarded-for"),
        }

    return app


@pytest_asyncio.fixture
async def client():
    """HTTP client against an app using the default (loopback-only) options."""
    async with AsyncClient(
        transport=ASGITransport(app=build_app()),
        base_url="http://test",
    ) as client:
        yield client
