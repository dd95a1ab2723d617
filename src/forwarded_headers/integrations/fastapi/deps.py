"""FastAPI dependencies — factory functions bound to a ForwardedHeadersOptions value."""

from fastapi import Request

from forwarded_headers.config import ForwardedHeadersOptions
from forwarded_headers.integrations.fastapi.proxy import get_client_ip


def create_client_ip_dep(options: ForwardedHeadersOptions):
    """Factory: create a FastAPI dependency that yields the resolved client IP."""

    async def client_ip(request: Request) -> str | None:
        return get_client_ip(request, options)

    return client_ip
