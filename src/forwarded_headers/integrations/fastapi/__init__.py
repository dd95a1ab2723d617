"""FastAPI integration for forwarded headers."""

from forwarded_headers.integrations.fastapi.deps import create_client_ip_dep
from forwarded_headers.integrations.fastapi.middleware import ForwardedHeadersMiddleware
from forwarded_headers.integrations.fastapi.proxy import get_client_ip

__all__ = [
    "ForwardedHeadersMiddleware",
    "create_client_ip_dep",
    "get_client_ip",
]
