"""Vulture whitelist — false positives that are actually used by frameworks."""

# ---------------------------------------------------------------------------
# Public API methods on ForwardedHeaders (used by consumers, not internally)
# ---------------------------------------------------------------------------
from forwarded_headers.forwarded_headers import ForwardedHeaders

ForwardedHeaders.resolve
ForwardedHeaders.client_ip
ForwardedHeaders.add_middleware
ForwardedHeaders.client_ip_dep

# ---------------------------------------------------------------------------
# Options builders (chained by consumers)
# ---------------------------------------------------------------------------
from forwarded_headers.config import ForwardedHeadersOptions

ForwardedHeadersOptions.clear_trusted_networks
ForwardedHeadersOptions.with_intermediate_hop_checks

# ---------------------------------------------------------------------------
# ASGI surface
# ---------------------------------------------------------------------------
from forwarded_headers.core.addresses import PeerAddress

PeerAddress.to_client
