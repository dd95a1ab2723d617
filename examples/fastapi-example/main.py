"""Example app behind a reverse proxy using forwarded-headers.

Typical deployment: nginx (or a cloud load balancer) on the same host or in
a private network terminates connections and appends X-Forwarded-For.

Run:  uvicorn main:app --port 8000
Try:  curl -H "X-Forwarded-For: 203.0.113.7" http://127.0.0.1:8000/whoami
"""

import os

from fastapi import Depends, FastAPI, Request

from forwarded_headers import ForwardedHeaders

forwarded = ForwardedHeaders(
    # Number of proxies in front of the app (0 = walk the whole chain).
    forward_limit=int(os.environ.get("FORWARD_LIMIT", "1")),
    # Proxy IPs or CIDRs allowed to set X-Forwarded-For / X-Real-IP.
    # Leaving this unset trusts only 127.0.0.1.
    trusted_proxies=[
        p.strip() for p in os.environ.get("TRUSTED_PROXIES", "127.0.0.1").split(",") if p.strip()
    ],
    # --- Private network load balancers ---
    # trusted_networks=["10.0.0.0/8", "172.16.0.0/12"],
    # --- Only when the app is unreachable except through the proxy ---
    # trust_all=True,
)

app = FastAPI(title="Forwarded Headers Example")
forwarded.add_middleware(app)

client_ip = forwarded.client_ip_dep()


@app.get("/whoami")
async def whoami(request: Request):
    """Client address as every downstream consumer now sees it."""
    peer = getattr(request.state, "forwarded_peer", None)
    return {
        "client": f"{request.client.host}:{request.client.port}",
        "via": str(peer) if peer is not None else None,
    }


@app.get("/ip")
async def ip(address: str | None = Depends(client_ip)):
    return {"ip": address}
