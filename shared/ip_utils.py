"""
Client IP resolution for the ``remoteip`` field of a siteverify call.

Takes an explicit ``Request`` so it is testable without a running app.
"""

from __future__ import annotations

from fastapi import Request

# Checked in order; the first non-empty value wins
PROXY_HEADERS: tuple[str, ...] = (
    "CF-Connecting-IP",
    "True-Client-IP",
    "X-Forwarded-For",
    "X-Real-IP",
)


def get_client_ip(request: Request, trust_proxy_headers: bool = False) -> str:
    """Resolve the caller's address from the request's network metadata.

    By default only the direct peer address is used. With
    *trust_proxy_headers* the Cloudflare / proxy headers are consulted first
    (first entry of a comma-separated list); that is only safe when a proxy in
    front of the app overwrites them.

    Returns:
        The resolved client IP string, or ``""`` if it is unknown. An unknown
        address is still valid input to the verifier.
    """
    if trust_proxy_headers:
        for header in PROXY_HEADERS:
            ip_value: str | None = request.headers.get(header)
            if ip_value:
                client_ip: str = ip_value.split(",")[0].strip()
                if client_ip:
                    return client_ip

    return request.client.host if request.client else ""
