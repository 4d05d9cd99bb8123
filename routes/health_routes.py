"""
Health check endpoint.

GET /health — reports whether the guard can verify challenges.
Rules:
- Secret key configured → "healthy" (200).
- Secret key missing while any surface is enabled → "degraded" (200); every
  gated action on an enabled surface is being blocked.
- Secret key missing with every surface disabled → "healthy"; nothing is gated.

Key values are never included in the response.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from dependencies import get_config_store
from infrastructure.config_store.protocol import ConfigurationStore
from schemas.dto.responses.common import HealthResponse

router = APIRouter(tags=["health"])

_SURFACES = ("login", "register", "comment")


@router.get("/health", response_model=HealthResponse)
async def health_check(
    store: ConfigurationStore = Depends(get_config_store),
) -> HealthResponse:
    config = store.get()
    surfaces = {s: config.is_enabled(s) for s in _SURFACES}
    checks = {
        "site_key": "ok" if config.site_key else "not_configured",
        "secret_key": "ok" if config.has_secret else "not_configured",
    }

    overall = "healthy"
    if not config.has_secret and any(surfaces.values()):
        overall = "degraded"

    return HealthResponse(status=overall, checks=checks, surfaces=surfaces)
