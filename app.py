"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import sentry_sdk
from fastapi import FastAPI

from config import AppSettings
from errors import register_error_handlers
from infrastructure.captcha.protocol import ChallengeVerifier
from infrastructure.captcha.turnstile import TurnstileVerifier
from infrastructure.config_store.memory import InMemoryConfigurationStore
from infrastructure.config_store.protocol import ConfigurationStore
from infrastructure.http_client import HttpClient
from routes.auth_routes import router as auth_router
from routes.comment_routes import router as comment_router
from routes.health_routes import router as health_router
from schemas.models.guard_config import GuardConfig
from services.action_pipeline import ActionPipeline
from services.guard_service import TurnstileGuard
from services.hosting import AccountDirectory, CommentStore, register_baseline_filters
from shared.logging import get_logger

log = get_logger(__name__)


def create_app(
    settings: Optional[AppSettings] = None,
    config_store: Optional[ConfigurationStore] = None,
    verifier: Optional[ChallengeVerifier] = None,
) -> FastAPI:
    """Create and return a fully configured FastAPI application.

    *config_store* and *verifier* default to the in-memory store seeded from
    settings and the Turnstile siteverify client; tests inject their own.
    """
    if settings is None:
        settings = AppSettings()

    # Initialise Sentry before anything else so it captures startup errors
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
        )

    if config_store is None:
        config_store = InMemoryConfigurationStore(
            GuardConfig.from_settings(settings.turnstile)
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        http_client: Optional[HttpClient] = None
        gate = verifier
        if gate is None:
            http_client = HttpClient(timeout=settings.turnstile.turnstile_timeout_seconds)
            gate = TurnstileVerifier(
                http_client, verify_url=settings.turnstile.turnstile_verify_url
            )

        accounts = AccountDirectory()
        pipeline = ActionPipeline()
        register_baseline_filters(pipeline, accounts)
        TurnstileGuard(config_store, gate).register(pipeline)

        app.state.settings = settings
        app.state.config_store = config_store
        app.state.pipeline = pipeline
        app.state.accounts = accounts
        app.state.comments = CommentStore()

        if not config_store.get().has_secret:
            log.error("turnstile_secret_not_configured", phase="startup")

        yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        if http_client is not None:
            await http_client.aclose()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )

    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(comment_router)

    return app
