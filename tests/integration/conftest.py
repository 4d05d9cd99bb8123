"""
Integration fixtures: a full app with an injected config store and a
TurnstileVerifier whose HttpClient is mocked. No real network calls.
"""

import pytest
from fastapi.testclient import TestClient

from app import create_app
from config import AppSettings, LoggingSettings, SentrySettings, TurnstileSettings
from infrastructure.captcha.turnstile import TurnstileVerifier
from infrastructure.config_store.memory import InMemoryConfigurationStore
from schemas.models.guard_config import GuardConfig


@pytest.fixture
def settings():
    return AppSettings(
        turnstile=TurnstileSettings(trust_proxy_headers=True),
        logging=LoggingSettings(),
        sentry=SentrySettings(sentry_dsn=""),
    )


@pytest.fixture
def store():
    return InMemoryConfigurationStore(GuardConfig(site_key="site", secret_key="s"))


@pytest.fixture
def client(settings, store, http):
    app = create_app(settings, config_store=store, verifier=TurnstileVerifier(http))
    with TestClient(app) as c:
        yield c
