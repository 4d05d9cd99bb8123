"""
Application configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file).

TurnstileSettings only seeds the configuration store at startup. Request
handling always reads the live snapshot from the store, never these values.
"""

from __future__ import annotations

from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

TURNSTILE_VERIFY_URL = "https://challenges.cloudflare.com/turnstile/v0/siteverify"


class TurnstileSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    turnstile_site_key: str = ""
    turnstile_secret_key: str = ""

    # Every surface is gated out of the box, same as a fresh plugin install
    turnstile_enable_login: bool = True
    turnstile_enable_register: bool = True
    turnstile_enable_comment: bool = True

    turnstile_verify_url: str = TURNSTILE_VERIFY_URL
    turnstile_timeout_seconds: float = 10.0

    # Only enable behind a proxy that overwrites these headers (e.g. Cloudflare);
    # otherwise a client picks its own remoteip. Off means the peer address.
    trust_proxy_headers: bool = False


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production


class SentrySettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    sentry_dsn: str = ""
    sentry_send_pii: bool = False
    sentry_traces_sample_rate: float = 0.1


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    env: str = "development"
    app_name: str = "turnstile-guard"

    # OpenAPI docs URL (None disables the docs UI in production)
    docs_url: Optional[str] = "/docs"

    # Sub-configs (composed via model_validator below)
    turnstile: Optional[TurnstileSettings] = None
    logging: Optional[LoggingSettings] = None
    sentry: Optional[SentrySettings] = None

    @model_validator(mode="after")
    def _populate_sub_configs(self) -> "AppSettings":
        # Populate sub-configs from the same env/dotenv source
        if self.turnstile is None:
            self.turnstile = TurnstileSettings()
        if self.logging is None:
            self.logging = LoggingSettings()
        if self.sentry is None:
            self.sentry = SentrySettings()
        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"
