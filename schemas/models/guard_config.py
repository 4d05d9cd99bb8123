"""
GuardConfig — read-only snapshot of the Turnstile guard configuration.

One snapshot is taken from the configuration store per evaluation and passed
explicitly to the verifier and interceptors. The model is frozen; changes go
through ConfigurationStore.set() and show up in the next snapshot.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from config import TurnstileSettings


class GuardConfig(BaseModel):
    """Site/secret key pair plus the per-surface enablement flags."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    site_key: str = ""
    secret_key: str = ""
    enable_login: bool = True
    enable_register: bool = True
    enable_comment: bool = True

    @field_validator("site_key", "secret_key", mode="before")
    @classmethod
    def _strip_text(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("enable_login", "enable_register", "enable_comment", mode="before")
    @classmethod
    def _coerce_flag(cls, v: Any) -> bool:
        # Any submitted value means checked; missing, empty and "0" mean unchecked
        if isinstance(v, str):
            return v.strip() not in ("", "0")
        return bool(v)

    @classmethod
    def from_settings(cls, settings: TurnstileSettings) -> "GuardConfig":
        return cls(
            site_key=settings.turnstile_site_key,
            secret_key=settings.turnstile_secret_key,
            enable_login=settings.turnstile_enable_login,
            enable_register=settings.turnstile_enable_register,
            enable_comment=settings.turnstile_enable_comment,
        )

    def is_enabled(self, surface: str) -> bool:
        """Return the ``enable_<surface>`` flag; unknown surfaces are off."""
        return bool(getattr(self, f"enable_{surface}", False))

    @property
    def has_secret(self) -> bool:
        return bool(self.secret_key)
