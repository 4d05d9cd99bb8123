"""Cloudflare Turnstile implementation of ChallengeVerifier.

- secret key comes from the per-request GuardConfig snapshot, not the constructor
- empty secret or empty token short-circuits before any network call
- exactly one siteverify POST otherwise; no retries, no caching
- fail closed: transport errors, non-200s and unparseable bodies never allow
"""

from __future__ import annotations

from typing import Any

import httpx

from config import TURNSTILE_VERIFY_URL
from infrastructure.http_client import HttpClient
from schemas.models.guard_config import GuardConfig
from schemas.models.verification import FailureCode, VerificationOutcome
from shared.logging import get_logger, hash_ip

log = get_logger(__name__)


class TurnstileVerifier:
    def __init__(
        self, http_client: HttpClient, verify_url: str = TURNSTILE_VERIFY_URL
    ) -> None:
        self._http = http_client
        self._verify_url = verify_url

    async def verify(
        self, token: str, client_ip: str, config: GuardConfig
    ) -> VerificationOutcome:
        if config is None:
            raise TypeError("verify() requires a GuardConfig snapshot")

        if not config.secret_key:
            log.error("turnstile_secret_not_configured")
            return VerificationOutcome.configuration_error("secret not configured")

        if not token:
            log.warning("turnstile_token_missing", ip_hash=hash_ip(client_ip))
            return VerificationOutcome.reject(FailureCode.MISSING_TOKEN, "missing token")

        try:
            response = await self._http.post(
                self._verify_url,
                data={
                    "secret": config.secret_key,
                    "response": token,
                    "remoteip": client_ip or "",
                },
            )
        except httpx.HTTPError as e:
            log.error(
                "turnstile_request_failed", error=str(e), error_type=type(e).__name__
            )
            return VerificationOutcome.transport_error(type(e).__name__)

        if response.status_code != 200:
            log.error(
                "turnstile_api_error",
                status_code=response.status_code,
                response_text=response.text[:200],
            )
            return VerificationOutcome.reject(
                FailureCode.MALFORMED_RESPONSE, f"http status {response.status_code}"
            )

        data = _parse_reply(response)
        if data is None:
            log.warning("turnstile_malformed_response", response_text=response.text[:200])
            return VerificationOutcome.reject(
                FailureCode.MALFORMED_RESPONSE, "unparseable reply"
            )

        raw_codes = data.get("error-codes")
        error_codes = tuple(str(c) for c in raw_codes) if isinstance(raw_codes, list) else ()
        if data.get("success") is not True:
            log.warning(
                "turnstile_verification_failed",
                error_codes=list(error_codes),
                ip_hash=hash_ip(client_ip),
            )
            return VerificationOutcome.reject(
                FailureCode.REMOTE_REJECTED, "remote rejected", error_codes
            )

        log.debug("turnstile_verification_passed", hostname=data.get("hostname"))
        return VerificationOutcome.allow()


def _parse_reply(response: httpx.Response) -> dict[str, Any] | None:
    try:
        data = response.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None
