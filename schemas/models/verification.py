"""
Verification outcome types produced by a ChallengeVerifier.

Every expected failure (missing token, missing secret, remote rejection,
unreachable or malformed remote) is an outcome value, not an exception.
Callers only need ``outcome.allowed``; anything else blocks the action.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class VerificationStatus(str, Enum):
    ALLOWED = "allowed"
    REJECTED = "rejected"
    CONFIGURATION_ERROR = "configuration_error"
    TRANSPORT_ERROR = "transport_error"


class FailureCode(str, Enum):
    MISSING_TOKEN = "missing_token"
    MISSING_SECRET = "missing_secret"
    REMOTE_REJECTED = "remote_rejected"
    REMOTE_UNREACHABLE = "remote_unreachable"
    MALFORMED_RESPONSE = "malformed_response"


# End-user wording per failure; none of these include configuration values
USER_MESSAGES: dict[FailureCode, str] = {
    FailureCode.MISSING_TOKEN: "Please complete the Turnstile challenge.",
    FailureCode.MISSING_SECRET: "Turnstile secret key not configured.",
    FailureCode.REMOTE_REJECTED: "Turnstile verification failed.",
    FailureCode.MALFORMED_RESPONSE: "Turnstile verification failed.",
    FailureCode.REMOTE_UNREACHABLE: (
        "Turnstile verification is temporarily unavailable. Please try again."
    ),
}


@dataclass(frozen=True)
class VerificationOutcome:
    status: VerificationStatus
    code: Optional[FailureCode] = None
    reason: str = ""
    # "error-codes" from the remote reply, when there was one
    error_codes: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def allow(cls) -> "VerificationOutcome":
        return cls(status=VerificationStatus.ALLOWED)

    @classmethod
    def reject(
        cls,
        code: FailureCode,
        reason: str,
        error_codes: tuple[str, ...] = (),
    ) -> "VerificationOutcome":
        return cls(
            status=VerificationStatus.REJECTED,
            code=code,
            reason=reason,
            error_codes=tuple(error_codes),
        )

    @classmethod
    def configuration_error(cls, reason: str) -> "VerificationOutcome":
        return cls(
            status=VerificationStatus.CONFIGURATION_ERROR,
            code=FailureCode.MISSING_SECRET,
            reason=reason,
        )

    @classmethod
    def transport_error(cls, reason: str) -> "VerificationOutcome":
        return cls(
            status=VerificationStatus.TRANSPORT_ERROR,
            code=FailureCode.REMOTE_UNREACHABLE,
            reason=reason,
        )

    @property
    def allowed(self) -> bool:
        return self.status is VerificationStatus.ALLOWED

    @property
    def user_message(self) -> str:
        """Message safe to show the end user; empty for an allowed outcome."""
        if self.code is None:
            return ""
        return USER_MESSAGES[self.code]
