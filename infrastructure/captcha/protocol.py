"""ChallengeVerifier protocol — interceptors depend on this, not the concrete implementation."""

from typing import Protocol

from schemas.models.guard_config import GuardConfig
from schemas.models.verification import VerificationOutcome


class ChallengeVerifier(Protocol):
    async def verify(
        self, token: str, client_ip: str, config: GuardConfig
    ) -> VerificationOutcome: ...
