"""
Turnstile guard — gates login, registration and comment submission.

The three surfaces share one control flow (``TurnstileGuard.intercept``):

    read config snapshot -> surface disabled? pass value through untouched
                         -> extract token -> verify -> allowed? pass through
                         -> otherwise hand the value to the surface's block()

Only the block step differs per surface, and it follows the pipeline's own
conventions:

- login     replaces the authenticate result with a LoginFailure
- register  adds an error to the RegistrationErrors collection
- comment   raises CommentHalted, stopping the submission before persistence

The guard never turns a failure into a success: an already-failed login is
returned as-is and registration errors are only ever appended.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from errors import CommentHalted
from infrastructure.captcha.protocol import ChallengeVerifier
from infrastructure.config_store.protocol import ConfigurationStore
from schemas.models.actions import (
    CommentSubmission,
    LoginFailure,
    LoginResult,
    RegistrationErrors,
    Submission,
)
from schemas.models.verification import FailureCode, VerificationOutcome
from services.action_pipeline import (
    AUTHENTICATE,
    PREPROCESS_COMMENT,
    REGISTRATION_ERRORS,
    ActionPipeline,
)
from shared.logging import get_logger, hash_ip

log = get_logger(__name__)

# Runs after the hosting system's own checks (which register at 10/20)
GUARD_PRIORITY = 30


class Surface(str, Enum):
    LOGIN = "login"
    REGISTER = "register"
    COMMENT = "comment"


def failure_code(outcome: VerificationOutcome) -> str:
    """Error code reported to the pipeline for a blocked outcome."""
    if outcome.code is FailureCode.MISSING_TOKEN:
        return "turnstile_missing"
    return "turnstile_failed"


def _block_login(value: LoginResult, outcome: VerificationOutcome) -> LoginResult:
    return LoginFailure(code=failure_code(outcome), message=outcome.user_message)


def _block_register(
    errors: RegistrationErrors, outcome: VerificationOutcome
) -> RegistrationErrors:
    errors.add(failure_code(outcome), outcome.user_message)
    return errors


def _block_comment(comment: CommentSubmission, outcome: VerificationOutcome) -> Any:
    raise CommentHalted(outcome.user_message, details={"code": failure_code(outcome)})


@dataclass(frozen=True)
class SurfaceAdapter:
    """How one surface plugs into the shared intercept flow."""

    surface: Surface
    hook: str
    extract_token: Callable[[Submission], str]
    block: Callable[[Any, VerificationOutcome], Any]


def _form_token(submission: Submission) -> str:
    return submission.challenge_token


LOGIN = SurfaceAdapter(Surface.LOGIN, AUTHENTICATE, _form_token, _block_login)
REGISTER = SurfaceAdapter(
    Surface.REGISTER, REGISTRATION_ERRORS, _form_token, _block_register
)
COMMENT = SurfaceAdapter(Surface.COMMENT, PREPROCESS_COMMENT, _form_token, _block_comment)


class TurnstileGuard:
    def __init__(self, store: ConfigurationStore, verifier: ChallengeVerifier) -> None:
        self._store = store
        self._verifier = verifier

    async def evaluate(
        self, adapter: SurfaceAdapter, submission: Submission
    ) -> Optional[VerificationOutcome]:
        """Run the gate for one surface.

        Returns ``None`` when the surface is disabled (the verifier is not
        called), otherwise the verifier's outcome.
        """
        config = self._store.get()
        if not config.is_enabled(adapter.surface.value):
            log.debug("turnstile_surface_skipped", surface=adapter.surface.value)
            return None

        token = adapter.extract_token(submission)
        outcome = await self._verifier.verify(token, submission.client_ip, config)
        if not outcome.allowed:
            log.info(
                "turnstile_action_blocked",
                surface=adapter.surface.value,
                status=outcome.status.value,
                failure=outcome.code.value if outcome.code else None,
                ip_hash=hash_ip(submission.client_ip),
            )
        return outcome

    async def intercept(
        self, adapter: SurfaceAdapter, value: Any, submission: Submission
    ) -> Any:
        outcome = await self.evaluate(adapter, submission)
        if outcome is None or outcome.allowed:
            return value
        return adapter.block(value, outcome)

    async def on_before_login(
        self, result: LoginResult, submission: Submission
    ) -> LoginResult:
        # An earlier layer already failed this login; keep its reason
        if isinstance(result, LoginFailure):
            return result
        return await self.intercept(LOGIN, result, submission)

    async def on_before_register(
        self, errors: RegistrationErrors, submission: Submission
    ) -> RegistrationErrors:
        return await self.intercept(REGISTER, errors, submission)

    async def on_before_comment_persist(
        self, comment: CommentSubmission, submission: Submission
    ) -> CommentSubmission:
        return await self.intercept(COMMENT, comment, submission)

    def register(self, pipeline: ActionPipeline, priority: int = GUARD_PRIORITY) -> None:
        pipeline.add_filter(AUTHENTICATE, self.on_before_login, priority)
        pipeline.add_filter(REGISTRATION_ERRORS, self.on_before_register, priority)
        pipeline.add_filter(PREPROCESS_COMMENT, self.on_before_comment_persist, priority)
