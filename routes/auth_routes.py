"""
Login and registration surfaces.

POST /auth/login     — form: username, password, cf-turnstile-response
POST /auth/register  — form: username, email, password, cf-turnstile-response

Both run their action through the pipeline (baseline checks first, then the
Turnstile guard) and translate the final filter value into a response.
A registration that loses a race for its username gets 409.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from dependencies import get_accounts, get_pipeline, get_submission
from errors import AuthenticationError, ConflictError, ValidationError
from schemas.dto.responses.auth import LoginResponse, RegisterResponse
from schemas.dto.responses.common import ErrorResponse
from schemas.models.actions import AuthenticatedUser, RegistrationErrors, Submission
from services.action_pipeline import AUTHENTICATE, REGISTRATION_ERRORS, ActionPipeline
from services.hosting import AccountDirectory
from shared.logging import get_logger, hash_ip

router = APIRouter(prefix="/auth", tags=["auth"])
log = get_logger(__name__)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"model": ErrorResponse}},
)
async def login(
    submission: Submission = Depends(get_submission),
    pipeline: ActionPipeline = Depends(get_pipeline),
) -> LoginResponse:
    result = await pipeline.apply_filters(AUTHENTICATE, None, submission)
    if not isinstance(result, AuthenticatedUser):
        code = getattr(result, "code", "authentication_failed")
        message = getattr(result, "message", "Authentication failed.")
        log.info("login_failed", reason=code, ip_hash=hash_ip(submission.client_ip))
        raise AuthenticationError(message, details={"code": code})
    log.info("login_succeeded", username=result.username)
    return LoginResponse(username=result.username)


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def register(
    submission: Submission = Depends(get_submission),
    pipeline: ActionPipeline = Depends(get_pipeline),
    accounts: AccountDirectory = Depends(get_accounts),
) -> RegisterResponse:
    errors = await pipeline.apply_filters(
        REGISTRATION_ERRORS, RegistrationErrors(), submission
    )
    if errors.has_errors():
        log.info(
            "registration_rejected",
            reasons=errors.codes(),
            ip_hash=hash_ip(submission.client_ip),
        )
        raise ValidationError(
            errors.errors[0].message, details=errors.to_list()
        )

    username = submission.get("username").strip()
    try:
        accounts.create(
            username, submission.get("email").strip(), submission.get("password")
        )
    except ConflictError:
        log.info("registration_conflict", username=username)
        raise
    log.info("user_registered", username=username)
    return RegisterResponse(username=username)
