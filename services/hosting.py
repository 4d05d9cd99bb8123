"""
Hosting-side state and baseline checks for the three gated actions.

AccountDirectory and CommentStore are in-process stand-ins for the host's
user table and comment table. The baseline filters are the host's own
validation; they register ahead of the Turnstile guard so an invalid
credential or form fails with its own reason first.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from errors import ConflictError, ValidationError
from schemas.models.actions import (
    AuthenticatedUser,
    CommentSubmission,
    LoginFailure,
    LoginResult,
    RegistrationErrors,
    Submission,
)
from services.action_pipeline import (
    AUTHENTICATE,
    PREPROCESS_COMMENT,
    REGISTRATION_ERRORS,
    ActionPipeline,
)
from shared.crypto import hash_password, verify_password

BASELINE_FORM_PRIORITY = 10
BASELINE_AUTH_PRIORITY = 20


class AccountDirectory:
    def __init__(self) -> None:
        self._accounts: dict[str, tuple[str, str]] = {}

    def exists(self, username: str) -> bool:
        return username.lower() in self._accounts

    def create(self, username: str, email: str, password: str) -> None:
        """Add an account; raise ConflictError if the username is taken.

        The existence check and the write happen without an await in between,
        so two registrations racing past the baseline check cannot both land.
        """
        name = username.lower()
        if name in self._accounts:
            raise ConflictError(
                "This username is already registered.", field="username"
            )
        self._accounts[name] = (email, hash_password(password))

    def check(self, username: str, password: str) -> bool:
        entry = self._accounts.get(username.lower())
        if entry is None:
            return False
        return verify_password(password, entry[1])


@dataclass(frozen=True)
class StoredComment:
    id: int
    author: str
    content: str
    created_at: datetime


class CommentStore:
    def __init__(self) -> None:
        self._comments: list[StoredComment] = []

    def persist(self, comment: CommentSubmission) -> StoredComment:
        stored = StoredComment(
            id=len(self._comments) + 1,
            author=comment.author,
            content=comment.content,
            created_at=datetime.now(timezone.utc),
        )
        self._comments.append(stored)
        return stored

    def all(self) -> list[StoredComment]:
        return list(self._comments)


def register_baseline_filters(pipeline: ActionPipeline, accounts: AccountDirectory) -> None:
    async def authenticate(result: LoginResult, submission: Submission) -> LoginResult:
        if result is not None:
            return result
        username = submission.get("username").strip()
        password = submission.get("password")
        if not username:
            return LoginFailure("empty_username", "The username field is empty.")
        if not password:
            return LoginFailure("empty_password", "The password field is empty.")
        if not accounts.check(username, password):
            return LoginFailure("invalid_credentials", "Incorrect username or password.")
        return AuthenticatedUser(username=username)

    async def registration_errors(
        errors: RegistrationErrors, submission: Submission
    ) -> RegistrationErrors:
        username = submission.get("username").strip()
        email = submission.get("email").strip()
        if not username:
            errors.add("empty_username", "Please enter a username.")
        elif accounts.exists(username):
            errors.add("username_exists", "This username is already registered.")
        if "@" not in email:
            errors.add("invalid_email", "Please enter a valid email address.")
        if not submission.get("password"):
            errors.add("empty_password", "Please enter a password.")
        return errors

    async def preprocess_comment(
        comment: CommentSubmission, submission: Submission
    ) -> CommentSubmission:
        if not comment.content.strip():
            raise ValidationError("Please type your comment text.", field="content")
        return comment

    pipeline.add_filter(AUTHENTICATE, authenticate, BASELINE_AUTH_PRIORITY)
    pipeline.add_filter(REGISTRATION_ERRORS, registration_errors, BASELINE_FORM_PRIORITY)
    pipeline.add_filter(PREPROCESS_COMMENT, preprocess_comment, BASELINE_FORM_PRIORITY)
