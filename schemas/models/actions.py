"""
Values passed through the action pipeline's three extension points.

Submission            — the inbound form plus the caller's network address
AuthenticatedUser     — successful value of the ``authenticate`` filter
LoginFailure          — failed value of the ``authenticate`` filter
RegistrationErrors    — accumulating value of the ``registration_errors`` filter
CommentSubmission     — value of the ``preprocess_comment`` filter
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Union

TOKEN_FIELD = "cf-turnstile-response"


@dataclass(frozen=True)
class Submission:
    form: Mapping[str, str]
    client_ip: str = ""

    def get(self, name: str) -> str:
        value = self.form.get(name)
        return value if isinstance(value, str) else ""

    @property
    def challenge_token(self) -> str:
        return self.get(TOKEN_FIELD)


@dataclass(frozen=True)
class AuthenticatedUser:
    username: str


@dataclass(frozen=True)
class LoginFailure:
    code: str
    message: str


LoginResult = Union[AuthenticatedUser, LoginFailure, None]


@dataclass(frozen=True)
class RegistrationError:
    code: str
    message: str


@dataclass
class RegistrationErrors:
    """Error collection for a registration attempt. Errors are only ever added."""

    errors: list[RegistrationError] = field(default_factory=list)

    def add(self, code: str, message: str) -> None:
        self.errors.append(RegistrationError(code=code, message=message))

    def has_errors(self) -> bool:
        return bool(self.errors)

    def codes(self) -> list[str]:
        return [e.code for e in self.errors]

    def to_list(self) -> list[dict]:
        return [{"code": e.code, "message": e.message} for e in self.errors]


@dataclass(frozen=True)
class CommentSubmission:
    author: str
    content: str
