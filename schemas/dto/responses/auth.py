"""
Response DTOs for authentication endpoints.

LoginResponse       — POST /auth/login  (200)
RegisterResponse    — POST /auth/register  (201)
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class LoginResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    username: str


class RegisterResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    username: str
