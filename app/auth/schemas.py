"""
Portfolio service: Pydantic V2 request/response schemas for the auth domain.

Field names are camelCase on the wire (newPassword, confirmPassword) and
snake_case in Python; requests accept either spelling.

Passwords are taken byte for byte: request models switch off the shared
whitespace stripping, and only the email and OTP fields are trimmed.
New-password rules (match, length) run in the service layer in a fixed order
so the first failing rule is reported.
"""
from __future__ import annotations

import uuid
from typing import Annotated, Literal

from pydantic import BeforeValidator, ConfigDict, EmailStr, Field, StringConstraints

from app.auth.constants import MAX_PASSWORD_LENGTH
from shared.constants import Role
from shared.models import CamelModel


def _trim(value: object) -> object:
    return value.strip() if isinstance(value, str) else value


Email = Annotated[EmailStr, BeforeValidator(_trim)]
OTPCode = Annotated[str, StringConstraints(strip_whitespace=True, max_length=32)]


class _Request(CamelModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=False)


# ── Login ─────────────────────────────────────────────────────────────────────

class LoginRequest(_Request):
    """Body for POST /api/auth/login."""

    email: Email
    password: str = Field(min_length=1, max_length=MAX_PASSWORD_LENGTH)


class UserResponse(CamelModel):
    """Minimal account view returned with a session token."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    name: str
    role: Role


class LoginResponse(CamelModel):
    status: Literal["success"] = "success"
    token: str
    message: str
    user: UserResponse


# ── Password reset ────────────────────────────────────────────────────────────

class ForgotPasswordRequest(_Request):
    """Body for POST /api/auth/forgot-password."""

    email: Email


class VerifyOTPRequest(_Request):
    """Body for POST /api/auth/verify-otp."""

    email: Email
    otp: OTPCode


class ResetPasswordRequest(_Request):
    """Body for POST /api/auth/reset-password.

    confirmPassword may be omitted when the client has already compared the
    two entries; when it is sent it must match newPassword.
    """

    email: Email
    otp: OTPCode
    new_password: str
    confirm_password: str | None = None


class UpdatePasswordRequest(_Request):
    """Body for PATCH /api/auth/update-password."""

    current_password: str = Field(min_length=1, max_length=MAX_PASSWORD_LENGTH)
    new_password: str
    confirm_password: str


class StatusResponse(CamelModel):
    status: Literal["success"] = "success"
    message: str | None = None
