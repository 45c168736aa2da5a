"""
Portfolio service: auth controller (request orchestration layer).

Responsibilities:
  - Receive validated input from the router.
  - Call service functions (which own business logic) and the email sender.
  - Compose and return the response model.

No framework validation logic here; that belongs in schemas.py.
No business logic here; that belongs in service.py.
"""
from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import User
from app.auth.schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    ResetPasswordRequest,
    StatusResponse,
    UpdatePasswordRequest,
    UserResponse,
    VerifyOTPRequest,
)
from app.auth.service import (
    authenticate_user,
    change_password,
    create_access_token,
    issue_password_reset_otp,
    record_login,
    reset_password as reset_password_service,
    verify_password_reset_otp,
    welcome_message,
)
from app.config import Settings
from app.email import send as email
from app.email.sender import EmailSender
from app.exceptions import UserNotFound

logger = logging.getLogger(__name__)

_OTP_SENT_MESSAGE = "OTP sent to your email"


# ── Helper ────────────────────────────────────────────────────────────────────

def build_login_response(user: User, settings: Settings) -> LoginResponse:
    token = create_access_token(
        user_id=user.id,
        email=user.email,
        role=user.role,
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        expire_seconds=settings.jwt_expire_seconds,
    )
    return LoginResponse(
        token=token,
        message=welcome_message(user.role),
        user=UserResponse.model_validate(user),
    )


# ── Login ─────────────────────────────────────────────────────────────────────

async def login(session: AsyncSession, body: LoginRequest, settings: Settings) -> LoginResponse:
    user = await authenticate_user(session, body.email, body.password)
    await record_login(session, user)
    return build_login_response(user, settings)


# ── Password reset ────────────────────────────────────────────────────────────

async def forgot_password(
    session: AsyncSession,
    body: ForgotPasswordRequest,
    settings: Settings,
    sender: EmailSender,
) -> StatusResponse:
    try:
        user, code = await issue_password_reset_otp(
            session, body.email, expire_seconds=settings.otp_expire_seconds
        )
    except UserNotFound:
        if not settings.password_reset_generic_response:
            raise
        logger.info("Password reset requested for unknown email")
        return StatusResponse(message=_OTP_SENT_MESSAGE)

    # Awaited inside the transaction: a failed send rolls the new code back.
    await email.send_password_reset_otp(sender, user.email, code, settings)
    return StatusResponse(message=_OTP_SENT_MESSAGE)


async def verify_otp(session: AsyncSession, body: VerifyOTPRequest) -> StatusResponse:
    await verify_password_reset_otp(session, body.email, body.otp)
    return StatusResponse(message="OTP verified")


async def reset_password(session: AsyncSession, body: ResetPasswordRequest) -> StatusResponse:
    await reset_password_service(
        session,
        email=body.email,
        otp=body.otp,
        new_password=body.new_password,
        confirm_password=body.confirm_password,
    )
    return StatusResponse(message="Password reset successful")


# ── Password change ───────────────────────────────────────────────────────────

async def update_password(
    session: AsyncSession,
    user: User,
    body: UpdatePasswordRequest,
    settings: Settings,
) -> LoginResponse:
    """Change the password and hand back a token that post-dates the change."""
    await change_password(
        session,
        user,
        current_password=body.current_password,
        new_password=body.new_password,
        confirm_password=body.confirm_password,
    )
    response = build_login_response(user, settings)
    response.message = "Password updated successfully"
    return response
