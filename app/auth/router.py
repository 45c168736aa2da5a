"""
Portfolio service: auth router.

Only HTTP concerns live here:
  - Route declarations, HTTP methods, status codes, response_model
  - Dependency injection (session, settings, email sender, current account)
  - Per-endpoint rate limits
  - Forwarding to the controller

Rate-limited handlers take `request: Request` because slowapi keys on it.
"""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.controller import (
    forgot_password as forgot_password_controller,
    login as login_controller,
    reset_password as reset_password_controller,
    update_password as update_password_controller,
    verify_otp as verify_otp_controller,
)
from app.auth.dependencies import get_current_account
from app.auth.models import User
from app.auth.schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    ResetPasswordRequest,
    StatusResponse,
    UpdatePasswordRequest,
    VerifyOTPRequest,
)
from app.config import Settings
from app.database import get_db
from app.dependencies import get_app_settings, get_email_sender
from app.email.sender import EmailSender
from app.rate_limit import (
    FORGOT_PASSWORD_LIMIT,
    LOGIN_LIMIT,
    RESET_PASSWORD_LIMIT,
    VERIFY_OTP_LIMIT,
    limiter,
)

router = APIRouter(prefix="/auth", tags=["auth"])


# ── Login ─────────────────────────────────────────────────────────────────────

@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log in with email and password",
)
@limiter.limit(LOGIN_LIMIT)
async def login(
    request: Request,
    body: LoginRequest,
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> LoginResponse:
    return await login_controller(session, body, settings)


# ── Password reset ────────────────────────────────────────────────────────────

@router.post(
    "/forgot-password",
    response_model=StatusResponse,
    response_model_exclude_none=True,
    summary="Email a 6-digit password reset code",
)
@limiter.limit(FORGOT_PASSWORD_LIMIT)
async def forgot_password(
    request: Request,
    body: ForgotPasswordRequest,
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    sender: EmailSender = Depends(get_email_sender),
) -> StatusResponse:
    return await forgot_password_controller(session, body, settings, sender)


@router.post(
    "/verify-otp",
    response_model=StatusResponse,
    response_model_exclude_none=True,
    summary="Check a reset code without consuming it",
)
@limiter.limit(VERIFY_OTP_LIMIT)
async def verify_otp(
    request: Request,
    body: VerifyOTPRequest,
    session: AsyncSession = Depends(get_db),
) -> StatusResponse:
    return await verify_otp_controller(session, body)


@router.post(
    "/reset-password",
    response_model=StatusResponse,
    response_model_exclude_none=True,
    summary="Set a new password using the emailed code",
)
@limiter.limit(RESET_PASSWORD_LIMIT)
async def reset_password(
    request: Request,
    body: ResetPasswordRequest,
    session: AsyncSession = Depends(get_db),
) -> StatusResponse:
    return await reset_password_controller(session, body)


# ── Password change ───────────────────────────────────────────────────────────

@router.patch(
    "/update-password",
    response_model=LoginResponse,
    summary="Change password (returns a fresh token)",
)
async def update_password(
    body: UpdatePasswordRequest,
    user: User = Depends(get_current_account),
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> LoginResponse:
    return await update_password_controller(session, user, body, settings)
