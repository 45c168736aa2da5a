"""
Portfolio service: pure business logic for authentication and password reset.

Rules:
  - Zero FastAPI imports.
  - Only the SQLAlchemy async session passed in is touched; callers own the
    transaction (get_db commits or rolls back).
  - Every time-dependent function accepts `now` (epoch ms) so expiry can be
    tested without sleeping.

Password reset state lives on the user row:

    IDLE ──issue──▶ OTP_REQUESTED ──reset──▶ IDLE
                      │      ▲
                      └issue─┘   (a new code overwrites the old one)
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone

from jose import jwt
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.constants import (
    ACCESS_TOKEN_EXPIRE_SECONDS,
    MAX_PASSWORD_LENGTH,
    MIN_PASSWORD_LENGTH,
    OTP_EXPIRE_SECONDS,
    WELCOME_MESSAGES,
)
from app.auth.models import User
from app.auth.utils import (
    generate_otp,
    hash_password,
    is_well_formed_otp,
    now_ms,
    verify_password,
)
from app.exceptions import (
    IncorrectCurrentPassword,
    InvalidCredentials,
    InvalidOrExpiredOTP,
    OTPFormatInvalid,
    PasswordMismatch,
    PasswordTooLong,
    PasswordTooShort,
    PasswordUnchanged,
    UserNotFound,
)
from shared.constants import Role

logger = logging.getLogger(__name__)


# ── User queries ──────────────────────────────────────────────────────────────

async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(
        select(User).where(func.lower(User.email) == email.strip().lower())
    )
    return result.scalar_one_or_none()


async def get_user_by_id(session: AsyncSession, user_id: uuid.UUID) -> User | None:
    return await session.get(User, user_id)


async def get_portfolio_owner(session: AsyncSession) -> User | None:
    """Return the superadmin whose profile backs the public site."""
    result = await session.execute(
        select(User)
        .where(User.role == Role.SUPERADMIN)
        .order_by(User.created_at.asc())
        .limit(1)
    )
    return result.scalar_one_or_none()


# ── Authentication ────────────────────────────────────────────────────────────

async def authenticate_user(session: AsyncSession, email: str, password: str) -> User:
    """
    Verify credentials and return the User.

    Unknown email and wrong password raise the same InvalidCredentials so the
    response never reveals which accounts exist.
    """
    user = await get_user_by_email(session, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Failed login attempt for %s", email)
        raise InvalidCredentials()
    return user


async def record_login(session: AsyncSession, user: User) -> None:
    user.last_login_at = datetime.now(timezone.utc)
    await session.flush()


def welcome_message(role: Role) -> str:
    return WELCOME_MESSAGES[Role(role).value]


# ── JWT access token ──────────────────────────────────────────────────────────

def create_access_token(
    user_id: uuid.UUID,
    email: str,
    role: Role,
    secret: str,
    algorithm: str,
    issuer: str,
    audience: str,
    expire_seconds: int = ACCESS_TOKEN_EXPIRE_SECONDS,
    now: datetime | None = None,
) -> str:
    issued = now or datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "email": email,
        "role": Role(role).value,
        "iat": issued,
        "exp": issued + timedelta(seconds=expire_seconds),
        "iss": issuer,
        "aud": audience,
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def is_token_stale(user: User, issued_at: int | None) -> bool:
    """True when the password changed after the token was issued.

    `issued_at` is the token's iat in seconds; password_changed_at is epoch ms.
    """
    if user.password_changed_at is None:
        return False
    if issued_at is None:
        return True
    return issued_at * 1000 < user.password_changed_at


# ── Password policy ───────────────────────────────────────────────────────────

def _check_new_password(new_password: str, confirm_password: str | None) -> None:
    if confirm_password is not None and new_password != confirm_password:
        raise PasswordMismatch()
    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise PasswordTooShort(MIN_PASSWORD_LENGTH)
    if len(new_password) > MAX_PASSWORD_LENGTH:
        raise PasswordTooLong(MAX_PASSWORD_LENGTH)


def _set_password(user: User, new_password: str, now: int) -> None:
    user.password_hash = hash_password(new_password)
    # JWT iat has second precision, so the stamp is back-dated by 1000 ms to
    # keep the token minted right after the change fresh. The cost: a token
    # issued at most 1000 ms before the change also stays valid.
    user.password_changed_at = now - 1000


# ── Password reset OTP ────────────────────────────────────────────────────────

def _otp_matches(user: User | None, otp: str, now: int) -> bool:
    if user is None or user.otp_code is None or user.otp_expires_at is None:
        return False
    if now >= user.otp_expires_at:
        return False
    return verify_password(otp, user.otp_code)


async def issue_password_reset_otp(
    session: AsyncSession,
    email: str,
    *,
    expire_seconds: int = OTP_EXPIRE_SECONDS,
    now: int | None = None,
) -> tuple[User, str]:
    """
    Create a fresh reset challenge for the account and return (user, plain code).

    The stored code is hashed; any earlier code is overwritten so only the most
    recent one verifies. Delivering the plain code is the caller's job, and it
    must happen inside the same transaction so a failed send rolls this back.

    Raises:
      UserNotFound: no account with that email
    """
    user = await get_user_by_email(session, email)
    if user is None:
        raise UserNotFound()

    issued_at = now if now is not None else now_ms()
    code = generate_otp()
    user.otp_code = hash_password(code)
    user.otp_expires_at = issued_at + expire_seconds * 1000
    await session.flush()
    logger.info("Password reset OTP issued for user %s", user.id)
    return user, code


async def verify_password_reset_otp(
    session: AsyncSession,
    email: str,
    otp: str,
    *,
    now: int | None = None,
) -> None:
    """
    Check a code without consuming it.

    Raises:
      InvalidOrExpiredOTP: malformed code, no pending code, wrong code,
        expired, or unknown email
    """
    if not is_well_formed_otp(otp):
        raise InvalidOrExpiredOTP()
    user = await get_user_by_email(session, email)
    if not _otp_matches(user, otp, now if now is not None else now_ms()):
        raise InvalidOrExpiredOTP()


async def reset_password(
    session: AsyncSession,
    *,
    email: str,
    otp: str,
    new_password: str,
    confirm_password: str | None,
    now: int | None = None,
) -> User:
    """
    Consume the reset code and set a new password.

    Checks run in this order and the first failure wins; nothing is written
    until all of them pass:
      1. new and confirm passwords match      → PasswordMismatch
      2. new password 8 to 128 characters     → PasswordTooShort / PasswordTooLong
      3. code is exactly 6 digits             → OTPFormatInvalid
      4. code matches and has not expired     → InvalidOrExpiredOTP
    """
    _check_new_password(new_password, confirm_password)
    if not is_well_formed_otp(otp):
        raise OTPFormatInvalid()

    current = now if now is not None else now_ms()
    user = await get_user_by_email(session, email)
    if not _otp_matches(user, otp, current):
        raise InvalidOrExpiredOTP()

    _set_password(user, new_password, current)
    user.clear_otp()
    await session.flush()
    logger.info("Password reset completed for user %s", user.id)
    return user


# ── Password change (authenticated) ───────────────────────────────────────────

async def change_password(
    session: AsyncSession,
    user: User,
    *,
    current_password: str,
    new_password: str,
    confirm_password: str,
    now: int | None = None,
) -> User:
    """
    Replace the password of a logged-in account.

    Input checks run before the current password is verified; a pending reset
    code is discarded because the account owner is evidently not locked out.
    """
    _check_new_password(new_password, confirm_password)
    if not verify_password(current_password, user.password_hash):
        raise IncorrectCurrentPassword()
    if verify_password(new_password, user.password_hash):
        raise PasswordUnchanged()

    _set_password(user, new_password, now if now is not None else now_ms())
    user.clear_otp()
    await session.flush()
    return user
