import uuid
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from app.auth.service import create_access_token
from shared.auth.config import AuthSettings
from shared.auth.guard import (
    LOGIN_PATH,
    UNAUTHORIZED_PATH,
    RouteAccess,
    decode_access_token,
    evaluate_route_access,
)
from shared.constants import Role

SETTINGS = AuthSettings(_env_file=None, secret="guard-secret", issuer="iss", audience="aud")


def _token(role: Role = Role.ADMIN, *, secret: str = "guard-secret", now: datetime | None = None, expire_seconds: int = 3600) -> str:
    return create_access_token(
        uuid.uuid4(),
        "someone@example.com",
        role,
        secret,
        "HS256",
        "iss",
        "aud",
        expire_seconds=expire_seconds,
        now=now,
    )


@pytest.mark.parametrize("access", list(RouteAccess))
def test_missing_token_redirects_to_login(access: RouteAccess) -> None:
    decision = evaluate_route_access(None, access, SETTINGS)
    assert not decision.allowed
    assert decision.redirect_to == LOGIN_PATH


def test_expired_token_redirects_to_login() -> None:
    stale = _token(now=datetime.now(timezone.utc) - timedelta(hours=2), expire_seconds=60)
    decision = evaluate_route_access(stale, RouteAccess.AUTHENTICATED, SETTINGS)
    assert decision.redirect_to == LOGIN_PATH


def test_bad_signature_redirects_to_login() -> None:
    decision = evaluate_route_access(_token(secret="other"), RouteAccess.AUTHENTICATED, SETTINGS)
    assert decision.redirect_to == LOGIN_PATH


def test_unknown_role_redirects_to_login() -> None:
    now = datetime.now(timezone.utc)
    forged = jwt.encode(
        {"sub": str(uuid.uuid4()), "role": "editor", "iat": now, "exp": now + timedelta(hours=1), "iss": "iss", "aud": "aud"},
        "guard-secret",
        algorithm="HS256",
    )
    assert evaluate_route_access(forged, RouteAccess.AUTHENTICATED, SETTINGS).redirect_to == LOGIN_PATH


@pytest.mark.parametrize(
    ("role", "access", "allowed"),
    [
        (Role.ADMIN, RouteAccess.AUTHENTICATED, True),
        (Role.SUPERADMIN, RouteAccess.AUTHENTICATED, True),
        (Role.ADMIN, RouteAccess.ADMIN_ONLY, True),
        (Role.SUPERADMIN, RouteAccess.ADMIN_ONLY, True),
        (Role.ADMIN, RouteAccess.SUPERADMIN_ONLY, False),
        (Role.SUPERADMIN, RouteAccess.SUPERADMIN_ONLY, True),
    ],
)
def test_role_table(role: Role, access: RouteAccess, allowed: bool) -> None:
    decision = evaluate_route_access(_token(role), access, SETTINGS)
    assert decision.allowed is allowed
    assert decision.user is not None and decision.user.role == role
    assert decision.redirect_to == (None if allowed else UNAUTHORIZED_PATH)


def test_decode_carries_issue_time() -> None:
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    token = _token(now=now, expire_seconds=10**9)
    user = decode_access_token(token, SETTINGS)
    assert user.issued_at == int(now.timestamp())
    assert user.email == "someone@example.com"
