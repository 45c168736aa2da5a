import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi import FastAPI
from httpx import AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import User
from app.auth.service import create_access_token
from app.config import Settings
from app.exceptions import EmailDeliveryError, EmailErrorKind
from app.rate_limit import limiter
from scripts.create_superadmin import provision_superadmin
from shared.constants import Role
from tests.helpers import DEFAULT_PASSWORD, RecordingEmailSender, auth_headers, create_user


async def _login(client: AsyncClient, email: str, password: str):
    return await client.post("/api/auth/login", json={"email": email, "password": password})


# ── Service endpoints ─────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_health_and_root(client: AsyncClient) -> None:
    health = await client.get("/health")
    assert health.json() == {"status": "ok", "service": "portfolio"}
    root = await client.get("/")
    assert root.text == "Academic Portfolio API is running"


@pytest.mark.asyncio
async def test_unknown_route_uses_envelope(client: AsyncClient) -> None:
    response = await client.get("/api/nope", headers={"X-Request-ID": "req-123"})
    assert response.status_code == 404
    body = response.json()
    assert body["status"] == "fail"
    assert body["error"]["message"] == "Endpoint not found"
    assert body["request_id"] == "req-123"
    assert response.headers["X-Request-ID"] == "req-123"


# ── Login ─────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("role", "message"),
    [(Role.ADMIN, "Welcome Admin!"), (Role.SUPERADMIN, "Welcome Super Admin!")],
)
async def test_login_success(
    client: AsyncClient, db_session: AsyncSession, settings: Settings, role: Role, message: str
) -> None:
    user = await create_user(db_session, "login@example.com", role=role)
    response = await _login(client, "login@example.com", DEFAULT_PASSWORD)
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["message"] == message
    assert body["user"] == {"id": str(user.id), "email": "login@example.com", "name": "Test Admin", "role": role.value}

    claims = jwt.decode(
        body["token"],
        settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
        audience=settings.jwt_audience,
        issuer=settings.jwt_issuer,
    )
    assert claims["role"] == role.value

    await db_session.refresh(user)
    assert user.last_login_at is not None


@pytest.mark.asyncio
async def test_login_failure_is_generic(client: AsyncClient, admin: User) -> None:
    wrong = await _login(client, admin.email, "wrong-password")
    unknown = await _login(client, "nobody@example.com", DEFAULT_PASSWORD)
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json()["error"] == unknown.json()["error"]
    assert wrong.json()["error"]["code"] == "invalid_credentials"


@pytest.mark.asyncio
async def test_login_validation_error(client: AsyncClient) -> None:
    response = await client.post("/api/auth/login", json={"email": "not-an-email", "password": "x"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "validation_error"


@pytest.mark.asyncio
async def test_login_rate_limited(client: AsyncClient, admin: User) -> None:
    limiter.enabled = True
    for _ in range(5):
        assert (await _login(client, admin.email, "wrong-password")).status_code == 401
    blocked = await _login(client, admin.email, DEFAULT_PASSWORD)
    assert blocked.status_code == 429
    assert blocked.json()["error"]["code"] == "rate_limited"


# ── Password reset flow ───────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_full_reset_scenario(
    client: AsyncClient, db_session: AsyncSession, email_sender: RecordingEmailSender
) -> None:
    await create_user(db_session, "user@example.com")

    forgot = await client.post("/api/auth/forgot-password", json={"email": "user@example.com"})
    assert forgot.status_code == 200
    assert forgot.json()["status"] == "success"
    assert email_sender.sent[-1].to == "user@example.com"
    code = email_sender.last_otp()

    verify = await client.post("/api/auth/verify-otp", json={"email": "user@example.com", "otp": code})
    assert verify.status_code == 200

    reset = await client.post(
        "/api/auth/reset-password",
        json={"email": "user@example.com", "otp": code, "newPassword": "Str0ngPW!", "confirmPassword": "Str0ngPW!"},
    )
    assert reset.status_code == 200
    assert reset.json()["status"] == "success"

    assert (await _login(client, "user@example.com", "Str0ngPW!")).status_code == 200
    assert (await _login(client, "user@example.com", DEFAULT_PASSWORD)).status_code == 401

    again = await client.post(
        "/api/auth/reset-password",
        json={"email": "user@example.com", "otp": code, "newPassword": "An0therPW!"},
    )
    assert again.status_code == 400
    assert again.json()["error"]["code"] == "invalid_or_expired_otp"


@pytest.mark.asyncio
async def test_forgot_password_unknown_email(client: AsyncClient, email_sender: RecordingEmailSender) -> None:
    response = await client.post("/api/auth/forgot-password", json={"email": "ghost@example.com"})
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "user_not_found"
    assert email_sender.sent == []


@pytest.mark.asyncio
async def test_forgot_password_generic_response(
    app: FastAPI, client: AsyncClient, email_sender: RecordingEmailSender
) -> None:
    app.state.settings.password_reset_generic_response = True
    response = await client.post("/api/auth/forgot-password", json={"email": "ghost@example.com"})
    assert response.status_code == 200
    assert email_sender.sent == []


@pytest.mark.asyncio
async def test_failed_email_rolls_back_otp(
    client: AsyncClient, db_session: AsyncSession, email_sender: RecordingEmailSender, admin: User
) -> None:
    email_sender.fail_with = EmailDeliveryError(EmailErrorKind.SENDER_REJECTED)
    response = await client.post("/api/auth/forgot-password", json={"email": admin.email})
    assert response.status_code == 502
    body = response.json()
    assert body["status"] == "error"
    assert body["error"]["code"] == "email_sender_rejected"

    await db_session.refresh(admin)
    assert admin.otp_code is None
    assert admin.otp_expires_at is None


@pytest.mark.asyncio
async def test_verify_otp_malformed_code_is_invalid(client: AsyncClient, admin: User) -> None:
    response = await client.post("/api/auth/verify-otp", json={"email": admin.email, "otp": "12-456"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "invalid_or_expired_otp"


@pytest.mark.asyncio
async def test_reset_mismatch_reported_first(client: AsyncClient, admin: User) -> None:
    response = await client.post(
        "/api/auth/reset-password",
        json={"email": admin.email, "otp": "bad", "newPassword": "short", "confirmPassword": "other"},
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "password_mismatch"


@pytest.mark.asyncio
async def test_reset_mismatch_reported_before_length_ceiling(client: AsyncClient, admin: User) -> None:
    response = await client.post(
        "/api/auth/reset-password",
        json={"email": admin.email, "otp": "123456", "newPassword": "a" * 129, "confirmPassword": "b" * 129},
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "password_mismatch"


@pytest.mark.asyncio
async def test_reset_keeps_surrounding_whitespace(
    client: AsyncClient, db_session: AsyncSession, email_sender: RecordingEmailSender
) -> None:
    await create_user(db_session, "user@example.com")
    await client.post("/api/auth/forgot-password", json={"email": " user@example.com "})
    code = email_sender.last_otp()

    spaced = "  Str0ngPW!  "
    reset = await client.post(
        "/api/auth/reset-password",
        json={"email": "user@example.com", "otp": code, "newPassword": spaced, "confirmPassword": spaced},
    )
    assert reset.status_code == 200

    assert (await _login(client, "user@example.com", spaced)).status_code == 200
    assert (await _login(client, "user@example.com", "Str0ngPW!")).status_code == 401


@pytest.mark.asyncio
async def test_provisioned_password_used_verbatim(client: AsyncClient, db_session: AsyncSession) -> None:
    await provision_superadmin(db_session, email="owner@example.com", password="secretpass ", name="Owner")
    await db_session.commit()

    assert (await _login(client, "owner@example.com", "secretpass ")).status_code == 200
    assert (await _login(client, "owner@example.com", "secretpass")).status_code == 401


# ── Session-bound endpoints ───────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_me_requires_token(client: AsyncClient) -> None:
    response = await client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "unauthorized"


@pytest.mark.asyncio
async def test_me_hides_secrets(client: AsyncClient, admin: User, settings: Settings) -> None:
    response = await client.get("/api/auth/me", headers=auth_headers(admin, settings))
    assert response.status_code == 200
    body = response.json()
    assert body["email"] == admin.email
    assert body["role"] == "admin"
    for secret in ("passwordHash", "password_hash", "otpCode", "otpExpiresAt"):
        assert secret not in body


@pytest.mark.asyncio
async def test_deleted_account_token_rejected(
    client: AsyncClient, db_session: AsyncSession, admin: User, settings: Settings
) -> None:
    headers = auth_headers(admin, settings)
    await db_session.delete(admin)
    await db_session.commit()
    response = await client.get("/api/auth/me", headers=headers)
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "account_gone"


@pytest.mark.asyncio
async def test_update_password_rotates_token(client: AsyncClient, admin: User, settings: Settings) -> None:
    old_token = create_access_token(
        admin.id,
        admin.email,
        admin.role,
        settings.jwt_secret,
        settings.jwt_algorithm,
        settings.jwt_issuer,
        settings.jwt_audience,
        now=datetime.now(timezone.utc) - timedelta(seconds=30),
    )
    old_headers = {"Authorization": f"Bearer {old_token}"}

    response = await client.patch(
        "/api/auth/update-password",
        headers=old_headers,
        json={"currentPassword": DEFAULT_PASSWORD, "newPassword": "N3wPassword!", "confirmPassword": "N3wPassword!"},
    )
    assert response.status_code == 200
    new_token = response.json()["token"]

    stale = await client.get("/api/auth/me", headers=old_headers)
    assert stale.status_code == 401
    assert stale.json()["error"]["code"] == "token_stale"

    fresh = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {new_token}"})
    assert fresh.status_code == 200


@pytest.mark.asyncio
async def test_update_password_wrong_current(client: AsyncClient, admin: User, settings: Settings) -> None:
    response = await client.patch(
        "/api/auth/update-password",
        headers=auth_headers(admin, settings),
        json={"currentPassword": "nope", "newPassword": "N3wPassword!", "confirmPassword": "N3wPassword!"},
    )
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "incorrect_current_password"


@pytest.mark.asyncio
async def test_forged_token_rejected(client: AsyncClient, admin: User) -> None:
    forged = create_access_token(
        uuid.uuid4(), "x@example.com", Role.SUPERADMIN, "wrong-secret", "HS256",
        "academic-portfolio", "academic-portfolio-admin",
    )
    response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {forged}"})
    assert response.status_code == 401
