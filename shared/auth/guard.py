"""
Route guard: decides whether a session token may open a given route.

Pure logic with no FastAPI imports so it can back both the HTTP dependencies
in shared.auth.dependencies and any non-HTTP caller (scripts, tests).

Decision table:
  no token / bad signature / expired   → redirect to LOGIN_PATH
  valid token, role not allowed        → redirect to UNAUTHORIZED_PATH
  valid token, role allowed            → allowed
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from uuid import UUID

from jose import JWTError, jwt

from shared.auth.config import AuthSettings
from shared.constants import Role
from shared.models.user import CurrentUser

LOGIN_PATH = "/login"
UNAUTHORIZED_PATH = "/unauthorized"


class RouteAccess(str, enum.Enum):
    AUTHENTICATED = "authenticated"
    ADMIN_ONLY = "admin_only"
    SUPERADMIN_ONLY = "superadmin_only"


_ALLOWED_ROLES: dict[RouteAccess, frozenset[Role]] = {
    RouteAccess.AUTHENTICATED: frozenset(Role),
    RouteAccess.ADMIN_ONLY: frozenset({Role.ADMIN, Role.SUPERADMIN}),
    RouteAccess.SUPERADMIN_ONLY: frozenset({Role.SUPERADMIN}),
}


@dataclass(frozen=True)
class GuardDecision:
    allowed: bool
    redirect_to: str | None = None
    user: CurrentUser | None = None


def decode_access_token(token: str, settings: AuthSettings) -> CurrentUser:
    """Verify signature, expiry, issuer and audience, then build the user context.

    Raises JWTError for a bad or expired token and ValueError for a payload
    that is missing `sub` or carries an unknown role.
    """
    payload = jwt.decode(
        token,
        settings.secret,
        algorithms=[settings.algorithm],
        issuer=settings.issuer,
        audience=settings.audience,
    )
    user_id = payload.get("sub")
    if not user_id:
        raise ValueError("Missing sub in token")
    iat = payload.get("iat")
    return CurrentUser(
        id=UUID(user_id),
        email=payload.get("email") or "",
        role=Role(payload.get("role")),
        issued_at=int(iat) if iat is not None else None,
    )


def evaluate_route_access(
    token: str | None,
    access: RouteAccess,
    settings: AuthSettings,
) -> GuardDecision:
    if not token:
        return GuardDecision(allowed=False, redirect_to=LOGIN_PATH)
    try:
        user = decode_access_token(token, settings)
    except (JWTError, ValueError, KeyError):
        return GuardDecision(allowed=False, redirect_to=LOGIN_PATH)
    if user.role not in _ALLOWED_ROLES[access]:
        return GuardDecision(allowed=False, redirect_to=UNAUTHORIZED_PATH, user=user)
    return GuardDecision(allowed=True, user=user)
