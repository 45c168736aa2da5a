from collections.abc import Awaitable, Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from shared.auth.config import AuthSettings, get_auth_settings
from shared.auth.guard import LOGIN_PATH, RouteAccess, evaluate_route_access
from shared.models.user import CurrentUser

http_bearer = HTTPBearer(auto_error=False)


def require_access(access: RouteAccess) -> Callable[..., Awaitable[CurrentUser]]:
    """Build a dependency that enforces the route guard for `access`.

    A login redirect becomes 401, an unauthorized redirect becomes 403.
    """

    async def _dependency(
        credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
        settings: AuthSettings = Depends(get_auth_settings),
    ) -> CurrentUser:
        token = credentials.credentials if credentials else None
        decision = evaluate_route_access(token, access, settings)
        if decision.allowed and decision.user is not None:
            return decision.user
        if decision.redirect_to == LOGIN_PATH:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="You are not logged in. Please log in to get access.",
                headers={"WWW-Authenticate": "Bearer"},
            )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to perform this action.",
        )

    return _dependency


get_current_user_required = require_access(RouteAccess.AUTHENTICATED)
require_admin_role = require_access(RouteAccess.ADMIN_ONLY)
require_superadmin_role = require_access(RouteAccess.SUPERADMIN_ONLY)
