"""
Portfolio service: auth-specific FastAPI dependencies.

The shared dependencies only check the token. These add the account lookup:
the user must still exist and the token must not predate the last password
change.
"""
from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import User
from app.auth.service import get_user_by_id, is_token_stale
from app.database import get_db
from app.exceptions import AccountGone, TokenStale
from shared.auth.dependencies import (
    get_current_user_required,
    require_admin_role,
    require_superadmin_role,
)
from shared.models.user import CurrentUser


async def _load_account(session: AsyncSession, current_user: CurrentUser) -> User:
    user = await get_user_by_id(session, current_user.id)
    if user is None:
        raise AccountGone()
    if is_token_stale(user, current_user.issued_at):
        raise TokenStale()
    return user


async def get_current_account(
    current_user: CurrentUser = Depends(get_current_user_required),
    session: AsyncSession = Depends(get_db),
) -> User:
    return await _load_account(session, current_user)


async def require_admin(
    current_user: CurrentUser = Depends(require_admin_role),
    session: AsyncSession = Depends(get_db),
) -> User:
    """Admin or superadmin account."""
    return await _load_account(session, current_user)


async def require_superadmin(
    current_user: CurrentUser = Depends(require_superadmin_role),
    session: AsyncSession = Depends(get_db),
) -> User:
    return await _load_account(session, current_user)
