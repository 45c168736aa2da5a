#!/usr/bin/env python3
"""
Create the superadmin account that owns the portfolio.

Reads credentials from the environment or .env:
    ADMIN_EMAIL      admin account email (required)
    ADMIN_PASSWORD   admin account password (required, at least 8 characters)
    ADMIN_NAME       display name (optional, defaults to "Super Admin")

If the account already exists it is upgraded to superadmin; its password is
left untouched.

Usage:
    python -m scripts.create_superadmin
"""
from __future__ import annotations

import asyncio
import sys
from pathlib import Path

# Add repo root to path so `app` and `shared` resolve when run as a file
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from pydantic_settings import BaseSettings, SettingsConfigDict  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from app.auth.constants import MIN_PASSWORD_LENGTH  # noqa: E402
from app.auth.models import User  # noqa: E402
from app.auth.service import get_user_by_email  # noqa: E402
from app.auth.utils import hash_password  # noqa: E402
from app.config import get_settings  # noqa: E402
from shared.constants import Role  # noqa: E402
from shared.database import get_async_engine, get_async_session_factory  # noqa: E402


class ProvisioningSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ADMIN_",
        env_file=str(Path(__file__).resolve().parent.parent / ".env"),
        extra="ignore",
    )

    email: str = ""
    password: str = ""
    name: str = "Super Admin"


async def provision_superadmin(
    session: AsyncSession,
    *,
    email: str,
    password: str,
    name: str,
) -> tuple[User, bool]:
    """Return (user, created). An existing account is promoted, not overwritten."""
    existing = await get_user_by_email(session, email)
    if existing is not None:
        if existing.role != Role.SUPERADMIN:
            existing.role = Role.SUPERADMIN
            await session.flush()
        return existing, False

    user = User(
        email=email.strip().lower(),
        password_hash=hash_password(password),
        name=name,
        role=Role.SUPERADMIN,
    )
    session.add(user)
    await session.flush()
    return user, True


async def main() -> None:
    admin = ProvisioningSettings()
    if not admin.email or not admin.password:
        print("Error: ADMIN_EMAIL and ADMIN_PASSWORD must be set in the environment or .env")
        sys.exit(1)
    if len(admin.password) < MIN_PASSWORD_LENGTH:
        print(f"Error: ADMIN_PASSWORD must be at least {MIN_PASSWORD_LENGTH} characters")
        sys.exit(1)

    settings = get_settings()
    engine = get_async_engine(
        settings.database_url,
        ssl_mode=settings.database_ssl,
        ssl_ca_file=settings.database_ssl_cert,
    )
    session_factory = get_async_session_factory(engine)

    async with session_factory() as session:
        user, created = await provision_superadmin(
            session, email=admin.email, password=admin.password, name=admin.name
        )
        await session.commit()
        if created:
            print(f"Superadmin created: {user.email} (id={user.id})")
        else:
            print(f"User {user.email} already exists (id={user.id}); role is now superadmin.")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
