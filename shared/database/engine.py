"""
Async engine and session factory.

Postgres (asyncpg) in every deployed environment; SQLite (aiosqlite) for the
test suite, which takes neither pool sizing nor TLS arguments.
"""
import ssl
from pathlib import Path
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()

_POOL_OPTIONS: dict[str, Any] = {
    "pool_pre_ping": True,
    "pool_size": 5,
    "max_overflow": 10,
    "pool_recycle": 3600,
}


def asyncpg_ssl_argument(mode: str, ca_file: str = "") -> ssl.SSLContext | str | None:
    """Map DATABASE_SSL / DATABASE_SSL_CERT onto asyncpg's `ssl` connect arg.

    "" or "disable" turns TLS off. Any other mode enables it, verified against
    `ca_file` when that file exists and unverified ("require") otherwise.
    """
    mode = mode.strip().lower()
    if mode in ("", "disable"):
        return None
    if ca_file and Path(ca_file).is_file():
        return ssl.create_default_context(cafile=ca_file)
    return "require"


def get_async_engine(
    database_url: str,
    *,
    ssl_mode: str = "",
    ssl_ca_file: str = "",
    **kwargs: Any,
) -> AsyncEngine:
    if database_url.startswith("sqlite"):
        return create_async_engine(database_url, **kwargs)

    # A caller-chosen pool class (NullPool for migrations) takes no sizing options.
    options = dict(kwargs) if "poolclass" in kwargs else {**_POOL_OPTIONS, **kwargs}
    ssl_arg = asyncpg_ssl_argument(ssl_mode, ssl_ca_file)
    if ssl_arg is not None:
        options.setdefault("connect_args", {})["ssl"] = ssl_arg
    return create_async_engine(database_url, **options)


def get_async_session_factory(
    engine: AsyncEngine,
    *,
    expire_on_commit: bool = False,
) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=expire_on_commit,
        autoflush=False,
    )
