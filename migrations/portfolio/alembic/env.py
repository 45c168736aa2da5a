"""
Alembic environment for the portfolio database.

The connection comes from app.config.Settings, so DATABASE_URL, DATABASE_SSL
and DATABASE_SSL_CERT apply to migrations exactly as they do to the API.
`sqlalchemy.url` in alembic.ini is only a fallback for offline SQL output.
"""
import asyncio
import sys
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection

# <repo>/migrations/portfolio/alembic/env.py → parents[3] is the repo root
sys.path.insert(0, str(Path(__file__).resolve().parents[3]))

import app.database  # noqa: E402,F401  registers every model on Base.metadata
from app.config import get_settings  # noqa: E402
from shared.database import Base, get_async_engine  # noqa: E402

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

settings = get_settings()
target_metadata = Base.metadata


def _configure(**kwargs) -> None:
    context.configure(target_metadata=target_metadata, compare_type=True, **kwargs)


def run_migrations_offline() -> None:
    _configure(
        url=settings.database_url or config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_sync(connection: Connection) -> None:
    # SQLite cannot ALTER most constraints in place; batch mode recreates the table.
    _configure(connection=connection, render_as_batch=connection.dialect.name == "sqlite")
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = get_async_engine(
        settings.database_url,
        ssl_mode=settings.database_ssl,
        ssl_ca_file=settings.database_ssl_cert,
        poolclass=pool.NullPool,
    )
    async with engine.connect() as connection:
        await connection.run_sync(_run_sync)
    await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
