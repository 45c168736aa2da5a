import os
from collections.abc import AsyncGenerator

# Pin token settings before anything reads them; env vars win over a local .env.
os.environ["JWT_SECRET"] = "test-secret"
os.environ["JWT_ISSUER"] = "academic-portfolio"
os.environ["JWT_AUDIENCE"] = "academic-portfolio-admin"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ENV_NAME"] = "test"

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import User
from app.config import Settings
from app.database import create_all, dispose_db, get_session_factory, init_db
from app.dependencies import get_email_sender
from app.main import create_app
from app.rate_limit import limiter
from app.storage import LocalStorage
from shared.auth.config import get_auth_settings
from shared.constants import Role
from tests.helpers import RecordingEmailSender, create_user


@pytest.fixture(autouse=True)
def _isolate_process_state():
    get_auth_settings.cache_clear()
    limiter.enabled = False
    yield
    limiter.reset()
    limiter.enabled = False


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'portfolio.db'}",
        env_name="test",
        jwt_secret="test-secret",
        email_provider="ses",
        email_from_address="noreply@example.org",
        contact_recipient_email="owner@example.org",
        app_name="Test Portfolio",
        storage_backend="local",
        upload_dir=str(tmp_path / "uploads"),
        public_base_url="http://testserver",
        rate_limit_enabled=False,
    )


@pytest_asyncio.fixture
async def database(settings: Settings) -> AsyncGenerator[None, None]:
    init_db(settings.database_url)
    await create_all()
    yield
    await dispose_db()


@pytest_asyncio.fixture
async def db_session(database) -> AsyncGenerator[AsyncSession, None]:
    async with get_session_factory()() as session:
        yield session


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def app(settings: Settings, database, email_sender: RecordingEmailSender) -> FastAPI:
    # ASGITransport does not run the lifespan, so wire app.state by hand.
    application = create_app(settings)
    application.state.storage = LocalStorage(settings.upload_dir, settings.public_base_url)
    application.dependency_overrides[get_email_sender] = lambda: email_sender
    return application


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def admin(db_session: AsyncSession) -> User:
    return await create_user(db_session, "admin@example.com", role=Role.ADMIN, name="Ada Admin")


@pytest_asyncio.fixture
async def superadmin(db_session: AsyncSession) -> User:
    return await create_user(
        db_session,
        "owner@example.com",
        role=Role.SUPERADMIN,
        name="Prof. Grace Owner",
        title="Professor of Computer Science",
        bio="Works on programming languages.",
        affiliation="Example University",
        location="Lisbon",
        phone="+351 555 0100",
        research_interests=["Compilers", "Type systems"],
        social_links={"orcid": "https://orcid.org/0000-0000-0000-0000"},
        carousel_items=[
            {"imageUrl": "http://testserver/uploads/carousel/a.png", "title": "Lab", "description": ""}
        ],
    )
