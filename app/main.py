import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.auth.router import router as auth_router
from app.config import Settings, get_settings
from app.contact.router import auth_alias_router as contact_alias_router
from app.contact.router import router as contact_router
from app.database import create_all, dispose_db, init_db
from app.email.sender import build_email_sender
from app.profile.router import router as profile_router
from app.publications.router import router as publications_router
from app.rate_limit import limiter
from app.storage import build_storage
from shared.middleware import install_error_handlers, request_id_middleware
from shared.middleware.error_handler import error_envelope


# ── OpenAPI metadata ──────────────────────────────────────────────────────────

_DESCRIPTION = """
## Academic Portfolio API

Backs a personal academic website and its single-owner admin panel:

* **Authentication**: email/password login returning a JWT session token.
* **Password reset**: 6-digit code emailed to the account, valid for 10 minutes, single use.
* **Profile**: the superadmin's profile, carousel and CV feed the public pages.
* **Publications**: public listing with filters; admins create, edit and delete.
* **Contact**: visitor messages are forwarded to the owner's inbox.

### Authentication
Protected endpoints require:
```
Authorization: Bearer <token>
```

### Error shape
```json
{"status": "fail", "error": {"code": "invalid_credentials", "message": "..."}, "request_id": "..."}
```
"""

_TAGS_METADATA = [
    {"name": "auth", "description": "Login, password reset by emailed OTP, password change."},
    {"name": "profile", "description": "Own profile, uploads, carousel and the public read models."},
    {"name": "publications", "description": "Publication list (public) and CRUD (admin)."},
    {"name": "contact", "description": "Public contact form."},
]

logger = logging.getLogger(__name__)


# ── Health schema ─────────────────────────────────────────────────────────────

class HealthResponse(BaseModel):
    status: str
    service: str


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    response = error_envelope(
        request,
        429,
        "rate_limited",
        f"Too many requests. Limit: {exc.detail}. Please try again later.",
    )
    return request.app.state.limiter._inject_headers(response, request.state.view_rate_limit)


# ── App factory ───────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    init_db(
        settings.database_url,
        ssl_mode=settings.database_ssl,
        ssl_ca_file=settings.database_ssl_cert,
    )
    if settings.env_name in ("development", "test"):
        await create_all()
    app.state.email_sender = build_email_sender(settings)
    app.state.storage = build_storage(settings)
    if settings.storage_backend.strip().lower() == "local":
        Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    logger.info("Portfolio API started (%s)", settings.env_name)
    yield
    await dispose_db()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(levelname)s:%(name)s: %(message)s",
    )

    app = FastAPI(
        title="Academic Portfolio API",
        version="1.0.0",
        description=_DESCRIPTION,
        openapi_tags=_TAGS_METADATA,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Attach rate limiter state before middleware
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # Middleware is applied in reverse-registration order (last added = outermost).
    # Request ID wraps the error envelope so every error carries the ID;
    # CORS is outermost so all responses (including 429s and 500s) carry CORS headers.
    app.add_middleware(SlowAPIMiddleware)
    install_error_handlers(app)
    app.middleware("http")(request_id_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )

    app.include_router(auth_router, prefix="/api")
    app.include_router(profile_router, prefix="/api")
    app.include_router(contact_alias_router, prefix="/api")
    app.include_router(publications_router, prefix="/api")
    app.include_router(contact_router, prefix="/api")

    if settings.storage_backend.strip().lower() == "local":
        # Directory is created in the lifespan; LocalStorage also creates subfolders on write.
        app.mount(
            "/uploads",
            StaticFiles(directory=settings.upload_dir, check_dir=False),
            name="uploads",
        )

    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    async def root() -> str:
        return "Academic Portfolio API is running"

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service="portfolio")

    return app


app = create_app()
