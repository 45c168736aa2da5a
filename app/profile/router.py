"""
Profile domain: router, mounted under /api/auth next to the auth routes.

Routes:
  GET    /me                  Own account (any logged-in admin)
  PATCH  /update-me           Edit profile text, upload photo / carousel / CV (multipart)
  PATCH  /update-carousel     Replace the carousel list (superadmin only)
  GET    /public/superadmin   Portfolio owner's public profile
  GET    /public/carousel     Portfolio owner's carousel
  GET    /public/contact      Portfolio owner's contact block
"""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_account, require_superadmin
from app.auth.models import User
from app.database import get_db
from app.dependencies import get_storage
from app.profile import controller as ctrl
from app.profile.schemas import (
    CarouselResponse,
    ProfileResponse,
    PublicContactResponse,
    PublicProfileResponse,
    UpdateCarouselRequest,
)
from app.storage import Storage

router = APIRouter(prefix="/auth", tags=["profile"])


@router.get("/me", response_model=ProfileResponse, summary="Get own profile")
async def get_me(user: User = Depends(get_current_account)) -> ProfileResponse:
    return await ctrl.get_me(user)


@router.patch(
    "/update-me",
    response_model=ProfileResponse,
    summary="Update own profile (multipart: text fields, profileImage, carousel[], cv)",
)
async def update_me(
    request: Request,
    user: User = Depends(get_current_account),
    session: AsyncSession = Depends(get_db),
    storage: Storage = Depends(get_storage),
) -> ProfileResponse:
    form = await request.form()
    return await ctrl.update_me(session, user, form, storage)


@router.patch(
    "/update-carousel",
    response_model=CarouselResponse,
    summary="Replace the homepage carousel (superadmin only)",
)
async def update_carousel(
    body: UpdateCarouselRequest,
    user: User = Depends(require_superadmin),
    session: AsyncSession = Depends(get_db),
) -> CarouselResponse:
    return await ctrl.update_carousel(session, user, body)


# ── Public ────────────────────────────────────────────────────────────────────

@router.get(
    "/public/superadmin",
    response_model=PublicProfileResponse,
    summary="Public profile of the portfolio owner",
)
async def public_profile(session: AsyncSession = Depends(get_db)) -> PublicProfileResponse:
    return await ctrl.get_public_profile(session)


@router.get("/public/carousel", response_model=CarouselResponse, summary="Public carousel")
async def public_carousel(session: AsyncSession = Depends(get_db)) -> CarouselResponse:
    return await ctrl.get_public_carousel(session)


@router.get(
    "/public/contact",
    response_model=PublicContactResponse,
    summary="Public contact details",
)
async def public_contact(session: AsyncSession = Depends(get_db)) -> PublicContactResponse:
    return await ctrl.get_public_contact(session)
