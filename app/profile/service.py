"""
Profile domain: pure business logic (zero FastAPI imports).
"""
from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import User
from app.auth.service import get_portfolio_owner
from app.exceptions import CarouselLimitExceeded, PortfolioOwnerNotFound

MAX_CAROUSEL_ITEMS: int = 10

# Columns that may be cleared to NULL from the edit form.
_NULLABLE_TEXT_FIELDS = ("title", "bio", "phone", "affiliation", "location")


async def get_public_owner(session: AsyncSession) -> User:
    """The superadmin's row, read as the public portfolio profile."""
    owner = await get_portfolio_owner(session)
    if owner is None:
        raise PortfolioOwnerNotFound()
    return owner


def parse_research_interests(raw: str) -> list[str]:
    """Split a comma-separated list, dropping blanks and repeats but keeping order."""
    seen: dict[str, None] = {}
    for part in raw.split(","):
        item = part.strip()
        if item:
            seen.setdefault(item, None)
    return list(seen)


def check_carousel_size(count: int) -> None:
    if count > MAX_CAROUSEL_ITEMS:
        raise CarouselLimitExceeded(MAX_CAROUSEL_ITEMS)


async def update_profile(
    session: AsyncSession,
    user: User,
    fields: dict[str, str | None],
    social_links: dict[str, str | None],
    *,
    profile_image_url: str | None = None,
    cv_url: str | None = None,
    new_carousel_urls: list[str] | None = None,
) -> User:
    """
    Apply a partial edit. Keys absent from `fields` / `social_links` are left
    alone; an empty or None value clears the field. Uploaded carousel images
    are appended after the existing items.
    """
    for key, value in fields.items():
        if key == "name":
            user.name = value or ""
        elif key == "research_interests":
            user.research_interests = parse_research_interests(value or "")
        elif key in _NULLABLE_TEXT_FIELDS:
            setattr(user, key, value or None)

    if social_links:
        links = dict(user.social_links or {})
        for key, url in social_links.items():
            if url:
                links[key] = url
            else:
                links.pop(key, None)
        # Reassign so the JSON column is marked dirty.
        user.social_links = links

    if profile_image_url is not None:
        user.profile_image_url = profile_image_url
    if cv_url is not None:
        user.cv_url = cv_url
    if new_carousel_urls:
        items = list(user.carousel_items or [])
        items.extend({"imageUrl": url, "title": "", "description": ""} for url in new_carousel_urls)
        check_carousel_size(len(items))
        user.carousel_items = items

    # flush: writes changes within the open transaction; get_db commits at request end.
    await session.flush()
    return user


async def replace_carousel(
    session: AsyncSession,
    user: User,
    items: list[dict[str, Any]],
) -> User:
    check_carousel_size(len(items))
    user.carousel_items = items
    await session.flush()
    return user
