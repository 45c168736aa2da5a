"""
Publications domain: pure business logic (zero FastAPI imports).
"""
from __future__ import annotations

import uuid
from typing import Any

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import PublicationNotFound
from app.publications.models import Publication, PublicationType

# Columns that must never be set to NULL through a partial update.
_REQUIRED_COLUMNS = frozenset({"title", "authors", "year", "publication_type", "keywords", "is_featured"})


async def list_publications(
    session: AsyncSession,
    *,
    offset: int,
    limit: int,
    publication_type: PublicationType | None = None,
    year: int | None = None,
    featured: bool | None = None,
) -> tuple[list[Publication], int]:
    """Newest first: year descending, then creation time descending."""
    query = sa.select(Publication)
    if publication_type is not None:
        query = query.where(Publication.publication_type == publication_type)
    if year is not None:
        query = query.where(Publication.year == year)
    if featured is not None:
        query = query.where(Publication.is_featured.is_(featured))

    total = (
        await session.execute(sa.select(sa.func.count()).select_from(query.subquery()))
    ).scalar_one()
    result = await session.execute(
        query.order_by(Publication.year.desc(), Publication.created_at.desc())
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def get_publication(session: AsyncSession, publication_id: uuid.UUID) -> Publication:
    publication = await session.get(Publication, publication_id)
    if publication is None:
        raise PublicationNotFound()
    return publication


async def create_publication(
    session: AsyncSession,
    fields: dict[str, Any],
    created_by: uuid.UUID,
) -> Publication:
    publication = Publication(**fields, created_by=created_by)
    session.add(publication)
    await session.flush()
    return publication


async def update_publication(
    session: AsyncSession,
    publication_id: uuid.UUID,
    updates: dict[str, Any],
) -> Publication:
    publication = await get_publication(session, publication_id)
    for key, value in updates.items():
        if value is None and key in _REQUIRED_COLUMNS:
            continue
        setattr(publication, key, value)
    await session.flush()
    return publication


async def delete_publication(session: AsyncSession, publication_id: uuid.UUID) -> None:
    publication = await get_publication(session, publication_id)
    await session.delete(publication)
    await session.flush()
