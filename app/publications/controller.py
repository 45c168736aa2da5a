"""
Publications domain: request orchestration.
"""
from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import User
from app.publications import service
from app.publications.models import PublicationType
from app.publications.schemas import (
    PublicationCreate,
    PublicationPage,
    PublicationResponse,
    PublicationUpdate,
)
from shared.models import PaginationParams


async def list_publications(
    session: AsyncSession,
    pagination: PaginationParams,
    *,
    publication_type: PublicationType | None = None,
    year: int | None = None,
    featured: bool | None = None,
) -> PublicationPage:
    items, total = await service.list_publications(
        session,
        offset=pagination.offset(),
        limit=pagination.limit(),
        publication_type=publication_type,
        year=year,
        featured=featured,
    )
    return PublicationPage(
        items=[PublicationResponse.model_validate(p) for p in items],
        total=total,
        page=pagination.page,
        page_size=pagination.page_size,
        has_more=pagination.offset() + len(items) < total,
    )


async def get_publication(session: AsyncSession, publication_id: uuid.UUID) -> PublicationResponse:
    return PublicationResponse.model_validate(await service.get_publication(session, publication_id))


async def create_publication(
    session: AsyncSession,
    body: PublicationCreate,
    user: User,
) -> PublicationResponse:
    publication = await service.create_publication(session, body.model_dump(), created_by=user.id)
    return PublicationResponse.model_validate(publication)


async def update_publication(
    session: AsyncSession,
    publication_id: uuid.UUID,
    body: PublicationUpdate,
) -> PublicationResponse:
    publication = await service.update_publication(
        session, publication_id, body.model_dump(exclude_unset=True)
    )
    return PublicationResponse.model_validate(publication)


async def delete_publication(session: AsyncSession, publication_id: uuid.UUID) -> None:
    await service.delete_publication(session, publication_id)
