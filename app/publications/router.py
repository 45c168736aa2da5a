"""
Publications router.

Reads are public; writes need an admin or superadmin account.
"""
import uuid

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import require_admin
from app.auth.models import User
from app.database import get_db
from app.publications import controller
from app.publications.models import PublicationType
from app.publications.schemas import (
    PublicationCreate,
    PublicationPage,
    PublicationResponse,
    PublicationUpdate,
)
from shared.models import PaginationParams

router = APIRouter(prefix="/publications", tags=["publications"])


@router.get("", response_model=PublicationPage, summary="List publications")
async def list_publications(
    page: int = Query(default=1, ge=1, le=1000),
    page_size: int = Query(default=20, ge=1, le=100, alias="pageSize"),
    publication_type: PublicationType | None = Query(default=None, alias="type"),
    year: int | None = Query(default=None, ge=1900, le=2100),
    featured: bool | None = Query(default=None),
    session: AsyncSession = Depends(get_db),
) -> PublicationPage:
    return await controller.list_publications(
        session,
        PaginationParams(page=page, page_size=page_size),
        publication_type=publication_type,
        year=year,
        featured=featured,
    )


@router.get("/{publication_id}", response_model=PublicationResponse, summary="Get a publication")
async def get_publication(
    publication_id: uuid.UUID,
    session: AsyncSession = Depends(get_db),
) -> PublicationResponse:
    return await controller.get_publication(session, publication_id)


@router.post(
    "",
    response_model=PublicationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a publication (admin)",
)
async def create_publication(
    body: PublicationCreate,
    user: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> PublicationResponse:
    return await controller.create_publication(session, body, user)


@router.patch(
    "/{publication_id}",
    response_model=PublicationResponse,
    summary="Edit a publication (admin, partial)",
)
async def update_publication(
    publication_id: uuid.UUID,
    body: PublicationUpdate,
    _: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> PublicationResponse:
    return await controller.update_publication(session, publication_id, body)


@router.delete(
    "/{publication_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a publication (admin)",
)
async def delete_publication(
    publication_id: uuid.UUID,
    _: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> Response:
    await controller.delete_publication(session, publication_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
