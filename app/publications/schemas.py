"""
Publications domain: Pydantic V2 request/response schemas.
"""
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import ConfigDict, Field

from app.publications.models import PublicationType
from shared.models import CamelModel, PaginatedResponse


class _Request(CamelModel):
    model_config = ConfigDict(extra="forbid")


class PublicationCreate(_Request):
    title: str = Field(min_length=1, max_length=500)
    authors: str = Field(min_length=1, max_length=1000)
    venue: str | None = Field(default=None, max_length=500)
    year: int = Field(ge=1900, le=2100)
    publication_type: PublicationType = PublicationType.JOURNAL
    abstract: str | None = Field(default=None, max_length=10_000)
    doi: str | None = Field(default=None, max_length=255)
    url: str | None = Field(default=None, max_length=500)
    pdf_url: str | None = Field(default=None, max_length=500)
    keywords: list[str] = Field(default_factory=list, max_length=30)
    is_featured: bool = False


class PublicationUpdate(_Request):
    """PATCH body: only provided fields are written; null clears optional ones."""

    title: str | None = Field(default=None, min_length=1, max_length=500)
    authors: str | None = Field(default=None, min_length=1, max_length=1000)
    venue: str | None = Field(default=None, max_length=500)
    year: int | None = Field(default=None, ge=1900, le=2100)
    publication_type: PublicationType | None = None
    abstract: str | None = Field(default=None, max_length=10_000)
    doi: str | None = Field(default=None, max_length=255)
    url: str | None = Field(default=None, max_length=500)
    pdf_url: str | None = Field(default=None, max_length=500)
    keywords: list[str] | None = Field(default=None, max_length=30)
    is_featured: bool | None = None


class PublicationResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    authors: str
    venue: str | None
    year: int
    publication_type: PublicationType
    abstract: str | None
    doi: str | None
    url: str | None
    pdf_url: str | None
    keywords: list[str]
    is_featured: bool
    created_at: datetime
    updated_at: datetime


PublicationPage = PaginatedResponse[PublicationResponse]
