"""
Portfolio service: SQLAlchemy ORM model for publications.

Tables owned by this module:
  - publications   Papers, chapters and theses listed on the public site.
"""
from __future__ import annotations

import enum
import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from shared.database import Base, UTCDateTime


class PublicationType(str, enum.Enum):
    JOURNAL = "journal"
    CONFERENCE = "conference"
    BOOK_CHAPTER = "book_chapter"
    PREPRINT = "preprint"
    THESIS = "thesis"
    OTHER = "other"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Publication(Base):
    __tablename__ = "publications"
    __table_args__ = (
        sa.Index("ix_publications_year_created", "year", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(sa.Uuid(), primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(sa.String(500), nullable=False)
    # Display string, e.g. "A. Author, B. Author"
    authors: Mapped[str] = mapped_column(sa.String(1000), nullable=False)
    venue: Mapped[str | None] = mapped_column(sa.String(500), nullable=True)
    year: Mapped[int] = mapped_column(sa.Integer(), nullable=False, index=True)
    publication_type: Mapped[PublicationType] = mapped_column(
        sa.Enum(
            PublicationType,
            name="publicationtype",
            native_enum=False,
            length=20,
            values_callable=lambda e: [x.value for x in e],
        ),
        nullable=False,
        default=PublicationType.JOURNAL,
    )
    abstract: Mapped[str | None] = mapped_column(sa.Text(), nullable=True)
    doi: Mapped[str | None] = mapped_column(sa.String(255), nullable=True)
    url: Mapped[str | None] = mapped_column(sa.String(500), nullable=True)
    pdf_url: Mapped[str | None] = mapped_column(sa.String(500), nullable=True)
    keywords: Mapped[list[str]] = mapped_column(sa.JSON(), nullable=False, default=list)
    is_featured: Mapped[bool] = mapped_column(sa.Boolean(), nullable=False, default=False)
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        sa.Uuid(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    def __repr__(self) -> str:
        return f"<Publication id={self.id} year={self.year} title={self.title[:40]!r}>"
