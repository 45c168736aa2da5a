"""
Portfolio service: SQLAlchemy ORM model for admin accounts.

Tables owned by this module:
  - users   Admin/superadmin accounts. The superadmin's profile fields back the
            public portfolio pages; the password reset OTP lives on the row.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from shared.constants import Role
from shared.database import Base, UTCDateTime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        # A pending reset challenge is the pair (code, expiry); never one without the other.
        sa.CheckConstraint(
            "(otp_code IS NULL) = (otp_expires_at IS NULL)",
            name="ck_users_otp_fields_paired",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid(),
        primary_key=True,
        default=uuid.uuid4,
    )

    # ── Credentials ───────────────────────────────────────────────────────────
    email: Mapped[str] = mapped_column(
        sa.String(255), unique=True, nullable=False, index=True
    )
    password_hash: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    role: Mapped[Role] = mapped_column(
        sa.Enum(
            Role,
            name="userrole",
            native_enum=False,
            length=20,
            values_callable=lambda e: [x.value for x in e],
        ),
        nullable=False,
        default=Role.ADMIN,
        index=True,
    )

    # ── Password reset challenge (epoch milliseconds) ─────────────────────────
    # otp_code holds an argon2 hash of the 6-digit code, never the code itself.
    otp_code: Mapped[str | None] = mapped_column(sa.String(255), nullable=True)
    otp_expires_at: Mapped[int | None] = mapped_column(sa.BigInteger(), nullable=True)
    # Tokens issued before this instant are rejected on account-loading routes.
    password_changed_at: Mapped[int | None] = mapped_column(sa.BigInteger(), nullable=True)
    last_login_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime(), nullable=True
    )

    # ── Public profile ────────────────────────────────────────────────────────
    name: Mapped[str] = mapped_column(sa.String(150), nullable=False, default="")
    title: Mapped[str | None] = mapped_column(sa.String(200), nullable=True)
    bio: Mapped[str | None] = mapped_column(sa.Text(), nullable=True)
    phone: Mapped[str | None] = mapped_column(sa.String(30), nullable=True)
    affiliation: Mapped[str | None] = mapped_column(sa.String(255), nullable=True)
    location: Mapped[str | None] = mapped_column(sa.String(255), nullable=True)
    profile_image_url: Mapped[str | None] = mapped_column(sa.String(500), nullable=True)
    cv_url: Mapped[str | None] = mapped_column(sa.String(500), nullable=True)
    research_interests: Mapped[list[str]] = mapped_column(
        sa.JSON(), nullable=False, default=list
    )
    # {"googleScholar": "...", "orcid": "...", ...}
    social_links: Mapped[dict[str, str]] = mapped_column(
        sa.JSON(), nullable=False, default=dict
    )
    # [{"imageUrl": "...", "title": "...", "description": "..."}, ...] in display order
    carousel_items: Mapped[list[dict[str, Any]]] = mapped_column(
        sa.JSON(), nullable=False, default=list
    )

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    def clear_otp(self) -> None:
        self.otp_code = None
        self.otp_expires_at = None

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} role={self.role}>"
