"""Portfolio schema: users, publications

Revision ID: 001
Revises:
Create Date: 2026-10-19

Tables created:
  - users          Admin / superadmin accounts, public profile, password reset OTP
  - publications   Publication list shown on the public site

Enums are stored as VARCHAR with CHECK constraints (native_enum=False) so the
same schema runs on PostgreSQL and SQLite.

Downgrade: drops both tables in reverse dependency order.
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ── users ─────────────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column(
            "role",
            sa.Enum("admin", "superadmin", name="userrole", native_enum=False, length=20),
            nullable=False,
            server_default="admin",
        ),
        sa.Column("otp_code", sa.String(255), nullable=True),
        sa.Column("otp_expires_at", sa.BigInteger(), nullable=True),
        sa.Column("password_changed_at", sa.BigInteger(), nullable=True),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("name", sa.String(150), nullable=False, server_default=""),
        sa.Column("title", sa.String(200), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("phone", sa.String(30), nullable=True),
        sa.Column("affiliation", sa.String(255), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("profile_image_url", sa.String(500), nullable=True),
        sa.Column("cv_url", sa.String(500), nullable=True),
        sa.Column("research_interests", sa.JSON(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column("social_links", sa.JSON(), nullable=False, server_default=sa.text("'{}'")),
        sa.Column("carousel_items", sa.JSON(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.CheckConstraint(
            "(otp_code IS NULL) = (otp_expires_at IS NULL)",
            name="ck_users_otp_fields_paired",
        ),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])

    # ── publications ──────────────────────────────────────────────────────────
    op.create_table(
        "publications",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("authors", sa.String(1000), nullable=False),
        sa.Column("venue", sa.String(500), nullable=True),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column(
            "publication_type",
            sa.Enum(
                "journal",
                "conference",
                "book_chapter",
                "preprint",
                "thesis",
                "other",
                name="publicationtype",
                native_enum=False,
                length=20,
            ),
            nullable=False,
            server_default="journal",
        ),
        sa.Column("abstract", sa.Text(), nullable=True),
        sa.Column("doi", sa.String(255), nullable=True),
        sa.Column("url", sa.String(500), nullable=True),
        sa.Column("pdf_url", sa.String(500), nullable=True),
        sa.Column("keywords", sa.JSON(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "created_by",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
    )
    op.create_index("ix_publications_year", "publications", ["year"])
    op.create_index("ix_publications_year_created", "publications", ["year", "created_at"])


def downgrade() -> None:
    op.drop_index("ix_publications_year_created", table_name="publications")
    op.drop_index("ix_publications_year", table_name="publications")
    op.drop_table("publications")
    op.drop_index("ix_users_role", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
