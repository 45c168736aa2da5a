"""
Profile domain: Pydantic V2 request/response schemas.

Three read models over the same users row:
  ProfileResponse        the logged-in admin's own account (GET /me)
  PublicProfileResponse  the portfolio owner as shown on the public site
  PublicContactResponse  the contact block of the public site
"""
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import ConfigDict, Field

from shared.constants import Role
from shared.models import CamelModel

# Form field (camelCase) for each supported social link; stored under the same key.
SOCIAL_LINK_FIELDS: tuple[str, ...] = (
    "googleScholar",
    "orcid",
    "researchGate",
    "linkedin",
    "github",
    "twitter",
    "website",
)


class CarouselItem(CamelModel):
    image_url: str = Field(min_length=1, max_length=500)
    title: str = Field(default="", max_length=200)
    description: str = Field(default="", max_length=1000)


# ── Requests ──────────────────────────────────────────────────────────────────

class UpdateProfileForm(CamelModel):
    """Text parts of the PATCH /update-me multipart form.

    Only submitted fields are applied; an empty string clears the field.
    researchInterests is a comma-separated list.
    """

    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(default=None, max_length=150)
    title: str | None = Field(default=None, max_length=200)
    bio: str | None = Field(default=None, max_length=5000)
    phone: str | None = Field(default=None, max_length=30)
    affiliation: str | None = Field(default=None, max_length=255)
    location: str | None = Field(default=None, max_length=255)
    research_interests: str | None = Field(default=None, max_length=2000)

    google_scholar: str | None = Field(default=None, max_length=500)
    orcid: str | None = Field(default=None, max_length=500)
    research_gate: str | None = Field(default=None, max_length=500)
    linkedin: str | None = Field(default=None, max_length=500)
    github: str | None = Field(default=None, max_length=500)
    twitter: str | None = Field(default=None, max_length=500)
    website: str | None = Field(default=None, max_length=500)


class UpdateCarouselRequest(CamelModel):
    """Body for PATCH /update-carousel; replaces the whole list."""

    model_config = ConfigDict(extra="forbid")

    carousel_items: list[CarouselItem]


# ── Responses ─────────────────────────────────────────────────────────────────

class ProfileResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    role: Role
    name: str
    title: str | None
    bio: str | None
    phone: str | None
    affiliation: str | None
    location: str | None
    profile_image_url: str | None
    cv_url: str | None
    research_interests: list[str]
    social_links: dict[str, str]
    carousel_items: list[CarouselItem]
    last_login_at: datetime | None
    created_at: datetime
    updated_at: datetime


class PublicProfileResponse(CamelModel):
    """What a visitor sees: no account identity, no login metadata."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    title: str | None
    bio: str | None
    affiliation: str | None
    location: str | None
    profile_image_url: str | None
    cv_url: str | None
    research_interests: list[str]
    social_links: dict[str, str]
    carousel_items: list[CarouselItem]


class CarouselResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    carousel_items: list[CarouselItem]


class PublicContactResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    email: str
    phone: str | None
    affiliation: str | None
    location: str | None
    social_links: dict[str, str]
