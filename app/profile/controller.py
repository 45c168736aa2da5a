"""
Profile domain: request orchestration (thin glue between router and service).

update_me validates every uploaded file before storing any of them, and stores
them before touching the row, so a rejected upload leaves the profile as it was.
"""
from __future__ import annotations

import pydantic
from pydantic.alias_generators import to_camel
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import FormData, UploadFile

from app.auth.models import User
from app.exceptions import ValidationError
from app.profile.schemas import (
    SOCIAL_LINK_FIELDS,
    CarouselResponse,
    ProfileResponse,
    PublicContactResponse,
    PublicProfileResponse,
    UpdateCarouselRequest,
    UpdateProfileForm,
)
from app.profile.service import (
    check_carousel_size,
    get_public_owner,
    replace_carousel,
    update_profile,
)
from app.storage import CV_POLICY, IMAGE_POLICY, Storage, read_validated

PROFILE_IMAGE_FIELD = "profileImage"
CAROUSEL_FIELD = "carousel"
CV_FIELD = "cv"


def _uploads(form: FormData, field: str, max_count: int | None = None) -> list[UploadFile]:
    # Browsers submit an empty part with no filename for an untouched file input.
    files = [v for v in form.getlist(field) if isinstance(v, UploadFile) and v.filename]
    if max_count is not None and len(files) > max_count:
        raise ValidationError(f"At most {max_count} file(s) may be uploaded for '{field}'.")
    return files


def _parse_text_fields(form: FormData) -> tuple[dict[str, str | None], dict[str, str | None]]:
    """Split submitted text parts into (profile columns, social links)."""
    text_parts = {key: value for key, value in form.multi_items() if isinstance(value, str)}
    try:
        parsed = UpdateProfileForm.model_validate(text_parts)
    except pydantic.ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise ValidationError(f"{field}: {first.get('msg')}") from exc

    fields: dict[str, str | None] = {}
    social_links: dict[str, str | None] = {}
    for key, value in parsed.model_dump(exclude_unset=True).items():
        camel = to_camel(key)
        if camel in SOCIAL_LINK_FIELDS:
            social_links[camel] = value
        else:
            fields[key] = value
    return fields, social_links


async def get_me(user: User) -> ProfileResponse:
    return ProfileResponse.model_validate(user)


async def update_me(
    session: AsyncSession,
    user: User,
    form: FormData,
    storage: Storage,
) -> ProfileResponse:
    fields, social_links = _parse_text_fields(form)

    profile_images = _uploads(form, PROFILE_IMAGE_FIELD, max_count=1)
    carousel_files = _uploads(form, CAROUSEL_FIELD)
    cvs = _uploads(form, CV_FIELD, max_count=1)
    check_carousel_size(len(user.carousel_items or []) + len(carousel_files))

    image = await read_validated(profile_images[0], PROFILE_IMAGE_FIELD, IMAGE_POLICY) if profile_images else None
    carousel = [await read_validated(f, CAROUSEL_FIELD, IMAGE_POLICY) for f in carousel_files]
    cv = await read_validated(cvs[0], CV_FIELD, CV_POLICY) if cvs else None

    profile_image_url = await storage.save(image, "profile") if image else None
    carousel_urls = [await storage.save(item, "carousel") for item in carousel]
    cv_url = await storage.save(cv, "cv") if cv else None

    await update_profile(
        session,
        user,
        fields,
        social_links,
        profile_image_url=profile_image_url,
        cv_url=cv_url,
        new_carousel_urls=carousel_urls,
    )
    return ProfileResponse.model_validate(user)


async def update_carousel(
    session: AsyncSession,
    user: User,
    body: UpdateCarouselRequest,
) -> CarouselResponse:
    items = [item.model_dump(by_alias=True) for item in body.carousel_items]
    await replace_carousel(session, user, items)
    return CarouselResponse.model_validate(user)


# ── Public read models ────────────────────────────────────────────────────────

async def get_public_profile(session: AsyncSession) -> PublicProfileResponse:
    return PublicProfileResponse.model_validate(await get_public_owner(session))


async def get_public_carousel(session: AsyncSession) -> CarouselResponse:
    return CarouselResponse.model_validate(await get_public_owner(session))


async def get_public_contact(session: AsyncSession) -> PublicContactResponse:
    return PublicContactResponse.model_validate(await get_public_owner(session))
