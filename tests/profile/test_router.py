import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import User
from app.config import Settings
from shared.constants import Role
from tests.helpers import JPEG_BYTES, PDF_BYTES, PNG_BYTES, auth_headers, create_user


# ── update-me ─────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_update_text_fields(client: AsyncClient, admin: User, settings: Settings) -> None:
    response = await client.patch(
        "/api/auth/update-me",
        headers=auth_headers(admin, settings),
        data={
            "title": "Lecturer",
            "bio": "Distributed systems.",
            "researchInterests": "Consensus, Storage , ,Consensus",
            "orcid": "https://orcid.org/0000-0001",
            "github": "https://github.com/ada",
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Ada Admin"
    assert body["title"] == "Lecturer"
    assert body["researchInterests"] == ["Consensus", "Storage"]
    assert body["socialLinks"] == {"orcid": "https://orcid.org/0000-0001", "github": "https://github.com/ada"}


@pytest.mark.asyncio
async def test_empty_value_clears_field(
    client: AsyncClient, superadmin: User, settings: Settings, db_session: AsyncSession
) -> None:
    response = await client.patch(
        "/api/auth/update-me",
        headers=auth_headers(superadmin, settings),
        data={"bio": "", "orcid": "", "location": "Porto"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["bio"] is None
    assert body["location"] == "Porto"
    assert "orcid" not in body["socialLinks"]
    # Fields not submitted keep their value.
    assert body["title"] == "Professor of Computer Science"

    await db_session.refresh(superadmin)
    assert superadmin.bio is None
    assert superadmin.social_links == {}


@pytest.mark.asyncio
async def test_upload_profile_image_and_cv(client: AsyncClient, admin: User, settings: Settings) -> None:
    response = await client.patch(
        "/api/auth/update-me",
        headers=auth_headers(admin, settings),
        files=[
            ("profileImage", ("me.png", PNG_BYTES, "image/png")),
            ("cv", ("cv.pdf", PDF_BYTES, "application/pdf")),
        ],
    )
    assert response.status_code == 200
    body = response.json()
    assert body["profileImageUrl"].startswith("http://testserver/uploads/profile/")
    assert body["profileImageUrl"].endswith(".png")
    assert body["cvUrl"].startswith("http://testserver/uploads/cv/")

    served = await client.get(body["profileImageUrl"].removeprefix("http://testserver"))
    assert served.status_code == 200
    assert served.content == PNG_BYTES


@pytest.mark.asyncio
async def test_declared_type_is_not_trusted(
    client: AsyncClient, admin: User, settings: Settings, db_session: AsyncSession
) -> None:
    response = await client.patch(
        "/api/auth/update-me",
        headers=auth_headers(admin, settings),
        data={"title": "Should not be saved"},
        files=[("profileImage", ("evil.png", b"<?php echo 1; ?>", "image/png"))],
    )
    assert response.status_code == 415
    assert response.json()["error"]["code"] == "unsupported_file_type"

    await db_session.refresh(admin)
    assert admin.title is None
    assert admin.profile_image_url is None


@pytest.mark.asyncio
async def test_cv_must_be_pdf(client: AsyncClient, admin: User, settings: Settings) -> None:
    response = await client.patch(
        "/api/auth/update-me",
        headers=auth_headers(admin, settings),
        files=[("cv", ("cv.pdf", PNG_BYTES, "application/pdf"))],
    )
    assert response.status_code == 415


@pytest.mark.asyncio
async def test_carousel_upload_appends(client: AsyncClient, superadmin: User, settings: Settings) -> None:
    response = await client.patch(
        "/api/auth/update-me",
        headers=auth_headers(superadmin, settings),
        files=[
            ("carousel", ("one.png", PNG_BYTES, "image/png")),
            ("carousel", ("two.jpg", JPEG_BYTES, "image/jpeg")),
        ],
    )
    assert response.status_code == 200
    items = response.json()["carouselItems"]
    assert len(items) == 3
    assert items[0]["title"] == "Lab"
    assert items[1]["imageUrl"].endswith(".png")
    assert items[2]["imageUrl"].endswith(".jpg")
    assert items[2]["title"] == "" and items[2]["description"] == ""


@pytest.mark.asyncio
async def test_carousel_upload_respects_limit(
    client: AsyncClient, db_session: AsyncSession, settings: Settings
) -> None:
    owner = await create_user(
        db_session,
        "full@example.com",
        role=Role.SUPERADMIN,
        carousel_items=[{"imageUrl": f"http://x/{i}.png", "title": "", "description": ""} for i in range(10)],
    )
    response = await client.patch(
        "/api/auth/update-me",
        headers=auth_headers(owner, settings),
        files=[("carousel", ("one.png", PNG_BYTES, "image/png"))],
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "carousel_limit_exceeded"


@pytest.mark.asyncio
async def test_update_me_requires_login(client: AsyncClient) -> None:
    response = await client.patch("/api/auth/update-me", data={"title": "x"})
    assert response.status_code == 401


# ── update-carousel ───────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_update_carousel_superadmin_only(
    client: AsyncClient, admin: User, superadmin: User, settings: Settings
) -> None:
    body = {"carouselItems": [{"imageUrl": "http://x/new.png", "title": "New"}]}

    forbidden = await client.patch("/api/auth/update-carousel", headers=auth_headers(admin, settings), json=body)
    assert forbidden.status_code == 403
    assert forbidden.json()["error"]["code"] == "forbidden"

    ok = await client.patch("/api/auth/update-carousel", headers=auth_headers(superadmin, settings), json=body)
    assert ok.status_code == 200
    assert ok.json() == {"carouselItems": [{"imageUrl": "http://x/new.png", "title": "New", "description": ""}]}

    public = await client.get("/api/auth/public/carousel")
    assert public.json() == ok.json()


@pytest.mark.asyncio
async def test_update_carousel_limit(client: AsyncClient, superadmin: User, settings: Settings) -> None:
    body = {"carouselItems": [{"imageUrl": f"http://x/{i}.png"} for i in range(11)]}
    response = await client.patch(
        "/api/auth/update-carousel", headers=auth_headers(superadmin, settings), json=body
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "carousel_limit_exceeded"


# ── Public read models ────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_public_endpoints_404_without_owner(client: AsyncClient, admin: User) -> None:
    for path in ("/api/auth/public/superadmin", "/api/auth/public/carousel", "/api/auth/public/contact"):
        response = await client.get(path)
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "portfolio_owner_not_found"


@pytest.mark.asyncio
async def test_public_profile(client: AsyncClient, admin: User, superadmin: User) -> None:
    response = await client.get("/api/auth/public/superadmin")
    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Prof. Grace Owner"
    assert body["researchInterests"] == ["Compilers", "Type systems"]
    for hidden in ("id", "email", "role", "lastLoginAt", "passwordHash"):
        assert hidden not in body


@pytest.mark.asyncio
async def test_public_contact(client: AsyncClient, superadmin: User) -> None:
    response = await client.get("/api/auth/public/contact")
    assert response.status_code == 200
    assert response.json() == {
        "name": "Prof. Grace Owner",
        "email": "owner@example.com",
        "phone": "+351 555 0100",
        "affiliation": "Example University",
        "location": "Lisbon",
        "socialLinks": {"orcid": "https://orcid.org/0000-0000-0000-0000"},
    }
