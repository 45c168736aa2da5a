import re
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.controller import build_login_response
from app.auth.models import User
from app.auth.utils import hash_password
from app.config import Settings
from shared.constants import Role

DEFAULT_PASSWORD = "OldPassw0rd!"

_OTP_IN_TEXT = re.compile(r"Your OTP is: (\d{6})")

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 64
PDF_BYTES = b"%PDF-1.7\n" + b"0" * 64


@dataclass
class SentEmail:
    to: str
    subject: str
    html_body: str
    text_body: str
    reply_to: str | None = None


@dataclass
class RecordingEmailSender:
    """In-memory EmailSender; set `fail_with` to make every send raise it."""

    sent: list[SentEmail] = field(default_factory=list)
    fail_with: Exception | None = None

    async def send(
        self,
        to: str,
        subject: str,
        html_body: str,
        text_body: str,
        *,
        reply_to: str | None = None,
    ) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(SentEmail(to, subject, html_body, text_body, reply_to))

    def last_otp(self) -> str:
        assert self.sent, "no email was sent"
        match = _OTP_IN_TEXT.search(self.sent[-1].text_body)
        assert match, "last email carries no OTP"
        return match.group(1)


async def create_user(
    session: AsyncSession,
    email: str = "admin@example.com",
    password: str = DEFAULT_PASSWORD,
    role: Role = Role.ADMIN,
    **profile,
) -> User:
    user = User(
        email=email,
        password_hash=hash_password(password),
        role=role,
        name=profile.pop("name", "Test Admin"),
        **profile,
    )
    session.add(user)
    await session.commit()
    return user


def auth_headers(user: User, settings: Settings) -> dict[str, str]:
    token = build_login_response(user, settings).token
    return {"Authorization": f"Bearer {token}"}
