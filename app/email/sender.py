"""
Email sender contract and factory.

Business code depends only on the EmailSender protocol. The concrete sender is
built once at startup by build_email_sender(), stored on app.state and handed
to handlers through app.dependencies.get_email_sender, which tests override.

Senders raise EmailDeliveryError(kind) on failure and never retry.
"""
from __future__ import annotations

import logging
from typing import Protocol

from app.config import Settings

logger = logging.getLogger(__name__)


class EmailSender(Protocol):
    async def send(
        self,
        to: str,
        subject: str,
        html_body: str,
        text_body: str,
        *,
        reply_to: str | None = None,
    ) -> None: ...


def format_from_header(name: str, address: str) -> str:
    return f"{name} <{address}>" if name else address


def build_email_sender(settings: Settings) -> EmailSender:
    """Return the sender for the configured provider ("ses" or "smtp")."""
    provider = settings.email_provider.strip().lower()
    if provider == "smtp":
        from app.email.smtp import SMTPEmailSender

        logger.info("Email provider: SMTP (%s:%s)", settings.smtp_host, settings.smtp_port)
        return SMTPEmailSender(settings)
    if provider == "ses":
        from app.email.ses import SESEmailSender

        logger.info("Email provider: SES (%s)", settings.aws_region)
        return SESEmailSender(settings)
    raise ValueError(f"Unknown EMAIL_PROVIDER {settings.email_provider!r}; expected 'ses' or 'smtp'")
