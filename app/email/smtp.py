"""
Async SMTP delivery via aiosmtplib.

Sends a multipart/alternative message (text + HTML) with optional STARTTLS.
"""
from __future__ import annotations

import logging
from email.message import EmailMessage

import aiosmtplib

from app.config import Settings
from app.email.sender import format_from_header
from app.exceptions import EmailDeliveryError, EmailErrorKind

logger = logging.getLogger(__name__)


def classify_smtp_error(exc: aiosmtplib.SMTPException) -> EmailErrorKind:
    if isinstance(exc, (aiosmtplib.SMTPSenderRefused, aiosmtplib.SMTPRecipientsRefused)):
        return EmailErrorKind.SENDER_REJECTED
    if isinstance(exc, aiosmtplib.SMTPAuthenticationError):
        return EmailErrorKind.ACCESS_DENIED
    return EmailErrorKind.UNKNOWN


class SMTPEmailSender:
    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def build_message(
        self,
        to: str,
        subject: str,
        html_body: str,
        text_body: str,
        reply_to: str | None = None,
    ) -> EmailMessage:
        settings = self._settings
        msg = EmailMessage()
        msg["From"] = format_from_header(settings.email_from_name, settings.email_from_address)
        msg["To"] = to
        msg["Subject"] = subject
        if reply_to:
            msg["Reply-To"] = reply_to
        msg.set_content(text_body)
        msg.add_alternative(html_body, subtype="html")
        return msg

    async def send(
        self,
        to: str,
        subject: str,
        html_body: str,
        text_body: str,
        *,
        reply_to: str | None = None,
    ) -> None:
        settings = self._settings
        if not settings.email_from_address or not settings.smtp_host:
            logger.error("SMTP sender not configured")
            raise EmailDeliveryError(EmailErrorKind.UNKNOWN, "Email sender is not configured.")

        msg = self.build_message(to, subject, html_body, text_body, reply_to)
        try:
            await aiosmtplib.send(
                msg,
                hostname=settings.smtp_host,
                port=settings.smtp_port,
                username=settings.smtp_username or None,
                password=settings.smtp_password or None,
                start_tls=settings.smtp_start_tls,
                timeout=15,
            )
        except aiosmtplib.SMTPException as exc:
            kind = classify_smtp_error(exc)
            logger.error("SMTP delivery (%s → %s) failed: %s", settings.smtp_host, to, exc)
            raise EmailDeliveryError(kind) from exc

        logger.info("Email sent to %s via SMTP", to)
