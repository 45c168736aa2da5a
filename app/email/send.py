"""
Transactional emails sent by the portfolio service.

Unlike background notifications, these are awaited inside the request: a
failure raises EmailDeliveryError, which aborts the request transaction and
reaches the client as a 502.
"""
from __future__ import annotations

import logging

from app.config import Settings
from app.email.sender import EmailSender
from app.email.templates import render_contact_email, render_otp_email
from app.exceptions import EmailDeliveryError, EmailErrorKind

logger = logging.getLogger(__name__)


async def send_password_reset_otp(
    sender: EmailSender,
    to_email: str,
    otp: str,
    settings: Settings,
) -> None:
    subject, html_body, text_body = render_otp_email(
        otp,
        settings.app_name,
        expire_minutes=max(1, settings.otp_expire_seconds // 60),
    )
    await sender.send(to_email, subject, html_body, text_body)


async def send_contact_notice(
    sender: EmailSender,
    settings: Settings,
    *,
    name: str,
    email: str,
    message: str,
    phone: str | None = None,
    organization: str | None = None,
    subject: str | None = None,
) -> None:
    """Forward a contact-form submission to the site owner; replies go to the visitor."""
    inbox = settings.contact_inbox
    if not inbox:
        logger.error("No contact inbox configured (CONTACT_RECIPIENT_EMAIL / EMAIL_FROM_ADDRESS)")
        raise EmailDeliveryError(EmailErrorKind.UNKNOWN, "Contact email is not configured.")
    mail_subject, html_body, text_body = render_contact_email(
        name=name,
        email=email,
        message=message,
        phone=phone,
        organization=organization,
        subject=subject,
    )
    await sender.send(inbox, mail_subject, html_body, text_body, reply_to=email)
