"""
Contact domain: forwards a visitor's message to the site owner's inbox.

Nothing is persisted; a delivery failure reaches the visitor as a 502 so they
can resubmit.
"""
from __future__ import annotations

import logging

from app.auth.schemas import StatusResponse
from app.config import Settings
from app.contact.schemas import ContactRequest
from app.email import send as email
from app.email.sender import EmailSender

logger = logging.getLogger(__name__)


async def send_contact_email(
    body: ContactRequest,
    settings: Settings,
    sender: EmailSender,
) -> StatusResponse:
    await email.send_contact_notice(
        sender,
        settings,
        name=body.name,
        email=body.email,
        message=body.message,
        phone=body.phone or None,
        organization=body.organization or None,
        subject=body.subject or None,
    )
    logger.info("Contact form submission forwarded")
    return StatusResponse(message="Message sent successfully")
