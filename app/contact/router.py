"""
Contact form router.

The same handler is served at /api/contact/send-contact-email and, for older
frontends, at /api/auth/contact.
"""
from fastapi import APIRouter, Depends, Request

from app.auth.schemas import StatusResponse
from app.config import Settings
from app.contact.controller import send_contact_email as send_contact_email_controller
from app.contact.schemas import ContactRequest
from app.dependencies import get_app_settings, get_email_sender
from app.email.sender import EmailSender
from app.rate_limit import CONTACT_LIMIT, limiter

router = APIRouter(prefix="/contact", tags=["contact"])
auth_alias_router = APIRouter(prefix="/auth", tags=["contact"])


@router.post(
    "/send-contact-email",
    response_model=StatusResponse,
    summary="Send a message to the portfolio owner",
)
@auth_alias_router.post("/contact", response_model=StatusResponse, include_in_schema=False)
@limiter.limit(CONTACT_LIMIT)
async def send_contact_email(
    request: Request,
    body: ContactRequest,
    settings: Settings = Depends(get_app_settings),
    sender: EmailSender = Depends(get_email_sender),
) -> StatusResponse:
    return await send_contact_email_controller(body, settings, sender)
