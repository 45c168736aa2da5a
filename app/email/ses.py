"""
Amazon SES delivery via aioboto3.

Provider errors are mapped onto EmailErrorKind:
  MessageRejected, MailFromDomainNotVerifiedException → sender_rejected
  AccessDenied*                                       → access_denied
  anything else                                       → unknown
"""
from __future__ import annotations

import logging

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError

from app.config import Settings
from app.email.sender import format_from_header
from app.exceptions import EmailDeliveryError, EmailErrorKind

logger = logging.getLogger(__name__)

_SENDER_REJECTED_CODES = frozenset({"MessageRejected", "MailFromDomainNotVerifiedException"})


def classify_client_error(exc: ClientError) -> EmailErrorKind:
    code = exc.response.get("Error", {}).get("Code", "")
    if code in _SENDER_REJECTED_CODES:
        return EmailErrorKind.SENDER_REJECTED
    if code.startswith("AccessDenied"):
        return EmailErrorKind.ACCESS_DENIED
    return EmailErrorKind.UNKNOWN


def _ses_session(settings: Settings) -> aioboto3.Session:
    # Empty keys fall through to the default AWS credential chain (IAM role, profile).
    return aioboto3.Session(
        aws_access_key_id=settings.aws_access_key_id or None,
        aws_secret_access_key=settings.aws_secret_access_key or None,
        region_name=settings.aws_region,
    )


class SESEmailSender:
    def __init__(self, settings: Settings, session: aioboto3.Session | None = None) -> None:
        self._settings = settings
        self._session = session or _ses_session(settings)

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
        if not settings.email_from_address:
            logger.error("SES sender address not configured")
            raise EmailDeliveryError(EmailErrorKind.UNKNOWN, "Email sender is not configured.")

        params = {
            "Source": format_from_header(settings.email_from_name, settings.email_from_address),
            "Destination": {"ToAddresses": [to]},
            "Message": {
                "Subject": {"Charset": "UTF-8", "Data": subject},
                "Body": {
                    "Html": {"Charset": "UTF-8", "Data": html_body},
                    "Text": {"Charset": "UTF-8", "Data": text_body},
                },
            },
        }
        if reply_to:
            params["ReplyToAddresses"] = [reply_to]

        try:
            async with self._session.client("ses", region_name=settings.aws_region) as ses:
                response = await ses.send_email(**params)
        except ClientError as exc:
            kind = classify_client_error(exc)
            logger.error(
                "SES delivery to %s failed (%s): %s",
                to,
                exc.response.get("Error", {}).get("Code"),
                kind.value,
            )
            raise EmailDeliveryError(kind) from exc
        except BotoCoreError as exc:
            logger.error("SES delivery to %s failed: %s", to, exc)
            raise EmailDeliveryError(EmailErrorKind.UNKNOWN) from exc

        logger.info("Email sent to %s via SES (MessageId=%s)", to, response.get("MessageId"))
