# =============================================================================
# lib/mailer.py - Mail Provider Client
# =============================================================================
# Sends plain-text email through the SendGrid v3 API.
#
# Usage:
#   from lib.mailer import send_email
#   send_email("john@gmail.com", "Password reset", "...")
# =============================================================================

import logging

import httpx

from app.config import settings
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

MAILER_TIMEOUT = 10


class MailerError(ApplicationError):
    """Raised when the mail provider rejects or fails a send."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, code="MAILER_ERROR", **kwargs)


def send_email(to: str, subject: str, message: str) -> None:
    """
    Send a plain-text email.

    Args:
        to: Recipient address
        subject: Subject line
        message: Plain-text body

    Raises:
        MailerError: If the provider request fails
    """
    body = {
        "personalizations": [{"to": [{"email": to}]}],
        "from": {"email": settings.FROM_EMAIL, "name": settings.FROM_NAME},
        "subject": subject,
        "content": [{"type": "text/plain", "value": message}],
    }

    try:
        response = httpx.post(
            settings.SENDGRID_URL,
            json=body,
            headers={"Authorization": f"Bearer {settings.SENDGRID_API_KEY}"},
            timeout=MAILER_TIMEOUT,
        )
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error(f"Email to {to} failed: {e}")
        raise MailerError(
            f"Failed to send email: {e}",
            suggestion="Check SENDGRID_API_KEY and FROM_EMAIL",
            details={"to": to},
        )

    logger.info(f"Email sent to {to}: {subject}")
