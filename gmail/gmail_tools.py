"""
Gmail Tools

Notification mail for the generated report.
"""

import asyncio
import base64
import logging
from email.mime.text import MIMEText

from core.utils import UserInputError, handle_http_errors

logger = logging.getLogger(__name__)


def _prepare_message(to: str, subject: str, body: str) -> dict:
    """Build a Gmail API message with an HTML body and url-safe base64 raw payload."""
    message = MIMEText(body, "html")
    message["To"] = to
    message["Subject"] = subject
    raw_message = base64.urlsafe_b64encode(message.as_bytes()).decode()
    return {"raw": raw_message}


@handle_http_errors("send_email", service_type="gmail")
async def send_email(service, to: str, subject: str, body: str) -> str:
    """
    Sends an email from the authenticated account.

    Args:
        to (str): Comma separated recipient addresses.
        subject (str): Email subject.
        body (str): HTML body.

    Returns:
        str: The sent message ID.
    """
    logger.info(f"[send_email] Invoked. To: '{to}', Subject: '{subject}'")
    if not to:
        raise UserInputError("Cannot send email without recipients.")

    sent_message = await asyncio.to_thread(
        service.users()
        .messages()
        .send(userId="me", body=_prepare_message(to, subject, body))
        .execute
    )
    message_id = sent_message.get("id")
    logger.info(f"Email sent. Message ID: {message_id}")
    return message_id
