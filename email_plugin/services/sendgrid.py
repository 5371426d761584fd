from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from email_plugin.config import settings
from email_plugin.schemas import MailMessage, MailSender

logger = logging.getLogger(__name__)

MAIL_SEND_PATH = "/v3/mail/send"


@dataclass
class SendResult:
    status_code: int
    message_id: Optional[str] = None


def _addresses(emails: List[str]) -> List[Dict[str, str]]:
    return [{"email": email} for email in emails]


def build_mail_payload(message: MailMessage, sender: MailSender) -> Dict[str, Any]:
    """Translate a ``MailMessage`` into a SendGrid v3 ``mail/send`` body."""

    personalization: Dict[str, Any] = {"to": _addresses(message.to)}
    # SendGrid rejects empty cc/bcc arrays
    if message.cc:
        personalization["cc"] = _addresses(message.cc)
    if message.bcc:
        personalization["bcc"] = _addresses(message.bcc)

    payload: Dict[str, Any] = {
        "personalizations": [personalization],
        "from": sender.model_dump(exclude_none=True),
        "subject": message.subject,
        # content values must be non-empty
        "content": [{"type": "text/html", "value": message.html or " "}],
    }
    if message.attachments:
        payload["attachments"] = [a.model_dump(exclude_none=True) for a in message.attachments]
    return payload


class SendGridClient:
    """Send-capable SendGrid client bound to a single API key."""

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url or settings.SENDGRID_API_URL
        self.timeout = timeout if timeout is not None else settings.SENDGRID_TIMEOUT_SECONDS
        self._transport = transport

    def send(self, message: MailMessage, sender: MailSender) -> SendResult:
        payload = build_mail_payload(message, sender)
        headers = {"Authorization": f"Bearer {self.api_key}"}

        logger.info(
            "[SendGrid] Sending email to %s recipient(s) with %s attachment(s)",
            len(message.to) + len(message.cc) + len(message.bcc),
            len(message.attachments),
        )
        with httpx.Client(
            base_url=self.base_url, timeout=self.timeout, transport=self._transport
        ) as client:
            response = client.post(MAIL_SEND_PATH, json=payload, headers=headers)
        response.raise_for_status()

        return SendResult(
            status_code=response.status_code,
            message_id=response.headers.get("X-Message-Id"),
        )


__all__ = ["SendGridClient", "SendResult", "build_mail_payload"]
