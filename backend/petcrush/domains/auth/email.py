"""
OTP email delivery via Resend.

Without an API key the code is written to the log in development; in
production a missing key or a provider failure is a ServiceUnavailable.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
import logging

import httpx

from petcrush.common.config import settings
from petcrush.common.exceptions import ServiceUnavailable

logger = logging.getLogger(__name__)

RESEND_URL = "https://api.resend.com/emails"


@dataclass
class DeliveryResult:
    delivered: bool
    provider: str  # resend / dev-console


class EmailSender:
    """Sends one-time codes; no retry loop."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        sender: Optional[str] = None,
        allow_console_fallback: Optional[bool] = None,
        timeout: float = 10.0,
    ):
        self.api_key = api_key if api_key is not None else settings.resend_api_key
        self.sender = sender or settings.email_from
        if allow_console_fallback is None:
            allow_console_fallback = not settings.is_production
        self.allow_console_fallback = allow_console_fallback
        self.timeout = timeout

    def _console_fallback(self, email: str, code: str, expires_at: datetime) -> DeliveryResult:
        if not self.allow_console_fallback:
            raise ServiceUnavailable("Email delivery is unavailable right now")
        logger.info(f"[OTP][DEV-FALLBACK] email={email} code={code} expiresAt={expires_at.isoformat()}")
        return DeliveryResult(delivered=False, provider="dev-console")

    async def send_otp(self, email: str, code: str, expires_at: datetime) -> DeliveryResult:
        if not self.api_key:
            return self._console_fallback(email, code, expires_at)

        expires = expires_at.isoformat()
        payload = {
            "from": self.sender,
            "to": [email],
            "subject": "Seu código de acesso - PetCrushes",
            "html": f"<p>Seu código de acesso é <strong>{code}</strong>.</p><p>Ele expira em {expires}.</p>",
            "text": f"Seu código de acesso é {code}. Ele expira em {expires}.",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    RESEND_URL,
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
        except httpx.HTTPError as e:
            logger.error(f"[email][resend] request failed: {e}")
            return self._console_fallback(email, code, expires_at)

        if response.status_code >= 400:
            logger.error(f"[email][resend] failed status={response.status_code} body={response.text}")
            return self._console_fallback(email, code, expires_at)

        return DeliveryResult(delivered=True, provider="resend")


_email_sender: Optional[EmailSender] = None


def get_email_sender() -> EmailSender:
    global _email_sender
    if _email_sender is None:
        _email_sender = EmailSender()
    return _email_sender
