"""
Email delivery through Resend.
"""
import asyncio
import logging
import resend
from app.core.config import settings
from app.core.exceptions import DeliveryFailure

logger = logging.getLogger(__name__)


class ResendEmailSender:
    """
    Sends email with the Resend SDK. Without RESEND_API_KEY the sender is
    unconfigured and the dispatcher skips email entirely.
    """

    def __init__(self, api_key: str = None, from_email: str = None):
        self.api_key = settings.RESEND_API_KEY if api_key is None else api_key
        self.from_email = from_email or settings.RESEND_FROM_EMAIL

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _send_sync(self, to: str, subject: str, text: str, html: str) -> None:
        resend.api_key = self.api_key
        params = {
            "from": self.from_email,
            "to": [to],
            "subject": subject,
            "text": text,
            "html": html,
        }
        try:
            resend.Emails.send(params)
        except Exception as e:
            raise DeliveryFailure(f"Resend failed for {to}: {e}") from e

    async def send(self, to: str, subject: str, text: str, html: str) -> None:
        """Send without blocking the event loop (the SDK is synchronous)."""
        await asyncio.to_thread(self._send_sync, to, subject, text, html)
