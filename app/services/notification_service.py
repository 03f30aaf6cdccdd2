"""
Notification dispatcher: fans a date event out to push and email concurrently.

Delivery is fire-and-forget from the caller's point of view. Missing tokens or
provider credentials are an expected degraded mode and only log; provider
errors and timeouts are logged and swallowed so the write that caused the
notification is never affected.
"""
import asyncio
import logging
from typing import Iterable, Optional
from app.core.config import settings
from app.core.exceptions import DeliveryFailure
from app.schemas.date import DateResponse
from app.services.email_service import ResendEmailSender
from app.services.push_service import FCMPushSender
from app.services.notification_templates import (
    NotificationType, Recipient, build_push_message, build_email
)

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Sends one event to one or more recipients on every available channel."""

    def __init__(self, push_sender=None, email_sender=None, timeout: Optional[float] = None):
        self.push_sender = push_sender if push_sender is not None else FCMPushSender()
        self.email_sender = email_sender if email_sender is not None else ResendEmailSender()
        self.timeout = timeout or settings.NOTIFICATION_TIMEOUT_SECONDS

    async def send_push(self, recipient: Recipient, date: DateResponse, kind: NotificationType) -> bool:
        """Returns True if the provider accepted the message."""
        if not recipient.push_token:
            logger.info(f"No push token for {recipient.user_id}, skipping {kind.value} push")
            return False
        if not self.push_sender.configured:
            logger.warning("Push provider credentials not configured - push notifications disabled")
            return False

        message = build_push_message(recipient.push_token, date, kind, recipient.timezone)
        try:
            await asyncio.wait_for(self.push_sender.send(message), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error(f"Push {kind.value} to {recipient.user_id} timed out after {self.timeout}s")
            return False
        except DeliveryFailure as e:
            # Token might be stale; never fail the surrounding operation
            logger.error(f"Push {kind.value} to {recipient.user_id} failed: {e}")
            return False
        except Exception as e:
            logger.error(f"Unexpected push error for {recipient.user_id}: {e}", exc_info=True)
            return False

        logger.info(f"Push {kind.value} sent to token {recipient.push_token[:20]}...")
        return True

    async def send_email(self, recipient: Recipient, date: DateResponse, kind: NotificationType) -> bool:
        """Returns True if the provider accepted the email."""
        if not self.email_sender.configured:
            logger.warning(f"RESEND_API_KEY not set - {kind.value} email to {recipient.user_id} not sent")
            return False
        if not recipient.email:
            logger.info(f"No email address for {recipient.user_id}, skipping {kind.value} email")
            return False

        content = build_email(date, kind, recipient.name, recipient.timezone)
        try:
            await asyncio.wait_for(
                self.email_sender.send(recipient.email, content.subject, content.text, content.html),
                timeout=self.timeout
            )
        except asyncio.TimeoutError:
            logger.error(f"Email {kind.value} to {recipient.email} timed out after {self.timeout}s")
            return False
        except DeliveryFailure as e:
            logger.error(f"Email {kind.value} to {recipient.email} failed: {e}")
            return False
        except Exception as e:
            logger.error(f"Unexpected email error for {recipient.email}: {e}", exc_info=True)
            return False

        logger.info(f"Email {kind.value} sent to {recipient.email}")
        return True

    async def notify(self, recipient: Recipient, date: DateResponse, kind: NotificationType) -> None:
        """Push and email for one recipient, concurrently."""
        await asyncio.gather(
            self.send_push(recipient, date, kind),
            self.send_email(recipient, date, kind)
        )

    async def notify_all(self, recipients: Iterable[Recipient], date: DateResponse,
                         kind: NotificationType) -> None:
        """Every recipient and channel at once; waits for all of them."""
        await asyncio.gather(*(self.notify(r, date, kind) for r in recipients))


_default_dispatcher: Optional[NotificationDispatcher] = None


def get_dispatcher() -> NotificationDispatcher:
    """Dependency returning the process-wide dispatcher."""
    global _default_dispatcher
    if _default_dispatcher is None:
        _default_dispatcher = NotificationDispatcher()
    return _default_dispatcher
