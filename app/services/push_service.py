"""
Push delivery through the FCM HTTP v1 API.
"""
import logging
import httpx
from app.core.config import settings
from app.core.exceptions import DeliveryFailure

logger = logging.getLogger(__name__)


class FCMPushSender:
    """Sends FCM v1 message bodies. Unconfigured senders report configured=False."""

    def __init__(self, project_id: str = None, access_token: str = None,
                 api_url: str = None, timeout: float = None):
        self.project_id = settings.FCM_PROJECT_ID if project_id is None else project_id
        self.access_token = settings.FCM_ACCESS_TOKEN if access_token is None else access_token
        self.api_url = api_url or settings.FCM_API_URL
        self.timeout = timeout or settings.NOTIFICATION_TIMEOUT_SECONDS

    @property
    def configured(self) -> bool:
        return bool(self.project_id and self.access_token)

    async def send(self, message: dict) -> None:
        """POST one message. Raises DeliveryFailure on any HTTP error."""
        url = self.api_url.format(project_id=self.project_id)
        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json"
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=message, headers=headers)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            # 404 UNREGISTERED is the usual answer for a stale device token
            error_text = e.response.text[:200] if e.response.text else ""
            raise DeliveryFailure(f"FCM returned {e.response.status_code}: {error_text}") from e
        except httpx.HTTPError as e:
            raise DeliveryFailure(f"FCM request failed: {e}") from e

        logger.debug(f"FCM accepted message: {response.text[:200]}")
