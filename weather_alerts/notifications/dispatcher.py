"""
Notification delivery.

NotificationDispatcher is the contract the fan-out depends on: one send
attempt, a DispatchResult back, never an exception. ResendEmailDispatcher
delivers through the Resend HTTP API.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from weather_alerts.core.api_errors import DispatchError

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"

# Timeout for one delivery request
DISPATCH_TIMEOUT = 15.0


@dataclass(frozen=True)
class DispatchResult:
    sent: bool
    reason: Optional[str] = None
    message_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"sent": self.sent, "reason": self.reason, "message_id": self.message_id}


def split_recipients(recipient: str) -> List[str]:
    """'a@x.com, b@x.com' -> ['a@x.com', 'b@x.com']"""
    return [r.strip() for r in recipient.split(",") if r.strip()]


class NotificationDispatcher(ABC):
    """Delivers a rendered notification. Implementations must not raise."""

    @abstractmethod
    async def send(self, recipient: str, subject: str, content: str) -> DispatchResult:
        ...


class ResendEmailDispatcher(NotificationDispatcher):
    """
    Sends HTML email through the Resend API.

    When no valid API key is configured the message is logged and reported
    as not sent.

    Args:
        api_key: Resend API key ("re_..."), or None
        sender: From header
        timeout: Request timeout in seconds
        client: Optional shared httpx.AsyncClient (tests)
    """

    def __init__(
        self,
        api_key: Optional[str],
        sender: str,
        timeout: float = DISPATCH_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.sender = sender
        self.timeout = timeout
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key) and self.api_key.startswith("re_")

    async def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            if self._client is not None:
                response = await self._client.post(RESEND_API_URL, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(RESEND_API_URL, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            raise DispatchError("Request timed out", source="resend") from e
        except httpx.RequestError as e:
            raise DispatchError(f"Request failed: {e!r}", source="resend") from e

        try:
            data = response.json()
        except ValueError:
            data = {"message": response.text[:500]}

        if response.status_code >= 400:
            message = data.get("message") or data.get("error") or str(data)
            raise DispatchError(
                message,
                source="resend",
                status_code=response.status_code,
                response_data=data,
            )
        return data

    async def send(self, recipient: str, subject: str, content: str) -> DispatchResult:
        if not self.is_configured:
            logger.info(f"Email not configured, would send to {recipient}: {subject}")
            return DispatchResult(sent=False, reason="Email not configured (missing Resend API key)")

        to = split_recipients(recipient)
        if not to:
            return DispatchResult(sent=False, reason="No recipient")

        payload = {"from": self.sender, "to": to, "subject": subject, "html": content}
        try:
            data = await self._post(payload)
        except DispatchError as e:
            logger.error(f"Email to {recipient} failed: {e}")
            return DispatchResult(sent=False, reason=str(e))
        except Exception as e:
            logger.error(f"Unexpected error sending email to {recipient}: {e}", exc_info=True)
            return DispatchResult(sent=False, reason=str(e))

        message_id = data.get("id")
        logger.info(f"Email sent to {recipient} (id={message_id})")
        return DispatchResult(sent=True, message_id=message_id)
