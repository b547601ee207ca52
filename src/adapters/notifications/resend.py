"""
Managed-service notification provider - Resend-compatible HTTP API.

Failure policy:
Any error response, transport fault, timeout or missing API key is
absorbed here. The provider logs the failure and returns the result of
its own ConsoleNotificationProvider.send() with the same arguments,
so callers never see a raw transport failure from this channel.
"""

import logging

import httpx

from src.config.settings import Settings
from src.domain.exceptions import NotificationError

from .console import ConsoleNotificationProvider

logger = logging.getLogger(__name__)


class ResendNotificationProvider:
    """
    Implements NotificationProvider protocol via a managed email API.

    Holds an owned ConsoleNotificationProvider as fallback. degraded flips
    to True once the fallback has been used.
    """

    name = "managed"

    def __init__(self, settings: Settings, client: httpx.Client | None = None) -> None:
        self._api_key = settings.resend_api_key
        self._api_url = settings.resend_api_url
        self._from_email = settings.resend_from_email
        self._timeout = settings.notification_timeout_seconds
        self._client = client
        self._fallback = ConsoleNotificationProvider()
        self.degraded = False

    def send(self, destination: str, subject: str, body: str) -> bool:
        try:
            message_id = self._post(destination, subject, body)
        except Exception as exc:
            logger.error("Managed email error: %s", exc)
            logger.warning("Falling back to console logging...")
            self.degraded = True
            return self._fallback.send(destination, subject, body)

        logger.info("Email sent successfully via managed service: %s", message_id)
        return True

    def _post(self, destination: str, subject: str, body: str) -> str | None:
        """
        Submit the message to the managed API.

        Returns:
            The provider's message id, if any

        Raises:
            NotificationError: If unconfigured or the API rejects the message
            httpx.HTTPError: On transport failure or timeout
        """
        if not self._api_key:
            raise NotificationError("managed email API key is not configured")

        payload = {
            "from": self._from_email,
            "to": [destination],
            "subject": subject,
            "html": body,
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}

        if self._client is not None:
            response = self._client.post(self._api_url, json=payload, headers=headers)
        else:
            with httpx.Client(timeout=self._timeout) as client:
                response = client.post(self._api_url, json=payload, headers=headers)

        if response.is_error:
            raise NotificationError(f"managed email API returned {response.status_code}: {response.text}")

        try:
            data = response.json()
        except ValueError:
            return None
        return data.get("id") if isinstance(data, dict) else None
