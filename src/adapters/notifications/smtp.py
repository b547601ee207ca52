"""
SMTP notification provider - Direct transport stub.

Selected by email_provider="direct". Logs the message together with the
configured relay and reports acceptance; no connection is opened.
"""

import logging

from src.config.settings import Settings

logger = logging.getLogger(__name__)


class SmtpNotificationProvider:
    """Implements NotificationProvider protocol for a raw SMTP relay (stub)."""

    name = "direct"
    degraded = False

    def __init__(self, settings: Settings) -> None:
        self._host = settings.smtp_host
        self._port = settings.smtp_port
        self._from_email = settings.smtp_from_email

    def send(self, destination: str, subject: str, body: str) -> bool:
        logger.info(
            "[SMTP EMAIL] Relay: %s:%d From: %s To: %s Subject: %s\n%s",
            self._host,
            self._port,
            self._from_email,
            destination,
            subject,
            body,
        )
        return True
