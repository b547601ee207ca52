"""
Console notification provider - Implements NotificationProvider protocol.

This module provides the logging-only channel: the default provider
and the universal fallback for every other channel.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleNotificationProvider:
    """
    Implements NotificationProvider protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Always degraded: messages only reach the log sink.
    """

    name = "console"
    degraded = True

    def send(self, destination: str, subject: str, body: str) -> bool:
        """
        Log the message (simulates email delivery).

        Logged at INFO level to be visible in docker-compose logs.

        Returns:
            Always True
        """
        logger.info("[EMAIL] To: %s Subject: %s\n%s", destination, subject, body)
        return True
