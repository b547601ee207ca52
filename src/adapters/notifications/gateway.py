"""
Notification gateway - provider selection and delivery.

select_provider() maps a configuration string to one of the three
channels (case-insensitive, console for anything unrecognized). The
gateway builds a fresh provider per call.
"""

import logging

from src.config.settings import Settings
from src.domain.ports import ChannelReport, NotificationProvider

from .console import ConsoleNotificationProvider
from .resend import ResendNotificationProvider
from .smtp import SmtpNotificationProvider

logger = logging.getLogger(__name__)

CONSOLE = "console"
DIRECT = "direct"
MANAGED = "managed"

# Accepted spellings per channel
_ALIASES = {
    CONSOLE: CONSOLE,
    DIRECT: DIRECT,
    "smtp": DIRECT,
    MANAGED: MANAGED,
    "resend": MANAGED,
}


def resolve_channel(config_value: str | None) -> str:
    """Normalize a configuration string to a channel name."""
    return _ALIASES.get((config_value or "").strip().lower(), CONSOLE)


def select_provider(config_value: str | None, settings: Settings) -> NotificationProvider:
    """Build the provider selected by config_value."""
    channel = resolve_channel(config_value)
    if channel == DIRECT:
        return SmtpNotificationProvider(settings)
    if channel == MANAGED:
        return ResendNotificationProvider(settings)
    return ConsoleNotificationProvider()


class NotificationGateway:
    """
    Implements NotificationDispatcher protocol.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    @property
    def channel(self) -> str:
        return resolve_channel(self._settings.email_provider)

    def deliver(self, destination: str, subject: str, body: str) -> bool:
        """Send through a fresh provider and return its result unchanged."""
        return self._provider().send(destination, subject, body)

    def dispatch(self, destination: str, subject: str, body: str) -> ChannelReport:
        """Send through a fresh provider and report whether it degraded."""
        provider = self._provider()
        accepted = provider.send(destination, subject, body)
        return ChannelReport(accepted=accepted, degraded=provider.degraded, provider=self.channel)

    def _provider(self) -> NotificationProvider:
        return select_provider(self._settings.email_provider, self._settings)
