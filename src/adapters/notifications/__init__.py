"""Notification adapters - Email (console, SMTP, managed) and SMS channels."""

from .console import ConsoleNotificationProvider
from .gateway import NotificationGateway, resolve_channel, select_provider
from .resend import ResendNotificationProvider
from .sms import (
    ConsoleSmsProvider,
    SmsGateway,
    TextBeltSmsProvider,
    VonageSmsProvider,
    select_sms_provider,
)
from .smtp import SmtpNotificationProvider

__all__ = [
    "ConsoleNotificationProvider",
    "ConsoleSmsProvider",
    "NotificationGateway",
    "ResendNotificationProvider",
    "SmsGateway",
    "SmtpNotificationProvider",
    "TextBeltSmsProvider",
    "VonageSmsProvider",
    "resolve_channel",
    "select_provider",
    "select_sms_provider",
]
