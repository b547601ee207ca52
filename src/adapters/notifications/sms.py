"""
SMS notification providers - console, TextBelt and Vonage gateways.

sms_provider selects the channel (case-insensitive, console for anything
unrecognized). The HTTP gateways report a rejected message, an error
response or a transport fault as False; they do not fall back.
"""

import logging
import re
from typing import Any

import httpx

from src.config.settings import Settings
from src.domain.exceptions import NotificationError
from src.domain.ports import SmsProvider

logger = logging.getLogger(__name__)

CONSOLE = "console"
TEXTBELT = "textbelt"
VONAGE = "vonage"

_NOT_DIAL_CHARS = re.compile(r"[^\d+]")


def strip_phone_number(phone_number: str) -> str:
    """Drop everything but digits and "+"."""
    return _NOT_DIAL_CHARS.sub("", phone_number)


def to_e164(phone_number: str, default_prefix: str = "+1") -> str:
    """Strip formatting; numbers without a country code get default_prefix."""
    stripped = strip_phone_number(phone_number)
    if not stripped.startswith("+"):
        stripped = default_prefix + stripped
    return stripped


class ConsoleSmsProvider:
    """Implements SmsProvider protocol via console logging."""

    name = CONSOLE

    def send_sms(self, phone_number: str, message: str) -> bool:
        logger.info("[SMS CONSOLE LOG] To: %s, Message: %s", phone_number, message)
        return True


class _HttpSmsProvider:
    """Form-encoded POST to an SMS gateway with a bounded timeout."""

    name = ""

    def __init__(self, api_url: str, timeout: float, client: httpx.Client | None) -> None:
        self._api_url = api_url
        self._timeout = timeout
        self._client = client

    def send_sms(self, phone_number: str, message: str) -> bool:
        try:
            accepted = self._submit(phone_number, message)
        except (httpx.HTTPError, NotificationError, ValueError) as exc:
            logger.error("%s SMS error: %s", self.name, exc)
            return False

        if accepted:
            logger.info("SMS sent successfully via %s", self.name)
        return accepted

    def _submit(self, phone_number: str, message: str) -> bool:
        raise NotImplementedError

    def _post_form(self, form: dict[str, str]) -> Any:
        """
        Returns:
            The decoded JSON body

        Raises:
            NotificationError: On an error status
            httpx.HTTPError: On transport failure or timeout
            ValueError: If the body is not JSON
        """
        if self._client is not None:
            response = self._client.post(self._api_url, data=form)
        else:
            with httpx.Client(timeout=self._timeout) as client:
                response = client.post(self._api_url, data=form)

        if response.is_error:
            raise NotificationError(f"{self.name} returned {response.status_code}: {response.text}")
        return response.json()


class TextBeltSmsProvider(_HttpSmsProvider):
    """Implements SmsProvider protocol via the TextBelt API."""

    name = TEXTBELT

    def __init__(self, settings: Settings, client: httpx.Client | None = None) -> None:
        super().__init__(settings.textbelt_api_url, settings.notification_timeout_seconds, client)
        self._api_key = settings.textbelt_api_key

    def _submit(self, phone_number: str, message: str) -> bool:
        number = to_e164(phone_number)
        logger.info("Attempting to send SMS to: %s", number)

        result = self._post_form({"phone": number, "message": message, "key": self._api_key})
        logger.debug("TextBelt response: %s", result)

        if isinstance(result, dict) and result.get("success") is True:
            return True
        error = result.get("error") if isinstance(result, dict) else None
        logger.error("TextBelt API error: %s", error or "Unknown error")
        return False


class VonageSmsProvider(_HttpSmsProvider):
    """Implements SmsProvider protocol via the Vonage SMS API."""

    name = VONAGE

    def __init__(self, settings: Settings, client: httpx.Client | None = None) -> None:
        super().__init__(settings.vonage_api_url, settings.notification_timeout_seconds, client)
        self._api_key = settings.vonage_api_key
        self._api_secret = settings.vonage_api_secret
        self._from_number = settings.vonage_from_number

    def _submit(self, phone_number: str, message: str) -> bool:
        result = self._post_form(
            {
                "api_key": self._api_key,
                "api_secret": self._api_secret,
                "from": self._from_number,
                "to": strip_phone_number(phone_number),
                "text": message,
            }
        )

        # Status "0" on the first message part means accepted
        messages = result.get("messages") if isinstance(result, dict) else None
        if messages and isinstance(messages[0], dict) and messages[0].get("status") == "0":
            return True
        logger.error("Vonage API rejected message: %s", result)
        return False


def resolve_sms_channel(config_value: str | None) -> str:
    channel = (config_value or "").strip().lower()
    return channel if channel in (TEXTBELT, VONAGE) else CONSOLE


def select_sms_provider(config_value: str | None, settings: Settings) -> SmsProvider:
    """Build the SMS provider selected by config_value."""
    channel = resolve_sms_channel(config_value)
    if channel == TEXTBELT:
        return TextBeltSmsProvider(settings)
    if channel == VONAGE:
        return VonageSmsProvider(settings)
    return ConsoleSmsProvider()


class SmsGateway:
    """Builds a fresh SMS provider per call from settings.sms_provider."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    @property
    def channel(self) -> str:
        return resolve_sms_channel(self._settings.sms_provider)

    def send_sms(self, phone_number: str, message: str) -> bool:
        provider = select_sms_provider(self._settings.sms_provider, self._settings)
        return provider.send_sms(phone_number, message)
