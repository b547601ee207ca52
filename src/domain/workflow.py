"""
Authentication workflow - OTP request and confirmation orchestration.

request_otp:
    normalize -> AddressValidator.validate -> OtpCredentialManager.issue
    -> NotificationDispatcher.dispatch -> DeliveryOutcome

confirm_otp:
    normalize -> OtpCredentialManager.verify -> VerifyOutcome

A rejected address has no side effects. Store failures propagate.
When the channel degraded to the logging fallback, the code is returned
to the caller as DELIVERED_WITH_EXPOSED_CODE so the flow stays usable.
"""

import logging
from dataclasses import dataclass

from .credentials import OtpCredentialManager
from .ports import DeliveryOutcome, NotificationDispatcher, VerifyOutcome
from .templates import OTP_EMAIL_SUBJECT, render_otp_email
from .validation import AddressValidator

logger = logging.getLogger(__name__)

SEND_FAILED = "Failed to send OTP email"


@dataclass
class AuthWorkflow:
    """
    Domain service for passwordless email authentication.

    Orchestrates address validation, credential issuance, delivery
    and verification.
    """

    validator: AddressValidator
    credentials: OtpCredentialManager
    notifier: NotificationDispatcher

    def request_otp(self, username: str, email: str) -> DeliveryOutcome:
        """
        Issue an OTP for the email and hand it to the notification channel.

        Args:
            username: Display name, overwritten on every issuance
            email: Destination address (will be normalized)

        Returns:
            DeliveryOutcome: DELIVERED, DELIVERED_WITH_EXPOSED_CODE or FAILED

        Raises:
            AddressRejected: If the address fails validation
            IdentityStoreError: On storage failure
        """
        normalized_email = self._normalize_email(email)
        self.validator.validate(normalized_email)

        code = self.credentials.issue(normalized_email, username)
        body = render_otp_email(code, self.credentials.ttl_seconds)

        report = self.notifier.dispatch(normalized_email, OTP_EMAIL_SUBJECT, body)

        if report.degraded:
            logger.warning(
                "Channel %s degraded to logging fallback for %s, exposing code",
                report.provider,
                normalized_email,
            )
            return DeliveryOutcome.exposed(code)

        if not report.accepted:
            logger.error("Channel %s rejected OTP email for %s", report.provider, normalized_email)
            return DeliveryOutcome.failed(SEND_FAILED)

        logger.info("OTP sent to %s via %s", normalized_email, report.provider)
        return DeliveryOutcome.delivered()

    def confirm_otp(self, username: str, email: str, code: str) -> VerifyOutcome:
        """
        Verify a presented code.

        Verification is keyed on email + code only. username is accepted
        for interface compatibility but not compared with the stored value.
        """
        return self.credentials.verify(self._normalize_email(email), code)

    def _normalize_email(self, email: str) -> str:
        """
        Normalize email address for consistent storage and lookup.

        Applies: strip whitespace + lowercase
        """
        return email.strip().lower()
