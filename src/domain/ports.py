"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure, plus the value types that cross them.
Adapters implement these protocols.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Protocol


@dataclass(frozen=True)
class Identity:
    """
    Identity record as held by the identity store.

    otp_code and otp_expires_at are set and cleared together:
    a non-null code is a credential pending verification, a null code
    means "never issued" or "already consumed".
    """

    id: int
    email: str
    username: str
    otp_code: str | None
    otp_expires_at: datetime | None
    is_verified: bool


@dataclass(frozen=True)
class VerifiedIdentity:
    """Public view of an identity returned after successful verification."""

    id: int
    username: str
    email: str


class VerifyResult(Enum):
    """
    Result of a verification attempt.

    Check order in OtpCredentialManager.verify(): NOT_FOUND, MISMATCH, EXPIRED.
    """

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    MISMATCH = "mismatch"
    EXPIRED = "expired"


@dataclass(frozen=True)
class VerifyOutcome:
    """Verification result with the identity attached on SUCCESS."""

    result: VerifyResult
    identity: VerifiedIdentity | None = None

    @property
    def verified(self) -> bool:
        return self.result is VerifyResult.SUCCESS


class DeliveryStatus(str, Enum):
    """
    Outcome of handing an OTP to the notification channel.

    DELIVERED_WITH_EXPOSED_CODE is not an error: the channel degraded to
    the logging fallback, so the code is surfaced to the caller directly.
    """

    DELIVERED = "delivered"
    DELIVERED_WITH_EXPOSED_CODE = "delivered_with_exposed_code"
    FAILED = "failed"


@dataclass(frozen=True)
class DeliveryOutcome:
    """Tagged delivery result. exposed_code is set only when degraded."""

    status: DeliveryStatus
    exposed_code: str | None = None
    reason: str | None = None

    @classmethod
    def delivered(cls) -> "DeliveryOutcome":
        return cls(DeliveryStatus.DELIVERED)

    @classmethod
    def exposed(cls, code: str) -> "DeliveryOutcome":
        return cls(DeliveryStatus.DELIVERED_WITH_EXPOSED_CODE, exposed_code=code)

    @classmethod
    def failed(cls, reason: str) -> "DeliveryOutcome":
        return cls(DeliveryStatus.FAILED, reason=reason)

    @property
    def accepted(self) -> bool:
        return self.status is not DeliveryStatus.FAILED


@dataclass(frozen=True)
class ChannelReport:
    """What the notification channel did with a message."""

    accepted: bool
    degraded: bool
    provider: str


class IdentityStore(Protocol):
    """Port interface for identity persistence."""

    def find_by_email(self, email: str) -> Identity | None:
        """
        Load an identity by its email address.

        Returns:
            The identity, or None if the email was never seen
        """
        ...

    def create_identity(
        self,
        email: str,
        username: str,
        otp_code: str,
        otp_expires_at: datetime,
    ) -> Identity:
        """
        Create a new, unverified identity holding a pending credential.

        Raises:
            IdentityStoreError: On any storage failure
        """
        ...

    def update_identity(self, email: str, **fields: Any) -> Identity:
        """
        Overwrite the given fields of an existing identity.

        Accepted fields: username, otp_code, otp_expires_at, is_verified.

        Raises:
            IdentityStoreError: If the identity is missing or storage fails
        """
        ...

    def consume_credential(self, email: str, otp_code: str, now: datetime) -> Identity | None:
        """
        Atomically redeem a pending credential.

        Clears otp_code/otp_expires_at and sets is_verified only if the stored
        code still equals otp_code and now is not after otp_expires_at.
        Concurrent callers presenting the same code: at most one succeeds.

        Returns:
            The updated identity, or None if the credential was not redeemable

        Raises:
            IdentityStoreError: On any storage failure
        """
        ...


class NotificationProvider(Protocol):
    """
    Port interface for a notification channel.

    send() returns True when the channel accepted the message (not a
    delivery receipt). degraded is True when the message only reached
    the logging sink.
    """

    degraded: bool

    def send(self, destination: str, subject: str, body: str) -> bool: ...


class NotificationDispatcher(Protocol):
    """Port interface for the gateway that picks and drives a provider."""

    def dispatch(self, destination: str, subject: str, body: str) -> ChannelReport: ...


class DomainResolver(Protocol):
    """
    Port interface for bounded-time DNS lookups.

    timeout caps the lookup in seconds (adapter default when None).
    Every method raises DomainResolutionError on failure or timeout.
    """

    def resolve_mx(self, domain: str, timeout: float | None = None) -> list[str]: ...

    def resolve_ipv4(self, domain: str, timeout: float | None = None) -> list[str]: ...

    def resolve_ipv6(self, domain: str, timeout: float | None = None) -> list[str]: ...


class SmsProvider(Protocol):
    """
    Port interface for a text-message channel.

    send_sms() returns True when the gateway accepted the message.
    Failures are reported as False, never raised.
    """

    def send_sms(self, phone_number: str, message: str) -> bool: ...
