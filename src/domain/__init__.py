"""
Domain layer - Pure business logic with zero framework imports.

This package contains the OTP authentication core: address validation,
the credential lifecycle and the workflow that ties them to a
notification channel. It defines its own port interfaces so adapters
stay swappable.
"""

from .credentials import OtpCredentialManager, generate_otp_code
from .exceptions import (
    AddressRejected,
    AuthError,
    DomainResolutionError,
    IdentityStoreError,
    NotificationError,
)
from .ports import (
    ChannelReport,
    DeliveryOutcome,
    DeliveryStatus,
    DomainResolver,
    Identity,
    IdentityStore,
    NotificationDispatcher,
    NotificationProvider,
    SmsProvider,
    VerifiedIdentity,
    VerifyOutcome,
    VerifyResult,
)
from .validation import AddressValidator
from .workflow import AuthWorkflow

__all__ = [
    "AddressRejected",
    "AddressValidator",
    "AuthError",
    "AuthWorkflow",
    "ChannelReport",
    "DeliveryOutcome",
    "DeliveryStatus",
    "DomainResolutionError",
    "DomainResolver",
    "Identity",
    "IdentityStore",
    "IdentityStoreError",
    "NotificationDispatcher",
    "NotificationError",
    "NotificationProvider",
    "OtpCredentialManager",
    "SmsProvider",
    "VerifiedIdentity",
    "VerifyOutcome",
    "VerifyResult",
    "generate_otp_code",
]
