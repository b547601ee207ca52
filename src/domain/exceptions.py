"""
Domain exceptions - Semantic error types for OTP authentication.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
"""


class AuthError(Exception):
    """Base class for authentication domain errors."""

    pass


class AddressRejected(AuthError):
    """Email address failed format or domain-liveness validation."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class DomainResolutionError(AuthError):
    """DNS lookup failed, timed out, or returned no answer."""

    pass


class NotificationError(AuthError):
    """Notification channel refused or failed to accept a message."""

    pass


class IdentityStoreError(AuthError):
    """Identity store failure - unexpected, never swallowed."""

    pass
