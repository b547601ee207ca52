"""
OTP credential lifecycle - issue, store and verify one-time passcodes.

Credential State Machine (per email)
====================================

States:
- NO_CREDENTIAL: identity absent, or otp_code is null
- PENDING: otp_code and otp_expires_at are set
- VERIFIED: successful verification consumed the code

Transitions:
    NO_CREDENTIAL -> PENDING   (issue)
    PENDING       -> PENDING   (re-issue, code and expiry replaced)
    PENDING       -> VERIFIED  (verify with matching, unexpired code)

An expired PENDING credential is never swept. It fails verification
until a new issue() overwrites it.
"""

import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from .ports import IdentityStore, VerifiedIdentity, VerifyOutcome, VerifyResult

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 600


def utc_now() -> datetime:
    return datetime.now(UTC)


def generate_otp_code() -> str:
    """
    Generate a 6-digit code in the range 100000-999999.

    Uses secrets for cryptographic randomness. The first digit is never zero.
    """
    return str(100000 + secrets.randbelow(900000))


@dataclass
class OtpCredentialManager:
    """
    Domain service owning OTP expiry and single-use invalidation.

    The clock is injectable so expiry can be tested without sleeping.
    """

    store: IdentityStore
    ttl_seconds: int = DEFAULT_TTL_SECONDS
    clock: Callable[[], datetime] = field(default=utc_now)

    def issue(self, email: str, username: str) -> str:
        """
        Issue a fresh credential for the email, overwriting any previous one.

        Creates the identity (unverified) if absent. On an existing identity
        the username, code and expiry are overwritten; is_verified is left
        untouched.

        Returns:
            The generated code, for delivery

        Raises:
            IdentityStoreError: On any storage failure
        """
        code = generate_otp_code()
        expires_at = self.clock() + timedelta(seconds=self.ttl_seconds)

        existing = self.store.find_by_email(email)
        if existing is None:
            self.store.create_identity(
                email=email,
                username=username,
                otp_code=code,
                otp_expires_at=expires_at,
            )
            logger.info("Created identity for %s", email)
        else:
            self.store.update_identity(
                email,
                username=username,
                otp_code=code,
                otp_expires_at=expires_at,
            )
            logger.info("Re-issued credential for %s", email)

        return code

    def verify(self, email: str, presented_code: str) -> VerifyOutcome:
        """
        Verify a presented code against the stored credential.

        Checks, in order:
        1. Identity exists (else NOT_FOUND)
        2. Code matches by exact string equality (else MISMATCH);
           a consumed credential has no code and always mismatches
        3. Now is not strictly after the expiry (else EXPIRED)

        On SUCCESS the code and expiry are cleared and the identity is
        marked verified. The clear is a conditional consume in the store,
        so a code redeemed or re-issued by a concurrent request after the
        checks above yields MISMATCH instead of a second SUCCESS.
        """
        now = self.clock()

        identity = self.store.find_by_email(email)
        if identity is None:
            return VerifyOutcome(VerifyResult.NOT_FOUND)

        if identity.otp_code is None or identity.otp_code != presented_code:
            return VerifyOutcome(VerifyResult.MISMATCH)

        if identity.otp_expires_at is not None and now > identity.otp_expires_at:
            return VerifyOutcome(VerifyResult.EXPIRED)

        consumed = self.store.consume_credential(email, presented_code, now)
        if consumed is None:
            logger.warning("Credential for %s changed during verification", email)
            return VerifyOutcome(VerifyResult.MISMATCH)

        logger.info("Verified identity %s (%s)", identity.id, email)

        return VerifyOutcome(
            VerifyResult.SUCCESS,
            VerifiedIdentity(id=identity.id, username=identity.username, email=identity.email),
        )
