"""
Address validation - Two-phase email checks before an OTP is issued.

Format phase (no I/O):
    empty -> "+" alias -> local@domain.tld pattern

Domain phase (bounded DNS I/O through the DomainResolver port):
    disposable pattern -> MX records -> A or AAAA address

All lookups for one address share a single deadline of timeout_seconds.

The first failing check wins and is raised as AddressRejected.
Resolver errors are converted to rejections and never escape.
"""

import logging
import re
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from .exceptions import AddressRejected, DomainResolutionError
from .ports import DomainResolver

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

DEFAULT_DISPOSABLE_PATTERNS = (
    "tempmail",
    "throwaway",
    "disposable",
    "temporary",
    "10minute",
    "guerrilla",
    "mailinator",
    "yopmail",
    "spam",
    "fake",
)

EMAIL_REQUIRED = "Email is required"
PLUS_NOT_ALLOWED = 'Email addresses containing "+" are not allowed'
INVALID_FORMAT = "Invalid email format"
DISPOSABLE_DOMAIN = "Disposable email services are not allowed"
NO_MAIL_SERVERS = "Email domain does not have valid mail servers"
DOMAIN_UNRESOLVABLE = "Email domain does not exist or has no mail servers"
NO_ADDRESS = "Email domain does not resolve to a valid IP address"


@dataclass
class AddressValidator:
    """
    Validates that an email is well-formed, not disposable, and backed
    by a live mail-accepting domain.
    """

    resolver: DomainResolver
    disposable_patterns: Iterable[str] = field(default=DEFAULT_DISPOSABLE_PATTERNS)
    timeout_seconds: float | None = None
    monotonic: Callable[[], float] = field(default=time.monotonic)

    def validate(self, email: str) -> None:
        """
        Run the format phase, then the domain phase.

        Raises:
            AddressRejected: With the reason of the first failing check
        """
        self.validate_format(email)
        self.validate_domain(email)

    def validate_format(self, email: str) -> None:
        if not email:
            raise AddressRejected(EMAIL_REQUIRED)
        if "+" in email:
            raise AddressRejected(PLUS_NOT_ALLOWED)
        if not EMAIL_PATTERN.match(email):
            raise AddressRejected(INVALID_FORMAT)

    def validate_domain(self, email: str) -> None:
        domain = email.rsplit("@", 1)[-1]
        domain_lower = domain.lower()

        for pattern in self.disposable_patterns:
            if pattern.lower() in domain_lower:
                raise AddressRejected(DISPOSABLE_DOMAIN)

        deadline = None if self.timeout_seconds is None else self.monotonic() + self.timeout_seconds

        try:
            mx_records = self.resolver.resolve_mx(domain, timeout=self._remaining(deadline))
        except DomainResolutionError as exc:
            logger.info("MX lookup failed for %s: %s", domain, exc)
            raise AddressRejected(DOMAIN_UNRESOLVABLE) from None

        if not mx_records:
            raise AddressRejected(NO_MAIL_SERVERS)

        if not self._has_address(domain, deadline):
            raise AddressRejected(NO_ADDRESS)

    def _has_address(self, domain: str, deadline: float | None) -> bool:
        """True if the domain resolves to at least one IPv4 or IPv6 address."""
        for lookup in (self.resolver.resolve_ipv4, self.resolver.resolve_ipv6):
            try:
                if lookup(domain, timeout=self._remaining(deadline)):
                    return True
            except DomainResolutionError as exc:
                logger.debug("Address lookup failed for %s: %s", domain, exc)
        return False

    def _remaining(self, deadline: float | None) -> float | None:
        """Seconds left before the deadline; raises once it has passed."""
        if deadline is None:
            return None
        remaining = deadline - self.monotonic()
        if remaining <= 0:
            raise DomainResolutionError("DNS time budget exhausted")
        return remaining
