"""
DNS resolver adapter - Implements DomainResolver protocol via dnspython.

Every lookup is bounded by a lifetime (the caller's remaining budget, or
the configured default), so an unresponsive resolver yields
DomainResolutionError instead of stalling the request.
"""

import logging

import dns.exception
import dns.resolver

from src.domain.exceptions import DomainResolutionError

logger = logging.getLogger(__name__)


class DnsPythonResolver:
    """
    Implements DomainResolver protocol.

    Uses structural subtyping - no explicit inheritance from Protocol.
    The system resolver is built on first lookup, so a host without
    resolver configuration fails lookups rather than construction.
    """

    def __init__(self, timeout: float, resolver: dns.resolver.Resolver | None = None) -> None:
        """
        Args:
            timeout: Default upper bound in seconds for a lookup, retries included
            resolver: Preconfigured dnspython resolver (system config if omitted)
        """
        self._timeout = timeout
        self._resolver = resolver

    def resolve_mx(self, domain: str, timeout: float | None = None) -> list[str]:
        answer = self._query(domain, "MX", timeout)
        return [str(record.exchange).rstrip(".") for record in answer]

    def resolve_ipv4(self, domain: str, timeout: float | None = None) -> list[str]:
        return [record.address for record in self._query(domain, "A", timeout)]

    def resolve_ipv6(self, domain: str, timeout: float | None = None) -> list[str]:
        return [record.address for record in self._query(domain, "AAAA", timeout)]

    def _query(self, domain: str, rdtype: str, timeout: float | None) -> dns.resolver.Answer:
        lifetime = self._timeout if timeout is None else timeout
        try:
            if self._resolver is None:
                self._resolver = dns.resolver.Resolver()
            return self._resolver.resolve(domain, rdtype, lifetime=lifetime)
        except dns.exception.DNSException as exc:
            logger.debug("%s lookup for %s failed: %s", rdtype, domain, exc)
            raise DomainResolutionError(f"{rdtype} lookup for {domain} failed") from exc
