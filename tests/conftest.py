"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A scriptable DNS resolver (no network access in unit tests)
- A controllable clock for expiry tests
- In-memory identity store and wired domain services
"""

from datetime import UTC, datetime, timedelta

import pytest

from src.adapters.notifications.gateway import NotificationGateway
from src.adapters.repository.memory import InMemoryIdentityStore
from src.config.settings import Settings
from src.domain.credentials import OtpCredentialManager
from src.domain.exceptions import DomainResolutionError
from src.domain.validation import AddressValidator
from src.domain.workflow import AuthWorkflow


class FakeResolver:
    """
    DomainResolver double.

    Every domain resolves to one MX, one A and one AAAA record unless
    listed in failing (lookup raises) or empty (lookup returns []).
    Keys are (domain, rdtype). timeouts records the lifetime passed to
    each lookup; with a ticker attached, every lookup advances it by latency.
    """

    def __init__(self) -> None:
        self.failing: set[tuple[str, str]] = set()
        self.empty: set[tuple[str, str]] = set()
        self.calls: list[tuple[str, str]] = []
        self.timeouts: list[float | None] = []
        self.ticker: FakeMonotonic | None = None
        self.latency = 0.0

    def _lookup(self, domain: str, rdtype: str, answer: str, timeout: float | None) -> list[str]:
        self.calls.append((domain, rdtype))
        self.timeouts.append(timeout)
        if self.ticker is not None:
            self.ticker.now += self.latency
        if (domain, rdtype) in self.failing:
            raise DomainResolutionError(f"{rdtype} lookup for {domain} failed")
        if (domain, rdtype) in self.empty:
            return []
        return [answer]

    def resolve_mx(self, domain: str, timeout: float | None = None) -> list[str]:
        return self._lookup(domain, "MX", f"mx.{domain}", timeout)

    def resolve_ipv4(self, domain: str, timeout: float | None = None) -> list[str]:
        return self._lookup(domain, "A", "93.184.216.34", timeout)

    def resolve_ipv6(self, domain: str, timeout: float | None = None) -> list[str]:
        return self._lookup(domain, "AAAA", "2606:2800:220:1::1", timeout)


class FakeMonotonic:
    """Monotonic seconds counter for DNS deadline tests."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def resolver() -> FakeResolver:
    return FakeResolver()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryIdentityStore:
    return InMemoryIdentityStore()


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the process environment and .env file."""
    return Settings(_env_file=None, email_provider="console", identity_store="memory")


@pytest.fixture
def credentials(store: InMemoryIdentityStore, clock: FakeClock) -> OtpCredentialManager:
    return OtpCredentialManager(store=store, ttl_seconds=600, clock=clock)


@pytest.fixture
def validator(resolver: FakeResolver) -> AddressValidator:
    return AddressValidator(resolver=resolver)


@pytest.fixture
def workflow(
    validator: AddressValidator,
    credentials: OtpCredentialManager,
    settings: Settings,
) -> AuthWorkflow:
    return AuthWorkflow(
        validator=validator,
        credentials=credentials,
        notifier=NotificationGateway(settings),
    )


@pytest.fixture
def ticker(resolver: FakeResolver) -> FakeMonotonic:
    """Monotonic counter advanced by the resolver on every lookup."""
    ticker = FakeMonotonic()
    resolver.ticker = ticker
    return ticker
