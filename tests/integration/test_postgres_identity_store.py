"""
Integration tests for PostgresIdentityStore.

Tests store operations against a real PostgreSQL database.
Requires PostgreSQL to be running (via docker-compose); skipped otherwise.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime, timedelta

import psycopg
import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresIdentityStore, run_migrations
from src.config.settings import get_settings
from src.domain.credentials import OtpCredentialManager
from src.domain.exceptions import IdentityStoreError
from src.domain.ports import VerifyResult

pytestmark = pytest.mark.integration

EXPIRY = datetime(2030, 1, 1, 12, 0, tzinfo=UTC)


@pytest.fixture(scope="module")
def pool() -> ConnectionPool:
    """Create connection pool for integration tests."""
    settings = get_settings()
    try:
        with psycopg.connect(settings.database_url, connect_timeout=2):
            pass
    except psycopg.OperationalError as e:
        pytest.skip(f"PostgreSQL unavailable: {e}")

    pool = ConnectionPool(conninfo=settings.database_url, min_size=1, max_size=10, open=True)
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def pg_store(pool: ConnectionPool) -> PostgresIdentityStore:
    """Create store instance for each test."""
    return PostgresIdentityStore(pool)


@pytest.fixture(autouse=True)
def clean_database(pool: ConnectionPool) -> None:
    """Clean identities table before each test."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM identities")
        conn.commit()
    yield


class TestCrud:
    """Tests for find/create/update."""

    def test_find_missing_returns_none(self, pg_store: PostgresIdentityStore) -> None:
        assert pg_store.find_by_email("ghost@example.com") is None

    def test_create_then_find(self, pg_store: PostgresIdentityStore) -> None:
        created = pg_store.create_identity("a@example.com", "alice", "123456", EXPIRY)

        found = pg_store.find_by_email("a@example.com")
        assert found == created
        assert found.otp_code == "123456"
        assert found.otp_expires_at == EXPIRY
        assert found.is_verified is False

    def test_update_clears_credential(self, pg_store: PostgresIdentityStore) -> None:
        pg_store.create_identity("a@example.com", "alice", "123456", EXPIRY)

        updated = pg_store.update_identity(
            "a@example.com", otp_code=None, otp_expires_at=None, is_verified=True
        )

        assert updated.otp_code is None
        assert updated.otp_expires_at is None
        assert updated.is_verified is True

    def test_update_missing_raises(self, pg_store: PostgresIdentityStore) -> None:
        with pytest.raises(IdentityStoreError):
            pg_store.update_identity("ghost@example.com", username="nobody")

    def test_update_rejects_unknown_columns(self, pg_store: PostgresIdentityStore) -> None:
        pg_store.create_identity("a@example.com", "alice", "123456", EXPIRY)
        with pytest.raises(IdentityStoreError):
            pg_store.update_identity("a@example.com", id=99)

    def test_half_cleared_credential_rejected(self, pg_store: PostgresIdentityStore) -> None:
        """The schema refuses a code without an expiry."""
        pg_store.create_identity("a@example.com", "alice", "123456", EXPIRY)
        with pytest.raises(IdentityStoreError):
            pg_store.update_identity("a@example.com", otp_expires_at=None)

    def test_ping(self, pg_store: PostgresIdentityStore) -> None:
        pg_store.ping()


class TestCredentialLifecycle:
    """OtpCredentialManager against Postgres."""

    def test_issue_verify_consume(self, pg_store: PostgresIdentityStore) -> None:
        manager = OtpCredentialManager(store=pg_store)
        code = manager.issue("a@example.com", "alice")

        assert manager.verify("a@example.com", code).result is VerifyResult.SUCCESS
        assert manager.verify("a@example.com", code).result is VerifyResult.MISMATCH

    def test_expired(self, pg_store: PostgresIdentityStore) -> None:
        issued_at = datetime.now(UTC) - timedelta(minutes=11)
        manager = OtpCredentialManager(store=pg_store, clock=lambda: issued_at)
        code = manager.issue("a@example.com", "alice")

        assert OtpCredentialManager(store=pg_store).verify("a@example.com", code).result is (
            VerifyResult.EXPIRED
        )


class TestConcurrency:
    """Concurrent issuance for one email."""

    def test_concurrent_creates_last_write_wins(self, pg_store: PostgresIdentityStore) -> None:
        codes = [f"{100000 + i}" for i in range(10)]

        with ThreadPoolExecutor(max_workers=10) as executor:
            futures = [
                executor.submit(pg_store.create_identity, "race@example.com", "alice", code, EXPIRY)
                for code in codes
            ]
            results = [f.result() for f in futures]

        assert len({identity.id for identity in results}) == 1
        assert pg_store.find_by_email("race@example.com").otp_code in codes

    def test_concurrent_verify_succeeds_once(self, pg_store: PostgresIdentityStore) -> None:
        """Of many confirms racing with the same code, exactly one redeems it."""
        manager = OtpCredentialManager(store=pg_store)
        code = manager.issue("race@example.com", "alice")

        with ThreadPoolExecutor(max_workers=10) as executor:
            futures = [executor.submit(manager.verify, "race@example.com", code) for _ in range(10)]
            results = [f.result().result for f in futures]

        assert results.count(VerifyResult.SUCCESS) == 1
        assert all(result is VerifyResult.MISMATCH for result in results if result is not VerifyResult.SUCCESS)
        identity = pg_store.find_by_email("race@example.com")
        assert identity.otp_code is None
        assert identity.is_verified is True


class TestConsumeCredential:
    """Tests for the conditional UPDATE."""

    def test_wrong_code_not_consumed(self, pg_store: PostgresIdentityStore) -> None:
        created = pg_store.create_identity("a@example.com", "alice", "123456", EXPIRY)

        assert pg_store.consume_credential("a@example.com", "654321", EXPIRY) is None
        assert pg_store.find_by_email("a@example.com") == created

    def test_expired_not_consumed(self, pg_store: PostgresIdentityStore) -> None:
        pg_store.create_identity("a@example.com", "alice", "123456", EXPIRY)
        late = EXPIRY + timedelta(seconds=1)
        assert pg_store.consume_credential("a@example.com", "123456", late) is None

    def test_consume_at_exact_expiry(self, pg_store: PostgresIdentityStore) -> None:
        pg_store.create_identity("a@example.com", "alice", "123456", EXPIRY)

        consumed = pg_store.consume_credential("a@example.com", "123456", EXPIRY)

        assert consumed.otp_code is None
        assert consumed.is_verified is True
