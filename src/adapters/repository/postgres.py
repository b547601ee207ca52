"""
PostgreSQL repository adapter - Implements IdentityStore protocol.

This module provides the PostgreSQL implementation of the domain's
identity store port using psycopg3 with raw SQL.

The otp_code/otp_expires_at pairing is enforced by a CHECK constraint
(see migrations/001_create_identities.sql). Any psycopg error is wrapped
in IdentityStoreError so it propagates as a store failure.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any

import psycopg
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from src.domain.exceptions import IdentityStoreError
from src.domain.ports import Identity

logger = logging.getLogger(__name__)

_COLUMNS = "id, email, username, otp_code, otp_expires_at, is_verified"

# Fields update_identity() may overwrite
_UPDATABLE = ("username", "otp_code", "otp_expires_at", "is_verified")


def _to_identity(row: dict[str, Any]) -> Identity:
    return Identity(
        id=row["id"],
        email=row["email"],
        username=row["username"],
        otp_code=row["otp_code"],
        otp_expires_at=row["otp_expires_at"],
        is_verified=row["is_verified"],
    )


class PostgresIdentityStore:
    """
    Implements IdentityStore protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize store with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def find_by_email(self, email: str) -> Identity | None:
        sql = f"SELECT {_COLUMNS} FROM identities WHERE email = %s"

        row = self._fetch_one(sql, (email,))
        return _to_identity(row) if row is not None else None

    def create_identity(
        self,
        email: str,
        username: str,
        otp_code: str,
        otp_expires_at: datetime,
    ) -> Identity:
        """
        Insert a new unverified identity.

        Uses INSERT ... ON CONFLICT DO UPDATE so a concurrent request for the
        same email overwrites the credential instead of failing (last write
        wins). is_verified is never touched on conflict.
        """
        sql = f"""
            INSERT INTO identities (email, username, otp_code, otp_expires_at, is_verified)
            VALUES (%s, %s, %s, %s, FALSE)
            ON CONFLICT (email) DO UPDATE
            SET username = EXCLUDED.username,
                otp_code = EXCLUDED.otp_code,
                otp_expires_at = EXCLUDED.otp_expires_at,
                updated_at = NOW()
            RETURNING {_COLUMNS}
        """

        row = self._fetch_one(sql, (email, username, otp_code, otp_expires_at))
        if row is None:
            raise IdentityStoreError(f"Insert returned no row for {email}")
        return _to_identity(row)

    def update_identity(self, email: str, **fields: Any) -> Identity:
        unknown = set(fields) - set(_UPDATABLE)
        if unknown:
            raise IdentityStoreError(f"Cannot update fields: {', '.join(sorted(unknown))}")
        if not fields:
            raise IdentityStoreError("No fields to update")

        # Column names come from the _UPDATABLE whitelist, values are parameterized
        assignments = ", ".join(f"{name} = %s" for name in fields)
        sql = f"""
            UPDATE identities
            SET {assignments}, updated_at = NOW()
            WHERE email = %s
            RETURNING {_COLUMNS}
        """

        row = self._fetch_one(sql, (*fields.values(), email))
        if row is None:
            raise IdentityStoreError(f"Identity not found: {email}")
        return _to_identity(row)

    def consume_credential(self, email: str, otp_code: str, now: datetime) -> Identity | None:
        """
        Redeem a pending credential with a single conditional UPDATE.

        The WHERE clause re-checks code and expiry under the row lock the
        UPDATE takes, so of two concurrent redemptions only the first
        matches; the second sees the cleared code and returns no row.
        """
        sql = f"""
            UPDATE identities
            SET otp_code = NULL,
                otp_expires_at = NULL,
                is_verified = TRUE,
                updated_at = NOW()
            WHERE email = %s
              AND otp_code = %s
              AND otp_expires_at >= %s
            RETURNING {_COLUMNS}
        """

        row = self._fetch_one(sql, (email, otp_code, now))
        return _to_identity(row) if row is not None else None

    def ping(self) -> None:
        """Check database connectivity."""
        self._fetch_one("SELECT 1 AS ok", ())

    def _fetch_one(self, sql: str, params: tuple[Any, ...]) -> dict[str, Any] | None:
        try:
            with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
                cursor.execute(sql, params)
                row = cursor.fetchone()
                conn.commit()
                return row
        except psycopg.Error as e:
            logger.error("Identity store query failed: %s", e)
            raise IdentityStoreError("Identity store query failed") from e


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info("Migration complete: %s", sql_file.name)
        except Exception as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
