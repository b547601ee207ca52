"""
In-memory repository adapter - Implements IdentityStore protocol.

Process-local store for development (identity_store="memory") and tests.
State is lost on restart.
"""

import threading
from dataclasses import replace
from datetime import datetime
from itertools import count
from typing import Any

from src.domain.exceptions import IdentityStoreError
from src.domain.ports import Identity

_UPDATABLE = ("username", "otp_code", "otp_expires_at", "is_verified")


class InMemoryIdentityStore:
    """Implements IdentityStore protocol with a lock-guarded dict."""

    def __init__(self) -> None:
        self._identities: dict[str, Identity] = {}
        self._ids = count(1)
        self._lock = threading.Lock()

    def find_by_email(self, email: str) -> Identity | None:
        with self._lock:
            return self._identities.get(email)

    def create_identity(
        self,
        email: str,
        username: str,
        otp_code: str,
        otp_expires_at: datetime,
    ) -> Identity:
        with self._lock:
            existing = self._identities.get(email)
            if existing is not None:
                identity = replace(
                    existing,
                    username=username,
                    otp_code=otp_code,
                    otp_expires_at=otp_expires_at,
                )
            else:
                identity = Identity(
                    id=next(self._ids),
                    email=email,
                    username=username,
                    otp_code=otp_code,
                    otp_expires_at=otp_expires_at,
                    is_verified=False,
                )
            self._identities[email] = identity
            return identity

    def update_identity(self, email: str, **fields: Any) -> Identity:
        unknown = set(fields) - set(_UPDATABLE)
        if unknown:
            raise IdentityStoreError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        with self._lock:
            existing = self._identities.get(email)
            if existing is None:
                raise IdentityStoreError(f"Identity not found: {email}")
            identity = replace(existing, **fields)
            self._identities[email] = identity
            return identity

    def consume_credential(self, email: str, otp_code: str, now: datetime) -> Identity | None:
        """Compare-and-clear under the store lock."""
        with self._lock:
            existing = self._identities.get(email)
            if existing is None or existing.otp_code is None or existing.otp_code != otp_code:
                return None
            if existing.otp_expires_at is not None and now > existing.otp_expires_at:
                return None
            identity = replace(existing, otp_code=None, otp_expires_at=None, is_verified=True)
            self._identities[email] = identity
            return identity

    def ping(self) -> None:
        pass
