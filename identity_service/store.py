"""In-memory account store enforcing identity uniqueness."""

from __future__ import annotations

import dataclasses
import itertools
from datetime import datetime, timezone
from threading import Lock

from .domain.account import Account, PublicAccount
from .domain.contracts import NewAccount
from .domain.errors import DuplicateEmail, DuplicateUsername


class UserStore:
    """Thread-safe account collection keyed by id, email and username.

    ``create`` runs its uniqueness checks and the insert inside one critical
    section, so two concurrent registrations for the same email cannot both
    succeed. Ids come from a monotonic counter and are never handed out twice.
    """

    def __init__(self) -> None:
        self._accounts: dict[int, Account] = {}
        self._by_email: dict[str, int] = {}
        self._by_username: dict[str, int] = {}
        self._ids = itertools.count(1)
        self._lock = Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._accounts)

    def create(self, candidate: NewAccount) -> Account:
        """Insert a new account and return the stored record.

        Raises :class:`DuplicateEmail` before :class:`DuplicateUsername` when
        both collide.
        """
        with self._lock:
            if candidate.email in self._by_email:
                raise DuplicateEmail()
            if candidate.username in self._by_username:
                raise DuplicateUsername()

            created_at = datetime.now(timezone.utc)
            account = Account(
                id=next(self._ids),
                username=candidate.username,
                email=candidate.email,
                password_hash=candidate.password_hash,
                is_active=candidate.is_active,
                created_at=created_at,
                # never earlier than creation
                updated_at=max(candidate.updated_at, created_at),
            )
            self._accounts[account.id] = account
            self._by_email[account.email] = account.id
            self._by_username[account.username] = account.id
        return account

    def find_by_email(self, email: str) -> Account | None:
        with self._lock:
            account_id = self._by_email.get(email)
            return self._accounts.get(account_id) if account_id is not None else None

    def find_by_username(self, username: str) -> Account | None:
        with self._lock:
            account_id = self._by_username.get(username)
            return self._accounts.get(account_id) if account_id is not None else None

    def find_by_id(self, account_id: int) -> Account | None:
        with self._lock:
            return self._accounts.get(account_id)

    def list_all(self) -> list[PublicAccount]:
        """Return every account, in insertion order, without password material."""
        with self._lock:
            return [account.public() for account in self._accounts.values()]

    def set_active(self, account_id: int, is_active: bool) -> Account | None:
        """Toggle the active flag, refreshing ``updated_at``; ``None`` if unknown."""
        with self._lock:
            current = self._accounts.get(account_id)
            if current is None:
                return None
            updated = dataclasses.replace(
                current,
                is_active=is_active,
                updated_at=datetime.now(timezone.utc),
            )
            self._accounts[account_id] = updated
        return updated
