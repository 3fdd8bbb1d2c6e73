from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class PublicAccount:
    """Account projection safe to hand to callers; it has no password field."""

    id: int
    username: str
    email: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class Account:
    """Aggregate root for a registered user identity.

    Instances are immutable. Updates replace the stored record with a copy,
    so readers never observe a half-applied change.
    """

    id: int
    username: str
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime
    is_active: bool = True

    def public(self) -> PublicAccount:
        """Return the account without its password hash."""
        return PublicAccount(
            id=self.id,
            username=self.username,
            email=self.email,
            is_active=self.is_active,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
