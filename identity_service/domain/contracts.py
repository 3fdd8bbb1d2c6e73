"""Domain-level contracts shared by multiple layers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .account import PublicAccount


@dataclass(frozen=True, slots=True)
class NewAccount:
    """Candidate handed to the store; ``password_hash`` is already hashed."""

    username: str
    email: str
    password_hash: str
    updated_at: datetime
    is_active: bool = True


@dataclass(frozen=True, slots=True)
class RegistrationResult:
    message: str
    user: PublicAccount


@dataclass(frozen=True, slots=True)
class LoginResult:
    message: str
    access_token: str
    user: PublicAccount
