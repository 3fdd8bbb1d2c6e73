"""Error taxonomy for identity workflows.

Every failure the engine can produce is an :class:`IdentityError` carrying a
:class:`ErrorKind`. The HTTP layer maps kinds to status codes; nothing in the
domain depends on a web framework. Messages are fixed strings and never embed
credentials.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    conflict = "conflict"
    unauthorized = "unauthorized"
    not_found = "not_found"
    invalid = "invalid"
    internal = "internal"


class IdentityError(Exception):
    """Base class for expected identity failures."""

    kind: ErrorKind = ErrorKind.internal
    code: str = "identity_error"
    message: str = "identity error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the payload handed to API consumers."""
        return {"error": self.code, "message": self.message}


class DuplicateEmail(IdentityError):
    kind = ErrorKind.conflict
    code = "duplicate_email"
    message = "email already registered"


class DuplicateUsername(IdentityError):
    kind = ErrorKind.conflict
    code = "duplicate_username"
    message = "username already taken"


class InvalidCredentials(IdentityError):
    kind = ErrorKind.unauthorized
    code = "invalid_credentials"
    message = "invalid credentials"


class AccountDisabled(IdentityError):
    kind = ErrorKind.unauthorized
    code = "account_disabled"
    message = "account disabled, contact an administrator"


class InvalidToken(IdentityError):
    kind = ErrorKind.unauthorized
    code = "invalid_token"
    message = "invalid or expired token"


class AccountNotFound(IdentityError):
    kind = ErrorKind.not_found
    code = "account_not_found"
    message = "account not found"


class InternalError(IdentityError):
    kind = ErrorKind.internal
    code = "internal_error"
    message = "internal error"


class CredentialHashingError(InternalError):
    """Raised when the password hashing backend fails."""


class TokenSigningError(InternalError):
    """Raised when a token cannot be encoded or signed."""


class ValidationFailed(IdentityError):
    """Request payload violated one or more field rules."""

    kind = ErrorKind.invalid
    code = "validation_failed"
    message = "validation failed"

    def __init__(self, violations: list[Any]) -> None:
        super().__init__()
        self.violations = list(violations)

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["violations"] = [
            {"field": violation.field, "message": violation.message}
            for violation in self.violations
        ]
        return payload
