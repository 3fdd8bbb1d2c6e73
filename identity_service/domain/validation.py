"""Field-level validation run before requests reach the auth engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from email_validator import EmailNotValidError, validate_email

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 50
EMAIL_MAX_LENGTH = 100
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 255


@dataclass(frozen=True, slots=True)
class FieldViolation:
    field: str
    message: str


def _check_email(email: Any, violations: list[FieldViolation]) -> None:
    if not isinstance(email, str):
        violations.append(FieldViolation("email", "must be a valid email address"))
        return
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        violations.append(FieldViolation("email", "must be a valid email address"))


def validate_registration(username: Any, email: Any, password: Any) -> list[FieldViolation]:
    """Return every rule violated by a registration payload (empty when valid)."""
    violations: list[FieldViolation] = []

    if not isinstance(username, str):
        violations.append(FieldViolation("username", "must be a string"))
    elif len(username) < USERNAME_MIN_LENGTH:
        violations.append(
            FieldViolation("username", f"must be at least {USERNAME_MIN_LENGTH} characters")
        )
    elif len(username) > USERNAME_MAX_LENGTH:
        violations.append(
            FieldViolation("username", f"must be at most {USERNAME_MAX_LENGTH} characters")
        )

    _check_email(email, violations)
    if isinstance(email, str) and len(email) > EMAIL_MAX_LENGTH:
        violations.append(
            FieldViolation("email", f"must be at most {EMAIL_MAX_LENGTH} characters")
        )

    if not isinstance(password, str):
        violations.append(FieldViolation("password", "must be a string"))
    elif len(password) < PASSWORD_MIN_LENGTH:
        violations.append(
            FieldViolation("password", f"must be at least {PASSWORD_MIN_LENGTH} characters")
        )
    elif len(password) > PASSWORD_MAX_LENGTH:
        violations.append(
            FieldViolation("password", f"must be at most {PASSWORD_MAX_LENGTH} characters")
        )

    return violations


def validate_login(email: Any, password: Any) -> list[FieldViolation]:
    """Return every rule violated by a login payload (empty when valid)."""
    violations: list[FieldViolation] = []
    _check_email(email, violations)
    if not isinstance(password, str):
        violations.append(FieldViolation("password", "must be a string"))
    return violations
