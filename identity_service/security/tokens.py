"""Utilities for issuing and validating application JWTs."""

from __future__ import annotations

import re
import secrets
import time
from dataclasses import dataclass
from typing import Any, Callable

import jwt

from ..domain.account import Account
from ..domain.errors import InvalidToken, TokenSigningError

DEFAULT_TTL_SECONDS = 24 * 60 * 60
DEFAULT_ALGORITHM = "HS256"

_REQUIRED_CLAIMS = ["sub", "email", "username", "iat", "exp"]
# Only the canonical ``str(id)`` form of a positive id.
_SUBJECT_PATTERN = re.compile(r"[1-9][0-9]*")


@dataclass(frozen=True, slots=True)
class Claims:
    """Identity claims embedded in an access token."""

    subject: int
    email: str
    username: str
    issued_at: int
    expires_at: int


class TokenIssuer:
    """Signs claims into HS256 JWTs and verifies them.

    The signing secret is fixed for the lifetime of the issuer; rotating it
    invalidates every token signed with the previous value.
    """

    def __init__(
        self,
        secret: str,
        *,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        issuer: str = "identity-service",
        algorithm: str = DEFAULT_ALGORITHM,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._secret = secret
        self._ttl = ttl_seconds
        self._issuer = issuer
        self._algorithm = algorithm
        self._clock = clock

    @property
    def ttl_seconds(self) -> int:
        return self._ttl

    def build_claims(self, account: Account) -> Claims:
        """Stamp claims for ``account`` valid from now for the configured TTL."""
        now = int(self._clock())
        return Claims(
            subject=account.id,
            email=account.email,
            username=account.username,
            issued_at=now,
            expires_at=now + self._ttl,
        )

    def issue(self, claims: Claims) -> str:
        """Create a signed JWT for ``claims``.

        Parameters
        ----------
        claims:
            Claims produced by :meth:`build_claims`.

        Returns
        -------
        str
            The encoded ``header.payload.signature`` token. A random ``jti``
            keeps tokens minted within the same second distinct.
        """
        payload: dict[str, Any] = {
            "iss": self._issuer,
            "sub": str(claims.subject),
            "email": claims.email,
            "username": claims.username,
            "iat": claims.issued_at,
            "exp": claims.expires_at,
            "jti": secrets.token_hex(16),
        }
        try:
            return jwt.encode(payload, self._secret, algorithm=self._algorithm)
        except (jwt.PyJWTError, TypeError, ValueError) as exc:
            raise TokenSigningError() from exc

    def verify(self, token: str) -> Claims:
        """Decode and verify a JWT returning its claims.

        Raises
        ------
        InvalidToken
            When the token is malformed, tampered with, signed with another
            secret or issuer, expired, or missing required claims.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                issuer=self._issuer,
                options={"require": _REQUIRED_CLAIMS},
            )
            subject = payload["sub"]
            if not isinstance(subject, str) or not _SUBJECT_PATTERN.fullmatch(subject):
                raise InvalidToken()
            return Claims(
                subject=int(subject),
                email=str(payload["email"]),
                username=str(payload["username"]),
                issued_at=int(payload["iat"]),
                expires_at=int(payload["exp"]),
            )
        except (jwt.PyJWTError, ValueError, TypeError) as exc:
            raise InvalidToken() from exc
