"""Password hashing and verification backed by bcrypt."""

from __future__ import annotations

from threading import Lock

import bcrypt

from ..domain.errors import CredentialHashingError

DEFAULT_ROUNDS = 10
# bcrypt only consumes the first 72 bytes of input.
_BCRYPT_MAX_BYTES = 72


def _encode(plaintext: str) -> bytes:
    return plaintext.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class CredentialHasher:
    """One-way salted password hashing with constant-time verification."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        """Store the bcrypt cost factor used for new hashes."""
        self._rounds = rounds
        self._dummy: str | None = None
        self._dummy_lock = Lock()

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, plaintext: str) -> str:
        """Hash ``plaintext`` with a freshly generated salt.

        Two calls with the same input never return the same string.

        Raises
        ------
        CredentialHashingError
            When the bcrypt backend fails; the cause is chained, the message
            carries no credential material.
        """
        try:
            hashed = bcrypt.hashpw(_encode(plaintext), bcrypt.gensalt(rounds=self._rounds))
        except (ValueError, TypeError, MemoryError) as exc:
            raise CredentialHashingError() from exc
        return hashed.decode("ascii")

    def verify(self, plaintext: str, hashed: str) -> bool:
        """Return ``True`` when ``plaintext`` matches ``hashed``.

        Malformed hashes yield ``False`` instead of raising.
        """
        if not hashed:
            return False
        try:
            return bcrypt.checkpw(_encode(plaintext), hashed.encode("ascii"))
        except (ValueError, TypeError):
            return False

    def dummy_hash(self) -> str:
        """Return a throwaway hash used to equalise timing for unknown accounts."""
        if self._dummy is None:
            with self._dummy_lock:
                if self._dummy is None:
                    self._dummy = self.hash("identity-service-timing-placeholder")
        return self._dummy
