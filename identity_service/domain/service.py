"""Auth engine orchestrating the account store, password hashing, and tokens."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from .account import PublicAccount
from .contracts import LoginResult, NewAccount, RegistrationResult
from .errors import (
    AccountDisabled,
    AccountNotFound,
    DuplicateEmail,
    DuplicateUsername,
    InvalidCredentials,
)
from ..security.passwords import CredentialHasher
from ..security.tokens import TokenIssuer
from ..store import UserStore

logger = logging.getLogger(__name__)

REGISTERED_MESSAGE = "user registered successfully"
LOGIN_MESSAGE = "login successful"


class AuthEngine:
    """Register, login, and profile workflows over an in-memory user store."""

    def __init__(
        self,
        store: UserStore,
        tokens: TokenIssuer,
        hasher: CredentialHasher | None = None,
        *,
        disclose_disabled: bool = True,
    ) -> None:
        """Store collaborators used to orchestrate persistence and token issuance.

        ``disclose_disabled`` controls whether a deactivated account gets its
        own error at login or the generic invalid-credentials one.
        """
        self._store = store
        self._tokens = tokens
        self._hasher = hasher or CredentialHasher()
        self._disclose_disabled = disclose_disabled

    def register(self, username: str, email: str, password: str) -> RegistrationResult:
        """Create an account and return it without its password hash.

        Raises
        ------
        DuplicateEmail
            The email is already registered; checked before the username.
        DuplicateUsername
            The username is already taken.
        """
        if self._store.find_by_email(email) is not None:
            raise DuplicateEmail()
        if self._store.find_by_username(username) is not None:
            raise DuplicateUsername()

        password_hash = self._hasher.hash(password)
        # The store repeats both checks atomically with the insert.
        account = self._store.create(
            NewAccount(
                username=username,
                email=email,
                password_hash=password_hash,
                is_active=True,
                updated_at=datetime.now(timezone.utc),
            )
        )
        logger.info("registered account %s", account.id)
        return RegistrationResult(message=REGISTERED_MESSAGE, user=account.public())

    def login(self, email: str, password: str) -> LoginResult:
        """Authenticate credentials and issue an access token.

        Unknown emails and wrong passwords both raise
        :class:`InvalidCredentials` with the same message. Every rejection,
        including a disabled account, pays for one bcrypt verification.
        """
        account = self._store.find_by_email(email)
        if account is None:
            self._hasher.verify(password, self._hasher.dummy_hash())
            logger.info("login rejected: invalid credentials")
            raise InvalidCredentials()

        if not account.is_active:
            # Same bcrypt cost as the other rejection paths.
            self._hasher.verify(password, account.password_hash)
            logger.info("login rejected: account %s disabled", account.id)
            if self._disclose_disabled:
                raise AccountDisabled()
            raise InvalidCredentials()

        if not self._hasher.verify(password, account.password_hash):
            logger.info("login rejected: invalid credentials")
            raise InvalidCredentials()

        token = self._tokens.issue(self._tokens.build_claims(account))
        logger.info("issued access token for account %s", account.id)
        return LoginResult(message=LOGIN_MESSAGE, access_token=token, user=account.public())

    def get_profile(self, account_id: int) -> PublicAccount:
        """Return the account identified by a verified token subject."""
        account = self._store.find_by_id(account_id)
        if account is None:
            raise AccountNotFound()
        return account.public()

    def authenticate(self, token: str) -> PublicAccount:
        """Resolve a bearer token to the profile of its subject."""
        claims = self._tokens.verify(token)
        return self.get_profile(claims.subject)

    def list_accounts(self) -> list[PublicAccount]:
        return self._store.list_all()

    def find_account(self, account_id: int) -> PublicAccount:
        return self.get_profile(account_id)

    def set_active(self, account_id: int, is_active: bool) -> PublicAccount:
        """Activate or deactivate an account."""
        account = self._store.set_active(account_id, is_active)
        if account is None:
            raise AccountNotFound()
        logger.info("account %s active=%s", account.id, account.is_active)
        return account.public()
