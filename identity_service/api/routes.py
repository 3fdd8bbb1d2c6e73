"""HTTP route definitions for the identity service."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from .. import metrics
from ..domain.account import PublicAccount
from ..domain.errors import ErrorKind, IdentityError, InvalidToken, ValidationFailed
from ..domain.service import AuthEngine
from ..domain.validation import validate_login, validate_registration

logger = logging.getLogger(__name__)

router = APIRouter()

_bearer_scheme = HTTPBearer(auto_error=False)

_STATUS_BY_KIND = {
    ErrorKind.conflict: status.HTTP_409_CONFLICT,
    ErrorKind.unauthorized: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.not_found: status.HTTP_404_NOT_FOUND,
    ErrorKind.invalid: status.HTTP_400_BAD_REQUEST,
    ErrorKind.internal: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class AccountResponse(BaseModel):
    """Serialised representation of a `PublicAccount`."""

    id: int
    username: str
    email: str
    is_active: bool
    created_at: str
    updated_at: str

    @classmethod
    def from_domain(cls, account: PublicAccount) -> "AccountResponse":
        """Build a response model from the domain projection."""
        return cls(**account.as_dict())


class RegisterRequest(BaseModel):
    """Payload accepted when registering an account."""

    username: str
    email: str
    password: str


class RegisterResponse(BaseModel):
    message: str
    user: AccountResponse


class LoginRequest(BaseModel):
    """Credentials submitted to obtain an access token."""

    email: str
    password: str


class LoginResponse(BaseModel):
    """Token issuance response containing the bearer token and the account."""

    message: str
    access_token: str
    user: AccountResponse


def get_engine(request: Request) -> AuthEngine:
    """Resolve the `AuthEngine` stored on the FastAPI application state."""
    engine: AuthEngine = request.app.state.auth_engine
    return engine


def get_current_account(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    engine: AuthEngine = Depends(get_engine),
) -> PublicAccount:
    """Verify the bearer token and return the account it identifies."""
    try:
        if credentials is None:
            raise InvalidToken()
        account = engine.authenticate(credentials.credentials)
    except IdentityError as exc:
        metrics.record("profile", exc.code)
        raise _http_error_from_identity_error(exc) from exc
    return account


@router.post("/auth/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    engine: AuthEngine = Depends(get_engine),
) -> RegisterResponse:
    """Register a new account."""
    try:
        violations = validate_registration(payload.username, payload.email, payload.password)
        if violations:
            raise ValidationFailed(violations)
        result = engine.register(payload.username, payload.email, payload.password)
    except IdentityError as exc:
        metrics.record("register", exc.code)
        raise _http_error_from_identity_error(exc) from exc

    metrics.record("register", "success")
    metrics.ACCOUNTS_REGISTERED.inc()
    return RegisterResponse(message=result.message, user=AccountResponse.from_domain(result.user))


@router.post("/auth/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    engine: AuthEngine = Depends(get_engine),
) -> LoginResponse:
    """Exchange credentials for a signed access token."""
    try:
        violations = validate_login(payload.email, payload.password)
        if violations:
            raise ValidationFailed(violations)
        result = engine.login(payload.email, payload.password)
    except IdentityError as exc:
        metrics.record("login", exc.code)
        raise _http_error_from_identity_error(exc) from exc

    metrics.record("login", "success")
    return LoginResponse(
        message=result.message,
        access_token=result.access_token,
        user=AccountResponse.from_domain(result.user),
    )


@router.get("/auth/profile", response_model=AccountResponse)
def profile(account: PublicAccount = Depends(get_current_account)) -> AccountResponse:
    """Return the profile of the authenticated account."""
    metrics.record("profile", "success")
    return AccountResponse.from_domain(account)


@router.get("/users", response_model=list[AccountResponse])
def list_users(engine: AuthEngine = Depends(get_engine)) -> list[AccountResponse]:
    return [AccountResponse.from_domain(account) for account in engine.list_accounts()]


@router.get("/users/{account_id}", response_model=AccountResponse)
def get_user(account_id: int, engine: AuthEngine = Depends(get_engine)) -> AccountResponse:
    """Retrieve a single account by id."""
    try:
        account = engine.find_account(account_id)
    except IdentityError as exc:
        raise _http_error_from_identity_error(exc) from exc
    return AccountResponse.from_domain(account)


def _http_error_from_identity_error(exc: IdentityError) -> HTTPException:
    status_code = _STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if exc.kind is ErrorKind.internal:
        logger.error("internal failure: %s", type(exc).__name__, exc_info=exc)
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return HTTPException(status_code=status_code, detail=exc.to_dict(), headers=headers)
