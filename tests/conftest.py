from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from identity_service.api import routes
from identity_service.domain.service import AuthEngine
from identity_service.security.passwords import CredentialHasher
from identity_service.security.tokens import TokenIssuer
from identity_service.store import UserStore

TEST_SECRET = "test-secret"
TEST_ISSUER = "identity-service-tests"


@pytest.fixture
def store() -> UserStore:
    return UserStore()


@pytest.fixture
def hasher() -> CredentialHasher:
    # Minimum bcrypt cost keeps the suite fast.
    return CredentialHasher(rounds=4)


@pytest.fixture
def issuer() -> TokenIssuer:
    return TokenIssuer(TEST_SECRET, issuer=TEST_ISSUER)


@pytest.fixture
def engine(store, issuer, hasher) -> AuthEngine:
    return AuthEngine(store, issuer, hasher)


@pytest.fixture
def api_client(engine):
    """Provide a FastAPI test client with isolated state."""
    app = FastAPI()
    app.include_router(routes.router)
    app.state.auth_engine = engine

    with TestClient(app) as client:
        yield client, engine
