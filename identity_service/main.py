"""FastAPI application wiring for the identity service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from .api.routes import router
from .config import Settings, get_settings
from .domain.service import AuthEngine
from .security.passwords import CredentialHasher
from .security.tokens import TokenIssuer
from .store import UserStore

logger = logging.getLogger(__name__)


def build_engine(settings: Settings) -> AuthEngine:
    """Assemble the auth engine and its collaborators from settings."""
    return AuthEngine(
        UserStore(),
        TokenIssuer(
            settings.jwt_secret,
            ttl_seconds=settings.jwt_ttl_seconds,
            issuer=settings.jwt_issuer,
        ),
        CredentialHasher(rounds=settings.bcrypt_rounds),
        disclose_disabled=settings.disclose_disabled,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application; the engine lives for the app lifecycle."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.auth_engine = build_engine(settings)
        logger.info("%s %s ready", settings.app_name, settings.version)
        yield

    app = FastAPI(title=settings.app_name, version=settings.version, lifespan=lifespan)

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.cors_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            max_age=600,
        )

    @app.get("/healthz", tags=["health"])
    def healthz() -> dict[str, str]:
        """Return a minimal readiness indicator used by orchestration systems."""
        return {"status": "ok"}

    @app.get("/metrics", tags=["health"])
    def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(router)
    return app


def run() -> None:
    """Console entry point serving the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    uvicorn.run(create_app(settings), host=settings.http_host, port=settings.http_port)


app = create_app()
