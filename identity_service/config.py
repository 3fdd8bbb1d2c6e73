from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str) -> tuple[str, ...]:
    raw = os.getenv(name, "")
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    """Runtime configuration values exposed to FastAPI components."""

    app_name: str = "identity-service"
    version: str = "0.1.0"
    http_host: str = os.getenv("HTTP_HOST", "0.0.0.0")
    http_port: int = int(os.getenv("HTTP_PORT", "8000"))
    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret-change-me")
    jwt_issuer: str = os.getenv("JWT_ISSUER", "identity-service")
    jwt_ttl_seconds: int = int(os.getenv("JWT_TTL_SECONDS", "86400"))
    bcrypt_rounds: int = int(os.getenv("BCRYPT_ROUNDS", "10"))
    disclose_disabled: bool = _env_flag("AUTH_DISCLOSE_DISABLED", "true")
    cors_origins: tuple[str, ...] = _env_list("CORS_ORIGINS")
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached Settings instance for the running process."""
    return Settings()
