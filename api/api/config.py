"""API-layer configuration loaded from environment variables."""

from __future__ import annotations

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class APISettings(BaseSettings):
    """FastAPI application settings.

    All values can be overridden via environment variables prefixed with
    ``API_`` (e.g. ``API_PORT=9000``) or through a ``.env`` file in the
    working directory.  Signing and verification keys are configured
    separately through the ``LICENSE_`` variables read by
    :class:`license_engine.config.Settings`.
    """

    model_config = SettingsConfigDict(
        env_prefix="API_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: int = 8080
    debug: bool = False

    # Connection string: sqlite+aiosqlite:///path or postgresql+asyncpg://...
    database_url: str = "sqlite+aiosqlite:///.licenses/state.db"

    # Key expected in the ``API-KEY`` header of license management requests.
    api_key: SecretStr | None = None

    # In production a missing API key is a startup error; in development a
    # random key is generated and logged.
    production: bool = True

    # Structured JSON logging for log aggregation.
    structured_logging: bool = False

    @field_validator("api_key", mode="before")
    @classmethod
    def _empty_key_is_unset(cls, v: object) -> object:
        if v == "":
            return None
        return v


def load_api_settings() -> APISettings:
    """Construct settings from the environment / ``.env`` file."""
    return APISettings()
