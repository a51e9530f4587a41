"""License engine configuration loaded from environment variables."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from license_engine.errors import KeyLoadError
from license_engine.keys import (
    load_private_key,
    load_private_key_base64,
    load_public_key,
    load_public_key_base64,
)
from license_engine.signer import Signer
from license_engine.verifier import Verifier

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Key and file locations loaded from environment variables with LICENSE_ prefix.

    A base64 value takes precedence over the matching path when both are set.
    """

    model_config = SettingsConfigDict(
        env_prefix="LICENSE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    debug: bool = False

    # Key material
    private_key_path: Path | None = None
    public_key_path: Path | None = None
    private_key_b64: SecretStr | None = None
    public_key_b64: str | None = None

    # Key generation
    key_size: int = Field(default=2048, ge=1024)

    # Default signature document location
    signature_path: Path = Path("license.json")

    @field_validator("private_key_b64", mode="before")
    @classmethod
    def mask_key_in_repr(cls, v: str | None) -> SecretStr | None:
        if v is None or v == "":
            return None
        if isinstance(v, SecretStr):
            return v
        return SecretStr(v)

    @field_validator("public_key_b64", mode="before")
    @classmethod
    def _empty_public_key_is_unset(cls, v: str | None) -> str | None:
        return v or None

    def has_private_key(self) -> bool:
        return self.private_key_b64 is not None or self.private_key_path is not None

    def has_public_key(self) -> bool:
        return self.public_key_b64 is not None or self.public_key_path is not None

    def load_signer(self) -> Signer:
        """Build a :class:`Signer` from the configured private key.

        Raises
        ------
        KeyLoadError
            If no private key is configured or it cannot be loaded.
        """
        if not self.has_private_key():
            raise KeyLoadError("No private key configured (set LICENSE_PRIVATE_KEY_PATH or LICENSE_PRIVATE_KEY_B64)")
        if self.private_key_b64 is not None:
            return Signer(load_private_key_base64(self.private_key_b64.get_secret_value()))
        return Signer(load_private_key(self.private_key_path))  # type: ignore[arg-type]

    def load_verifier(self) -> Verifier:
        """Build a :class:`Verifier` from the configured public key.

        Raises
        ------
        KeyLoadError
            If no public key is configured or it cannot be loaded.
        """
        if not self.has_public_key():
            raise KeyLoadError("No public key configured (set LICENSE_PUBLIC_KEY_PATH or LICENSE_PUBLIC_KEY_B64)")
        if self.public_key_b64 is not None:
            return Verifier(load_public_key_base64(self.public_key_b64))
        return Verifier(load_public_key(self.public_key_path))  # type: ignore[arg-type]


def load_settings(**overrides: object) -> Settings:
    """Load settings from environment, with optional overrides for testing."""
    settings = Settings(**overrides)  # type: ignore[arg-type]

    if settings.debug:
        logger.info("Loaded license settings (key size %d)", settings.key_size)

    return settings
