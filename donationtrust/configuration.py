"""Mini README: Centralised configuration for DonationTrust.

Structure:
    * DonationTrustSettings - Pydantic settings model read from the environment.
    * get_settings - cached accessor used by the CLI and the web factory.

Usage:
    Every field can be overridden with a ``DONATIONTRUST_`` prefixed
    environment variable or a ``.env`` file, e.g.
    ``DONATIONTRUST_JWT_SECRET=...`` or ``DONATIONTRUST_DATABASE_URL=...``.
    Tests build ``DonationTrustSettings`` directly instead of going through
    the cache.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class DonationTrustSettings(BaseSettings):
    """Runtime configuration for the donation ledger service."""

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    data_directory: Path = Field(
        Path("data"),
        description="Directory holding the default SQLite database file.",
    )
    database_url: Optional[str] = Field(
        None,
        description=(
            "SQLAlchemy database URL. Leave unset to use donations.db inside"
            " the data directory."
        ),
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the web service to bind to.",
    )
    interface_port: int = Field(
        3000,
        description="Port the web service exposes.",
        ge=1,
        le=65535,
    )
    jwt_secret: str = Field(
        "donation-transparency-secret-key",
        description="HMAC secret used to sign admin credentials.",
    )
    token_ttl_hours: int = Field(
        24,
        description="Validity window of an issued admin credential, in hours.",
        ge=1,
    )
    default_admin_username: str = Field(
        "admin",
        description="Username of the admin account created on first start.",
    )
    default_admin_password: str = Field(
        "admin123",
        description="Initial password of the default admin account.",
    )
    bcrypt_rounds: int = Field(
        10,
        description="bcrypt cost factor applied when hashing admin passwords.",
        ge=4,
        le=31,
    )
    currency_symbol: str = Field(
        "৳",
        description="Symbol prefixed to amounts on the rendered pages.",
    )

    class Config:
        env_prefix = "DONATIONTRUST_"
        env_file = ".env"
        case_sensitive = False

    @validator("data_directory", pre=True)
    def _expand_path(cls, value: Optional[str | Path]) -> Path:
        """Ensure configured paths expand user directories and exist."""

        path = Path(value).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def resolved_database_url(self) -> str:
        """Return the configured database URL or the file-backed default."""

        if self.database_url:
            return self.database_url
        return f"sqlite:///{self.data_directory / 'donations.db'}"


@lru_cache()
def get_settings() -> DonationTrustSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return DonationTrustSettings()
