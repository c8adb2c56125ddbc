"""
Shared configuration management for the Identity Access service.
"""

from typing import List, Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

GOOGLE_CERTS_URL = (
    "https://www.googleapis.com/robot/v1/metadata/x509/"
    "securetoken@system.gserviceaccount.com"
)


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Environment
    app_env: str = "local"
    log_level: str = "info"

    # Server
    host: str = "0.0.0.0"
    port: int


class ServiceConfig(BaseConfig):
    """Identity service configuration.

    Field names double as environment variable names (case-insensitive),
    so ``firebase_project_id`` is read from ``FIREBASE_PROJECT_ID``.
    """

    # Identity provider
    firebase_project_id: str = Field(min_length=1)
    firebase_api_key: str = Field(min_length=1)
    firebase_auth_domain: str = Field(min_length=1)
    firebase_auth_emulator_host: Optional[str] = None

    # Signing keys
    google_certs_url: str = GOOGLE_CERTS_URL
    certs_http_timeout: float = Field(default=10.0, gt=0)
    token_clock_skew_seconds: int = Field(default=0, ge=0)

    @property
    def expected_audience(self) -> str:
        return self.firebase_project_id

    @property
    def emulator_enabled(self) -> bool:
        """Emulator mode is on whenever a non-blank emulator host is set."""
        return bool(self.firebase_auth_emulator_host and self.firebase_auth_emulator_host.strip())


def get_config(**overrides) -> ServiceConfig:
    """Load configuration from the environment; keyword overrides win."""
    return ServiceConfig(**overrides)


def missing_settings(error: ValidationError) -> List[str]:
    """Return the environment variable names behind a failed config load."""
    names = []
    for item in error.errors():
        if item.get("loc"):
            name = str(item["loc"][0]).upper()
            if name not in names:
                names.append(name)
    return names
