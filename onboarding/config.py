"""
Configuration Management

Pydantic-settings based configuration for the onboarding integration.
Settings are assembled once per process and passed explicitly into the
API clients; nothing else reads the environment.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Variable names are case-insensitive and unprefixed so the Lambda's
    existing secrets (PINPOINT_API_KEY, HIBOB_BASE64_TOKEN) are picked up
    as-is.
    """

    model_config = SettingsConfigDict(
        env_file=[".env.local", ".env"],  # Try .env.local first
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Pinpoint (applicant tracking)
    pinpoint_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="API key sent in the x-api-key header",
    )
    pinpoint_api_base_url: str = Field(
        default="https://developers-test.pinpointhq.com/api/v1",
        description="Pinpoint API base URL",
    )

    # HiBob (HR platform)
    hibob_base64_token: SecretStr = Field(
        default=SecretStr(""),
        description="Pre-encoded base64 'service-user:token' pair for Basic auth",
    )
    hibob_api_base_url: str = Field(
        default="https://api.hibob.com/v1",
        description="HiBob API base URL",
    )
    hibob_default_site: str = Field(
        default="New York (Demo)",
        description="Work site assigned to newly created employees",
    )

    # HTTP
    http_connect_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Seconds allowed to establish a connection",
    )
    http_read_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Seconds allowed to wait for a response",
    )

    # Application Configuration
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    @property
    def pinpoint_headers(self) -> dict[str, str]:
        """Authentication headers for Pinpoint requests."""
        return {"x-api-key": self.pinpoint_api_key.get_secret_value()}

    @property
    def hibob_headers(self) -> dict[str, str]:
        """Authentication headers for HiBob requests."""
        return {"Authorization": f"Basic {self.hibob_base64_token.get_secret_value()}"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are loaded only once.
    Call get_settings.cache_clear() in tests after changing the environment.
    """
    return Settings()
