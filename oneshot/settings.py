"""Settings using pydantic-settings.

Loads configuration from ONESHOT_* environment variables with .env file support.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Account API endpoint, credentials and runtime knobs."""

    model_config = SettingsConfigDict(
        env_prefix="ONESHOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    base_url: str = Field(
        default="https://reqres.in/api",
        description="Base URL of the account API (login and users endpoints)",
    )
    email: str = Field(default="eve.holt@reqres.in", description="Login email")
    password: SecretStr = Field(default=SecretStr("cityslicka"), description="Login password")
    api_key: SecretStr | None = Field(
        default=None,
        description="Sent as x-api-key when set",
    )
    timeout_seconds: float = Field(default=10.0, gt=0)
    max_workers: int = Field(
        default=4,
        ge=1,
        le=32,
        description="Worker threads for completion-style requests",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
