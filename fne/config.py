"""Client Configuration - environment-driven settings via pydantic-settings.

Invariants:
    - Settings are only read when a caller asks for them (get_settings / FneClient.from_settings);
      FneClient itself never consults the environment
    - get_settings() is cached (lru_cache): single instance per process
    - Env vars use the FNE_ prefix (FNE_API_KEY, FNE_BASE_URL, FNE_TIMEOUT_MS, ...)

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults target the test environment; production needs an explicit base_url
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fne.core.constants import (
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_TIMEOUT_MS,
    MIN_API_KEY_LENGTH,
    TEST_BASE_URL,
)


class FneSettings(BaseSettings):
    """FNE client settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FNE_", env_file=".env", case_sensitive=False, extra="ignore",
    )

    # Service
    api_key: str = ""
    base_url: str = TEST_BASE_URL
    test_mode: bool = True

    # Pipeline
    timeout_ms: int = Field(DEFAULT_TIMEOUT_MS, gt=0)
    retry_attempts: int = Field(DEFAULT_RETRY_ATTEMPTS, ge=1)
    min_api_key_length: int = Field(MIN_API_KEY_LENGTH, ge=0)

    # Observability
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")


@lru_cache
def get_settings() -> FneSettings:
    return FneSettings()
