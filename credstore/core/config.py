"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# bcrypt accepts cost factors 4..31 (2^rounds iterations).
BCRYPT_MIN_ROUNDS = 4
BCRYPT_MAX_ROUNDS = 31

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod", "test"] = "dev"
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"

    HOST: str = "127.0.0.1"
    PORT: int = 3000

    # Cost factor for bcrypt.gensalt; 10 keeps a login around 100ms on commodity hardware.
    BCRYPT_ROUNDS: int = 10

    LOG_LEVEL: str = "INFO"

    @field_validator("API_V1_PREFIX")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith("/"):
            raise ValueError("API_V1_PREFIX must start with '/' (e.g. /api/v1)")
        return v.rstrip("/")

    @field_validator("HOST")
    @classmethod
    def validate_host(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("HOST must be set and non-empty")
        return v.strip()

    @field_validator("PORT")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if v < 1 or v > 65535:
            raise ValueError("PORT must be between 1 and 65535")
        return v

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        if v < BCRYPT_MIN_ROUNDS or v > BCRYPT_MAX_ROUNDS:
            raise ValueError(
                f"BCRYPT_ROUNDS must be between {BCRYPT_MIN_ROUNDS} and {BCRYPT_MAX_ROUNDS}"
            )
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(
                "LOG_LEVEL must be a standard logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
            )
        return level


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()


settings = get_settings()
