from __future__ import annotations

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env once at module import so every BaseSettings subclass sees the env vars
load_dotenv()


class LongportSettings(BaseSettings):
    """Longport OpenAPI credentials. Env vars prefixed with LONGPORT_."""

    model_config = SettingsConfigDict(env_prefix="LONGPORT_")

    app_key: str  # required, checked on first session construction
    app_secret: str
    access_token: str
    http_url: str | None = None
    quote_ws_url: str | None = None
    trade_ws_url: str | None = None

    @field_validator("app_key", "app_secret", "access_token")
    @classmethod
    def _validate_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Longport credentials must not be empty")
        return v


class LoggingSettings(BaseSettings):
    """Log output settings. Env vars prefixed with LOG_."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = "INFO"
    json_output: bool = True

    @field_validator("level")
    @classmethod
    def _validate_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR"}
        v = v.strip().upper()
        if v not in allowed:
            msg = f"LOG_LEVEL must be one of {sorted(allowed)} (got '{v}')"
            raise ValueError(msg)
        return v


class Settings(BaseSettings):
    """Root settings composing all sub-configurations."""

    model_config = SettingsConfigDict(extra="ignore")

    longport: LongportSettings = Field(default_factory=LongportSettings)


def get_settings() -> Settings:
    """Load and validate settings. Raises ValidationError on missing required fields."""
    return Settings()


def get_logging_settings() -> LoggingSettings:
    """Logging is configured before any credential is needed, so it loads on its own."""
    return LoggingSettings()
