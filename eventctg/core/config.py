"""
Configuration management for the EventCTG API.

This module centralizes environment-driven configuration using Pydantic's
`BaseSettings`. Database credentials are mandatory; every other value has a
default so a bare `.env` with `DB_USER` and `DB_PASS` is enough to boot.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, List, Optional
from urllib.parse import quote_plus

from pydantic import AnyUrl, Field, PositiveInt, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from eventctg.core.exceptions import StartupConfigError

REQUIRED_SECRETS = ("DB_USER", "DB_PASS")


class Settings(BaseSettings):
    """Application configuration sourced from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # General application settings
    API_TITLE: str = "EventCTG API"
    API_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: PositiveInt = 4000
    ALLOWED_ORIGINS: Annotated[List[str], NoDecode] = Field(default_factory=lambda: ["*"])

    # Document store
    DB_USER: str = Field(min_length=1)
    DB_PASS: str = Field(min_length=1)
    DB_NAME: str = "event_ctg"
    DB_HOST: str = "simple-crud-server.tdeipi8.mongodb.net"
    DB_SCHEME: str = Field("mongodb+srv", pattern=r"^mongodb(\+srv)?$")
    DB_SERVER_SELECTION_TIMEOUT_MS: PositiveInt = 5000

    # Resource tuning
    LATEST_EVENTS_LIMIT: PositiveInt = 6

    # Tracing
    OTEL_EXPORTER_OTLP_ENDPOINT: Optional[AnyUrl] = None

    @field_validator("ALLOWED_ORIGINS", mode="before")
    def _split_origins(cls, value: str | List[str]) -> List[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @property
    def mongodb_uri(self) -> str:
        """Connection string with percent-encoded credentials."""

        user = quote_plus(self.DB_USER)
        password = quote_plus(self.DB_PASS)
        return (
            f"{self.DB_SCHEME}://{user}:{password}@{self.DB_HOST}/{self.DB_NAME}"
            "?retryWrites=true&w=majority"
        )


def load_settings(**overrides) -> Settings:
    """Build settings, converting missing credentials into a startup error."""

    try:
        return Settings(**overrides)
    except ValidationError as exc:
        missing = sorted(
            {
                str(error["loc"][0])
                for error in exc.errors()
                if error["loc"] and str(error["loc"][0]) in REQUIRED_SECRETS
            }
        )
        if missing:
            raise StartupConfigError(f"Missing {' or '.join(missing)} in environment.") from exc
        raise StartupConfigError(str(exc)) from exc


@lru_cache()
def get_settings() -> Settings:
    """Return a cached `Settings` instance."""

    return load_settings()
