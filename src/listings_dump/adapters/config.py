# src/listings_dump/adapters/config.py
from typing import Any

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from listings_dump.domain.errors import ConfigError

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

class AppConfig(BaseSettings):
    # App & logging
    LOG_LEVEL: str = Field(default="INFO")
    PORT: int = Field(
        default=8080,
        validation_alias=AliasChoices("PORT", "LISTINGS_PORT"),
    )

    # -----------------------------
    # Domain API
    # -----------------------------
    DOMAIN_API_KEY: str | None = Field(default=None)
    DOMAIN_BASE_URL: str = Field(default="https://api.domain.com.au/v1")
    DOMAIN_TIMEOUT_S: float = Field(default=20.0)

    # -----------------------------
    # BigQuery destination
    # -----------------------------
    BIGQUERY_PROJECT_ID: str | None = Field(default=None)
    DATASET: str = Field(default="domain")
    TABLE: str = Field(default="listings_test")
    TABLE_DISPLAY_NAME: str = Field(default="Domain Listings")

    # -----------------------------
    # Search defaults
    # -----------------------------
    STATE: str = Field(default="NSW")
    # one-shot mode only
    SUBURB: str = Field(default="Pyrmont")
    POSTCODE: str | None = Field(default="2009")

    model_config = SettingsConfigDict(
        env_prefix="LISTINGS_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("DOMAIN_API_KEY", "BIGQUERY_PROJECT_ID", "POSTCODE", mode="before")
    @classmethod
    def _blank_is_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _known_log_level(cls, v: Any) -> Any:
        level = str(v).strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @field_validator("STATE", mode="before")
    @classmethod
    def _state_upper(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("DATASET", "TABLE", "SUBURB", mode="before")
    @classmethod
    def _strip(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    def require(self) -> "AppConfig":
        """
        Both modes refuse to start without credentials and a destination.
        """
        if not self.DOMAIN_API_KEY:
            raise ConfigError("--domain_api_key flag required")
        if not self.BIGQUERY_PROJECT_ID:
            raise ConfigError("--bigquery_project_id flag required")
        return self


def load_config(**overrides: Any) -> AppConfig:
    """
    Environment (and .env) first, then any explicit CLI overrides on top.
    Overrides that are None are treated as "not given".
    """
    given = {k: v for k, v in overrides.items() if v is not None}
    return AppConfig(**given)
