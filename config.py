"""
Application configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file).

The owner-id fallback is off unless API_KEYS_ALLOW_OWNER_FALLBACK is set;
demo deployments that relied on the shared fallback owner must opt in.
"""

from __future__ import annotations

from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_FALLBACK_OWNER_ID = "00000000-0000-0000-0000-000000000001"


class DatabaseSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    mongodb_uri: str
    db_name: str = "keygate"
    # Applied to server selection and socket operations
    mongodb_timeout_ms: int = 5000


class ApiKeySettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="API_KEYS_", extra="ignore"
    )

    collection: str = "api_keys"
    allow_owner_fallback: bool = False
    fallback_owner_id: str = DEFAULT_FALLBACK_OWNER_ID
    # Set by the upstream auth layer once the caller is authenticated
    owner_header: str = "X-User-Id"
    issue_max_attempts: int = 3


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production


class SentrySettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    sentry_dsn: str = ""
    sentry_send_pii: bool = False
    sentry_traces_sample_rate: float = 0.1


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    env: str = "development"
    app_name: str = "keygate"

    cors_origins: list[str] = ["*"]

    # OpenAPI docs URL (None disables the docs UI in production)
    docs_url: Optional[str] = "/docs"

    # Sub-configs (composed via model_validator below)
    db: Optional[DatabaseSettings] = None
    api_keys: Optional[ApiKeySettings] = None
    logging: Optional[LoggingSettings] = None
    sentry: Optional[SentrySettings] = None

    @model_validator(mode="after")
    def _populate_sub_configs(self) -> "AppSettings":
        # Populate sub-configs from the same env/dotenv source
        if self.db is None:
            self.db = DatabaseSettings()
        if self.api_keys is None:
            self.api_keys = ApiKeySettings()
        if self.logging is None:
            self.logging = LoggingSettings()
        if self.sentry is None:
            self.sentry = SentrySettings()

        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"
