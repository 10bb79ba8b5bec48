"""Application settings using Pydantic Settings for environment-based configuration."""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, RedisDsn
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/69.0.3497.100 Safari/537.36"
)


class Settings(BaseSettings):
    """
    Central configuration for the pgn-mule relay.

    All settings can be overridden via environment variables.
    Prefix is not used so the historical variable names (PGN_MULE_COOKIE,
    SLOW_POLL_RATE_SECONDS, ...) keep working.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Redis
    redis_url: RedisDsn = Field(default="redis://localhost:6379/0")
    key_namespace: str = "pgnmule"

    # Upstream fetch
    upstream_cookie: str = Field(
        default="",
        validation_alias=AliasChoices("pgn_mule_cookie", "upstream_cookie"),
    )
    upstream_user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        validation_alias=AliasChoices("pgn_mule_ua", "upstream_user_agent"),
    )
    upstream_timeout_seconds: float = Field(default=30.0, ge=1.0, le=300.0)

    # Public address used when formatting exposed URLs
    public_scheme: str = "http"
    public_host: str = "localhost"
    public_port: int = 3000

    # API server
    api_host: str = "0.0.0.0"
    api_port: int = 3000

    # Polling policy
    default_update_freq_seconds: int = Field(default=10, ge=1)
    slow_poll_rate_seconds: float = Field(default=60.0, ge=1.0)
    minutes_inactivity_slowdown: float = Field(default=30.0, ge=0.0)
    minutes_inactivity_die: float = Field(default=1440.0, ge=0.0)
    delay_max_seconds: int = Field(default=3600, ge=0)

    # Zulip notifications (log-only when unset)
    zulip_realm: str | None = None
    zulip_username: str | None = None
    zulip_api_key: str | None = None
    zulip_stream: str = "broadcast"
    zulip_topic: str = "pgn-mule"

    # Observability
    metrics_port: int = 8000

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def zulip_configured(self) -> bool:
        """Check if Zulip credentials are present."""
        return all([self.zulip_realm, self.zulip_username, self.zulip_api_key])

    @property
    def public_base_url(self) -> str:
        """Base URL consumers use to reach the relay."""
        return f"{self.public_scheme}://{self.public_host}:{self.public_port}"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once.
    Clear cache with get_settings.cache_clear() if needed.
    """
    return Settings()
