"""Pydantic configuration models with validation."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


class JellyfinConfig(BaseModel):
    """Connection to the Jellyfin server (YAML section: jellyfin.*)."""

    url: Optional[str] = Field(
        default=None,
        description="Base URL of the Jellyfin server, e.g. http://jellyfin:8096",
    )
    user_id: Optional[str] = Field(
        default=None,
        description="Jellyfin user whose library is exposed.",
    )
    api_key: Optional[str] = Field(
        default=None,
        description="Jellyfin API key, also embedded in playback URLs.",
    )
    server_name: str = Field(
        default="Jellyfin",
        description="Display name used in stream titles and catalog names.",
    )
    search_limit: int = Field(
        default=20,
        description="Max candidates requested per provider-id search.",
    )

    @field_validator("url")
    @classmethod
    def _strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip().rstrip("/")
        return v or None

    @field_validator("search_limit")
    @classmethod
    def _validate_search_limit(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("jellyfin.search_limit must be > 0")
        return v

    @property
    def configured(self) -> bool:
        return bool(self.url and self.user_id and self.api_key)


class AddonConfig(BaseModel):
    """Stremio manifest values (YAML section: addon.*)."""

    id: str = Field(default="com.streambridge.jellyfin", description="Addon id.")
    version: str = Field(default="0.1.0", description="Addon version.")
    name: str = Field(default="StreamBridge", description="Addon display name.")
    catalog_page_size: int = Field(
        default=50,
        description="Items per catalog page (Stremio paginates with skip).",
    )

    @field_validator("catalog_page_size")
    @classmethod
    def _validate_page_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("addon.catalog_page_size must be > 0")
        return v


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (jellyfin/http/logging/addon).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="streambridge", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # Jellyfin (YAML section: jellyfin.*)
    jellyfin: JellyfinConfig = Field(default_factory=JellyfinConfig)

    # HTTP client (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=10.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="Per-request timeout for calls to Jellyfin.",
    )
    http_follow_redirects: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "http_follow_redirects",
            AliasPath("http", "follow_redirects"),
        ),
        description="Whether HTTP client follows redirects.",
    )
    http_user_agent: str = Field(
        default="StreamBridge/0.1.0",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing HTTP requests.",
    )
    http_retry_max_attempts: int = Field(
        default=2,
        validation_alias=AliasChoices(
            "http_retry_max_attempts",
            AliasPath("http", "retry_max_attempts"),
        ),
        description="Retries on 429/502/503/504 responses (0 = disabled).",
    )
    http_retry_backoff_base: float = Field(
        default=0.5,
        validation_alias=AliasChoices(
            "http_retry_backoff_base",
            AliasPath("http", "retry_backoff_base"),
        ),
        description="Base delay in seconds for exponential backoff.",
    )
    http_retry_max_backoff: float = Field(
        default=10.0,
        validation_alias=AliasChoices(
            "http_retry_max_backoff",
            AliasPath("http", "retry_max_backoff"),
        ),
        description="Upper bound for a single retry delay in seconds.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    # Stremio manifest (YAML section: addon.*)
    addon: AddonConfig = Field(default_factory=AddonConfig)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @field_validator("http_retry_max_attempts")
    @classmethod
    def _validate_retry_attempts(cls, v: int) -> int:
        if v < 0:
            raise ValueError("http_retry_max_attempts must be >= 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.

        The API key is masked.
        """
        jellyfin = self.jellyfin.model_dump()
        if jellyfin.get("api_key"):
            jellyfin["api_key"] = "***"
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "jellyfin": jellyfin,
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "follow_redirects": self.http_follow_redirects,
                "user_agent": self.http_user_agent,
                "retry_max_attempts": self.http_retry_max_attempts,
                "retry_backoff_base": self.http_retry_backoff_base,
                "retry_max_backoff": self.http_retry_max_backoff,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "addon": self.addon.model_dump(),
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Intended usage:
    - load.py creates EnvOverrides() to read STREAMBRIDGE_* variables,
      converts to dict of set values, merges into YAML/defaults,
      then validates AppConfig.

    Supported env var examples (flat, explicit):
    - STREAMBRIDGE_JELLYFIN_URL
    - STREAMBRIDGE_JELLYFIN_API_KEY
    - STREAMBRIDGE_HTTP_TIMEOUT_SECONDS
    - STREAMBRIDGE_LOG_LEVEL
    """

    model_config = SettingsConfigDict(
        env_prefix="STREAMBRIDGE_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    jellyfin_url: Optional[str] = None
    jellyfin_user_id: Optional[str] = None
    jellyfin_api_key: Optional[str] = None
    jellyfin_server_name: Optional[str] = None
    jellyfin_search_limit: Optional[int] = None

    http_timeout_seconds: Optional[float] = None
    http_follow_redirects: Optional[bool] = None
    http_user_agent: Optional[str] = None
    http_retry_max_attempts: Optional[int] = None
    http_retry_backoff_base: Optional[float] = None
    http_retry_max_backoff: Optional[float] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    addon_id: Optional[str] = None
    addon_version: Optional[str] = None
    addon_name: Optional[str] = None
    addon_catalog_page_size: Optional[int] = None

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
