"""Pydantic configuration models with validation."""

from __future__ import annotations

from pathlib import Path
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
CacheBackend = Literal["memory", "diskcache"]

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/131.0.0.0 Safari/537.36"
)


def _normalize_path(value: Any) -> Path:
    """
    Normalize a path-like value without causing filesystem side-effects.

    This function MUST NOT create directories or files.
    """
    if isinstance(value, Path):
        return value.expanduser()
    if isinstance(value, str):
        return Path(value).expanduser()
    raise TypeError(f"Expected path-like value, got: {type(value)!r}")


def _field(flat: str, section: str, key: str, **kwargs: Any) -> Any:
    """Field readable both as flat key and as ``section.key``."""
    return Field(
        validation_alias=AliasChoices(flat, AliasPath(section, key)),
        **kwargs,
    )


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (upstream/tmdb/enrichment/sources/logging/cache).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="flixscrape", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # Scraped site (YAML section: upstream.*)
    upstream_base_url: str = _field(
        "upstream_base_url",
        "upstream",
        "base_url",
        default="https://flixhq-tv.lol",
        description="Origin of the scraped streaming site.",
    )
    upstream_timeout_seconds: float = _field(
        "upstream_timeout_seconds",
        "upstream",
        "timeout_seconds",
        default=15.0,
        description="Timeout for each upstream request (seconds).",
    )
    upstream_max_redirects: int = _field(
        "upstream_max_redirects",
        "upstream",
        "max_redirects",
        default=5,
        description="Redirects followed per upstream request.",
    )
    upstream_user_agent: str = _field(
        "upstream_user_agent",
        "upstream",
        "user_agent",
        default=DEFAULT_USER_AGENT,
        description="Browser User-Agent sent to the scraped site.",
    )

    # TMDB enrichment (YAML section: tmdb.*)
    tmdb_api_key: Optional[str] = _field(
        "tmdb_api_key",
        "tmdb",
        "api_key",
        default=None,
        description="TMDB API key. Unset = enrichment always returns null.",
    )
    tmdb_timeout_seconds: float = _field(
        "tmdb_timeout_seconds",
        "tmdb",
        "timeout_seconds",
        default=5.0,
        description="Timeout for TMDB search requests (seconds).",
    )
    tmdb_language: str = _field(
        "tmdb_language",
        "tmdb",
        "language",
        default="en-US",
        description="TMDB search locale.",
    )

    # Enrichment (YAML section: enrichment.*)
    enrichment_enabled: bool = _field(
        "enrichment_enabled",
        "enrichment",
        "enabled",
        default=True,
        description="Attach TMDB ids to listing items.",
    )
    enrichment_max_concurrent: int = _field(
        "enrichment_max_concurrent",
        "enrichment",
        "max_concurrent",
        default=5,
        description="Max parallel TMDB lookups per request.",
    )

    # Source extraction (YAML section: sources.*)
    sources_debug: bool = _field(
        "sources_debug",
        "sources",
        "debug",
        default=False,
        description="Always attach extraction diagnostics to source responses.",
    )
    sources_probe_timeout_seconds: float = _field(
        "sources_probe_timeout_seconds",
        "sources",
        "probe_timeout_seconds",
        default=8.0,
        description="Timeout per probed API endpoint (seconds).",
    )
    sources_max_probe_endpoints: int = _field(
        "sources_max_probe_endpoints",
        "sources",
        "max_probe_endpoints",
        default=5,
        description="Max API endpoints probed per extraction.",
    )
    sources_max_probe_depth: int = _field(
        "sources_max_probe_depth",
        "sources",
        "max_probe_depth",
        default=2,
        description="How deep probing follows endpoints found in probe responses.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = _field(
        "log_level",
        "logging",
        "level",
        default="INFO",
        description="Log level.",
    )
    log_format: Optional[LogFormat] = _field(
        "log_format",
        "logging",
        "format",
        default=None,
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    # Cache (YAML section: cache.*)
    cache_backend: CacheBackend = _field(
        "cache_backend",
        "cache",
        "backend",
        default="memory",
        description="Cache backend: 'memory' (bounded LRU) or 'diskcache' (SQLite).",
    )
    cache_dir: Path = _field(
        "cache_dir",
        "cache",
        "dir",
        default=Path("./.cache/flixscrape"),
        description="Cache directory (diskcache backend only).",
    )
    cache_ttl_seconds: int = _field(
        "cache_ttl_seconds",
        "cache",
        "ttl_seconds",
        default=86_400,
        description="TTL of metadata cache entries (seconds).",
    )
    cache_max_entries: int = _field(
        "cache_max_entries",
        "cache",
        "max_entries",
        default=10_000,
        description="Upper bound on cached entries before eviction.",
    )

    @field_validator("cache_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Path:
        return _normalize_path(v)

    @field_validator("upstream_base_url")
    @classmethod
    def _validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("upstream_base_url must be an http(s) URL")
        return v.rstrip("/")

    @field_validator(
        "upstream_timeout_seconds",
        "tmdb_timeout_seconds",
        "sources_probe_timeout_seconds",
    )
    @classmethod
    def _validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be > 0")
        return v

    @field_validator(
        "upstream_max_redirects",
        "sources_max_probe_endpoints",
        "sources_max_probe_depth",
        "cache_ttl_seconds",
    )
    @classmethod
    def _validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("value must be >= 0")
        return v

    @field_validator("enrichment_max_concurrent", "cache_max_entries")
    @classmethod
    def _validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("value must be > 0")
        return v

    @field_validator("tmdb_api_key")
    @classmethod
    def _blank_key_is_none(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
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

        The TMDB API key is masked.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "upstream": {
                "base_url": self.upstream_base_url,
                "timeout_seconds": self.upstream_timeout_seconds,
                "max_redirects": self.upstream_max_redirects,
                "user_agent": self.upstream_user_agent,
            },
            "tmdb": {
                "api_key": "***" if self.tmdb_api_key else None,
                "timeout_seconds": self.tmdb_timeout_seconds,
                "language": self.tmdb_language,
            },
            "enrichment": {
                "enabled": self.enrichment_enabled,
                "max_concurrent": self.enrichment_max_concurrent,
            },
            "sources": {
                "debug": self.sources_debug,
                "probe_timeout_seconds": self.sources_probe_timeout_seconds,
                "max_probe_endpoints": self.sources_max_probe_endpoints,
                "max_probe_depth": self.sources_max_probe_depth,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "cache": {
                "backend": self.cache_backend,
                "dir": str(self.cache_dir),
                "ttl_seconds": self.cache_ttl_seconds,
                "max_entries": self.cache_max_entries,
            },
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Intended usage:
    - load.py creates EnvOverrides() to read FLIXSCRAPE_* variables,
      converts to dict of set values, merges into YAML/defaults,
      then validates AppConfig.

    Supported env var examples (flat, explicit):
    - FLIXSCRAPE_UPSTREAM_BASE_URL
    - FLIXSCRAPE_LOG_LEVEL
    - FLIXSCRAPE_CACHE_BACKEND
    - FLIXSCRAPE_TMDB_API_KEY (plain TMDB_API_KEY is accepted too)
    """

    model_config = SettingsConfigDict(
        env_prefix="FLIXSCRAPE_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    upstream_base_url: Optional[str] = None
    upstream_timeout_seconds: Optional[float] = None
    upstream_max_redirects: Optional[int] = None
    upstream_user_agent: Optional[str] = None

    tmdb_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("flixscrape_tmdb_api_key", "tmdb_api_key"),
    )
    tmdb_timeout_seconds: Optional[float] = None
    tmdb_language: Optional[str] = None

    enrichment_enabled: Optional[bool] = None
    enrichment_max_concurrent: Optional[int] = None

    sources_debug: Optional[bool] = None
    sources_probe_timeout_seconds: Optional[float] = None
    sources_max_probe_endpoints: Optional[int] = None
    sources_max_probe_depth: Optional[int] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    cache_backend: Optional[CacheBackend] = None
    cache_dir: Optional[Path] = None
    cache_ttl_seconds: Optional[int] = None
    cache_max_entries: Optional[int] = None

    @field_validator("cache_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Any:
        if v is None:
            return None
        return _normalize_path(v)

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
