"""
News Desk Configuration

Centralized configuration. All environment variables MUST be read here.
Settings are loaded once by the entry point and injected into components.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_BACKEND_URL = "http://localhost:8000"
API_PREFIX = "/api"


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


def _optional_env(name: str, default: str = "") -> str:
    """Get an optional environment variable with a default."""
    return os.environ.get(name, default)


def _optional_env_int(name: str, default: int) -> int:
    """Get an optional integer environment variable with a default."""
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"Invalid integer value for {name}: {value}")


def _optional_env_float(name: str, default: float) -> float:
    """Get an optional float environment variable with a default."""
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"Invalid number value for {name}: {value}")


def normalize_api_base(url: str) -> str:
    """
    Return the service base URL with the API prefix appended exactly once.

    "http://host:8000" and "http://host:8000/api" both become
    "http://host:8000/api". Trailing slashes are dropped.
    """
    base = (url or DEFAULT_BACKEND_URL).strip().rstrip("/")
    if not base:
        base = DEFAULT_BACKEND_URL
    if base.endswith(API_PREFIX):
        return base
    return f"{base}{API_PREFIX}"


@dataclass(frozen=True)
class ApiConfig:
    """News service connection configuration."""
    backend_url: str = DEFAULT_BACKEND_URL
    timeout_seconds: float = 10.0

    @property
    def base_url(self) -> str:
        """Backend URL including the API prefix."""
        return normalize_api_base(self.backend_url)


@dataclass(frozen=True)
class SearchConfig:
    """Company search configuration."""
    debounce_ms: int = 260
    max_suggestions: int = 6

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0


@dataclass(frozen=True)
class ViewConfig:
    """Initial view and refresh behaviour."""
    default_category: str = "ALL"
    auto_refresh_seconds: int = 120  # 0 = disabled


@dataclass(frozen=True)
class TelemetryConfig:
    """Error reporting configuration."""
    redis_url: str = ""
    error_channel: str = "news_desk:errors"

    @property
    def redis_enabled(self) -> bool:
        return bool(self.redis_url)


@dataclass(frozen=True)
class Settings:
    """Root configuration container."""
    api: ApiConfig = field(default_factory=ApiConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    view: ViewConfig = field(default_factory=ViewConfig)
    telemetry: TelemetryConfig = field(default_factory=TelemetryConfig)
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Load all settings from environment variables."""
    api = ApiConfig(
        backend_url=_optional_env("NEWS_DESK_BACKEND_URL", DEFAULT_BACKEND_URL),
        timeout_seconds=_optional_env_float("NEWS_DESK_TIMEOUT_SECONDS", 10.0),
    )
    if api.timeout_seconds <= 0:
        raise ConfigurationError(
            f"NEWS_DESK_TIMEOUT_SECONDS must be positive, got {api.timeout_seconds}"
        )

    search = SearchConfig(
        debounce_ms=_optional_env_int("NEWS_DESK_DEBOUNCE_MS", 260),
        max_suggestions=_optional_env_int("NEWS_DESK_MAX_SUGGESTIONS", 6),
    )
    if search.debounce_ms < 0:
        raise ConfigurationError(
            f"NEWS_DESK_DEBOUNCE_MS must not be negative, got {search.debounce_ms}"
        )

    view = ViewConfig(
        default_category=_optional_env("NEWS_DESK_DEFAULT_CATEGORY", "ALL"),
        auto_refresh_seconds=_optional_env_int("NEWS_DESK_AUTO_REFRESH_SECONDS", 120),
    )

    telemetry = TelemetryConfig(
        redis_url=_optional_env("NEWS_DESK_REDIS_URL", ""),
        error_channel=_optional_env("NEWS_DESK_ERROR_CHANNEL", "news_desk:errors"),
    )

    return Settings(
        api=api,
        search=search,
        view=view,
        telemetry=telemetry,
        log_level=_optional_env("NEWS_DESK_LOG_LEVEL", "INFO").upper(),
    )
