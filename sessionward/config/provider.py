"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass
from typing import Optional, Protocol

from ..modules.errors import ConfigurationError


@dataclass
class SessionConfig:
    """Session lifecycle configuration."""
    provider: str
    cookie_name: str
    max_lifetime: int
    gc_interval: Optional[int]


@dataclass
class APIConfig:
    """API configuration."""
    port: int
    host: str
    debug: bool
    log_level: str


@dataclass
class RedisConfig:
    """Redis connection configuration."""
    url: str
    enabled: bool


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_session_config(self) -> SessionConfig:
        """Get session configuration."""
        ...

    def get_api_config(self) -> APIConfig:
        """Get API configuration."""
        ...

    def get_redis_config(self) -> RedisConfig:
        """Get Redis configuration."""
        ...


def _int_env(name: str, default: Optional[int], minimum: int = 0) -> Optional[int]:
    """Parse an integer environment variable, rejecting garbage loudly."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(
            f"{name} must be an integer", details={"variable": name, "value": raw}
        )
    if value < minimum:
        raise ConfigurationError(
            f"{name} must be >= {minimum}", details={"variable": name, "value": value}
        )
    return value


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_session_config(self) -> SessionConfig:
        """Get session configuration from environment variables."""
        return SessionConfig(
            provider=os.getenv("SESSION_PROVIDER", "memory"),
            cookie_name=os.getenv("SESSION_COOKIE_NAME", "gosessionid"),
            max_lifetime=_int_env("SESSION_MAX_LIFETIME", 3600),
            gc_interval=_int_env("SESSION_GC_INTERVAL", None, minimum=1),
        )

    def get_api_config(self) -> APIConfig:
        """Get API configuration from environment variables."""
        return APIConfig(
            port=_int_env("API_PORT", 8080, minimum=1),
            host=os.getenv("API_HOST", "0.0.0.0"),
            debug=os.getenv("API_DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def get_redis_config(self) -> RedisConfig:
        """Get Redis configuration from environment variables."""
        return RedisConfig(
            url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
            enabled=os.getenv("SESSION_PROVIDER", "memory") == "redis",
        )
