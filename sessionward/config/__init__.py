"""Configuration access for Sessionward."""

from .provider import APIConfig, ConfigProvider, EnvConfigProvider, RedisConfig, SessionConfig

__all__ = ["APIConfig", "ConfigProvider", "EnvConfigProvider", "RedisConfig", "SessionConfig"]
